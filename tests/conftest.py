"""测试配置和 fixtures."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from hnsignal.config import Settings
from hnsignal.core.repository import ArticleRepository
from hnsignal.models.article import Article
from hnsignal.models.database import create_engine, create_session_factory

SEED_URL = "https://news.ycombinator.com/"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """创建测试用的内存数据库会话工厂."""
    engine = create_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def repository(session_factory: async_sessionmaker[AsyncSession]) -> ArticleRepository:
    """创建测试用的文章仓库."""
    return ArticleRepository(session_factory)


@pytest.fixture
def settings() -> Settings:
    """创建测试用的配置（不读取 .env）."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url="sqlite+aiosqlite:///:memory:",
        hn_base_url=SEED_URL,
        fetch_timeout_seconds=1.0,
        fetch_concurrency=2,
        crawl_timeout_seconds=5.0,
    )


@pytest.fixture
def make_article() -> Callable[..., Article]:
    """文章工厂：默认有摘要、未被标记."""

    def _make(title: str, **overrides: Any) -> Article:
        slug = title.lower().replace(" ", "-")
        fields: dict[str, Any] = {
            "title": title,
            "link": f"https://example.com/{slug}",
            "content": f"Content of {title}",
            "summary": f"Summary of {title}",
            "upvotes": 10,
            "comment_count": 5,
        }
        fields.update(overrides)
        return Article(**fields)

    return _make
