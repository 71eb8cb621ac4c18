"""数据模型."""

from hnsignal.models.article import NO_SUMMARY_PLACEHOLDER, Article, ArticleRead
from hnsignal.models.database import (
    async_session_maker,
    close_db,
    create_engine,
    create_session_factory,
    get_session,
    init_db,
)

__all__ = [
    "NO_SUMMARY_PLACEHOLDER",
    "Article",
    "ArticleRead",
    "async_session_maker",
    "close_db",
    "create_engine",
    "create_session_factory",
    "get_session",
    "init_db",
]
