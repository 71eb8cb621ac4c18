"""文章存储与查询."""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from hnsignal.core.filters import ArticleFilter
from hnsignal.models.article import Article

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 30


class ArticleRepository:
    """
    文章仓库.

    写入只插入新行，保留完整抓取历史；读取时按标题去重，
    同一标题只保留 ID 最大（最新）的一行，再按 ID 倒序分页。
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        # 单写者：同一仓库的批量写入串行执行
        self._write_lock = asyncio.Lock()

    async def save(self, articles: Sequence[Article]) -> int:
        """
        批量保存文章，返回成功插入的行数.

        整批在一个事务中提交；单行失败通过 SAVEPOINT 回滚并跳过，
        连接级错误直接抛出。
        """
        if not articles:
            return 0

        saved = 0
        async with self._write_lock, self._session_factory() as session:
            async with session.begin():
                for article in articles:
                    try:
                        async with session.begin_nested():
                            session.add(article)
                    except SQLAlchemyError as e:
                        logger.warning(f"保存文章失败，已跳过: {article.title} - {e}")
                        continue
                    saved += 1

        logger.info(f"保存完成: 成功={saved}, 失败={len(articles) - saved}")
        return saved

    async def get_articles(
        self, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> list[Article]:
        """获取有摘要且未被标记/失效/重复的文章."""
        return await self._query(ArticleFilter(require_summary=True), limit, offset)

    async def get_filtered_articles(
        self,
        flagged: bool | None = None,
        dead: bool | None = None,
        dupe: bool | None = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> list[Article]:
        """按 flagged/dead/dupe 筛选文章（未指定的维度要求 false）."""
        article_filter = ArticleFilter(flagged=flagged, dead=dead, dupe=dupe)
        return await self._query(article_filter, limit, offset)

    async def get_articles_with_thresholds(
        self,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        min_upvotes: int = 0,
        min_comments: int = 0,
    ) -> list[Article]:
        """在默认条件基础上按最低点赞数和评论数过滤."""
        article_filter = ArticleFilter(
            min_upvotes=min_upvotes,
            min_comments=min_comments,
            require_summary=True,
        )
        return await self._query(article_filter, limit, offset)

    async def get_articles_with_thresholds_and_filters(
        self,
        flagged: bool | None = None,
        dead: bool | None = None,
        dupe: bool | None = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        min_upvotes: int = 0,
        min_comments: int = 0,
    ) -> list[Article]:
        """同时应用布尔筛选和数值阈值."""
        article_filter = ArticleFilter(
            flagged=flagged,
            dead=dead,
            dupe=dupe,
            min_upvotes=min_upvotes,
            min_comments=min_comments,
            require_summary=True,
        )
        return await self._query(article_filter, limit, offset)

    async def _query(
        self, article_filter: ArticleFilter, limit: int, offset: int
    ) -> list[Article]:
        """按标题去重后分页查询."""
        if limit < 0 or offset < 0:
            msg = f"limit/offset 不能为负数: limit={limit}, offset={offset}"
            raise ValueError(msg)

        # 每个标题在满足条件的行中取最大 ID
        latest = (
            select(func.max(Article.id).label("max_id"))
            .where(*article_filter.predicates())
            .group_by(Article.title)
            .subquery("latest")
        )

        stmt = (
            select(Article)
            .join(latest, Article.id == latest.c.max_id)
            .order_by(Article.id.desc())  # type: ignore[union-attr]
            .offset(offset)
            .limit(limit)
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_articles_without_summary(
        self, limit: int = DEFAULT_LIMIT
    ) -> list[Article]:
        """获取尚未生成摘要的文章（按 ID 升序）."""
        stmt = (
            select(Article)
            .where(
                or_(
                    Article.summary.is_(None),  # type: ignore[union-attr]
                    Article.summary == "",
                )
            )
            .order_by(Article.id)
            .limit(limit)
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def update_summary(
        self,
        article_id: int,
        summary: str,
        commit_hash: str | None = None,
        model_name: str | None = None,
    ) -> bool:
        """写回摘要及其来源信息；文章不存在时返回 False."""
        async with self._write_lock, self._session_factory() as session:
            article = await session.get(Article, article_id)
            if article is None:
                return False

            article.summary = summary
            if commit_hash is not None:
                article.commit_hash = commit_hash
            if model_name is not None:
                article.model_name = model_name
            article.updated_at = datetime.utcnow()

            await session.commit()

        logger.info(f"摘要已更新: article_id={article_id}")
        return True
