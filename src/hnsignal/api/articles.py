"""文章 API."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from hnsignal.core.repository import ArticleRepository
from hnsignal.models.article import Article, ArticleRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])


class ArticlesResponse(BaseModel):
    """文章列表响应."""

    code: int = 200
    status: str = "success"
    total_count: int
    articles: list[ArticleRead]


class SummaryUpdate(BaseModel):
    """摘要写回请求."""

    model_config = ConfigDict(protected_namespaces=())

    article_id: int
    summary: str = Field(min_length=1)
    commit_hash: str | None = None
    model_name: str | None = None


def get_repository(request: Request) -> ArticleRepository:
    """获取文章仓库（应用启动时创建）."""
    return request.app.state.repository


def _to_response(articles: list[Article]) -> ArticlesResponse:
    return ArticlesResponse(
        total_count=len(articles),
        articles=[ArticleRead.model_validate(article) for article in articles],
    )


@router.get("", response_model=ArticlesResponse)
async def list_articles(
    limit: int = Query(30, ge=1, le=100, description="每页数量"),
    offset: int = Query(0, ge=0, description="偏移量"),
    flagged: bool | None = Query(None, description="按 flagged 筛选，缺省要求 false"),
    dead: bool | None = Query(None, description="按 dead 筛选，缺省要求 false"),
    dupe: bool | None = Query(None, description="按 dupe 筛选，缺省要求 false"),
    min_upvotes: int = Query(0, ge=0, description="最低点赞数"),
    min_comments: int = Query(0, ge=0, description="最低评论数"),
    repository: ArticleRepository = Depends(get_repository),
) -> ArticlesResponse:
    """获取去重后的文章列表."""
    has_filters = flagged is not None or dead is not None or dupe is not None
    has_thresholds = min_upvotes > 0 or min_comments > 0

    try:
        if has_filters and has_thresholds:
            articles = await repository.get_articles_with_thresholds_and_filters(
                flagged=flagged,
                dead=dead,
                dupe=dupe,
                limit=limit,
                offset=offset,
                min_upvotes=min_upvotes,
                min_comments=min_comments,
            )
        elif has_filters:
            articles = await repository.get_filtered_articles(
                flagged=flagged, dead=dead, dupe=dupe, limit=limit, offset=offset
            )
        elif has_thresholds:
            articles = await repository.get_articles_with_thresholds(
                limit=limit,
                offset=offset,
                min_upvotes=min_upvotes,
                min_comments=min_comments,
            )
        else:
            articles = await repository.get_articles(limit=limit, offset=offset)
    except SQLAlchemyError as e:
        logger.exception("查询文章失败")
        raise HTTPException(status_code=500, detail=str(e)) from e

    return _to_response(articles)


@router.get("/pending-summary", response_model=ArticlesResponse)
async def list_pending_summary(
    limit: int = Query(30, ge=1, le=100, description="每页数量"),
    repository: ArticleRepository = Depends(get_repository),
) -> ArticlesResponse:
    """获取待生成摘要的文章（供外部摘要服务使用）."""
    try:
        articles = await repository.get_articles_without_summary(limit=limit)
    except SQLAlchemyError as e:
        logger.exception("查询待摘要文章失败")
        raise HTTPException(status_code=500, detail=str(e)) from e

    return _to_response(articles)


@router.patch("/summary")
async def update_summary(
    body: SummaryUpdate,
    repository: ArticleRepository = Depends(get_repository),
) -> dict:
    """写回文章摘要."""
    try:
        updated = await repository.update_summary(
            body.article_id,
            body.summary,
            commit_hash=body.commit_hash,
            model_name=body.model_name,
        )
    except SQLAlchemyError as e:
        logger.exception(f"写回摘要失败: article_id={body.article_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    if not updated:
        raise HTTPException(status_code=404, detail="文章不存在")

    return {"id": body.article_id, "updated": True}
