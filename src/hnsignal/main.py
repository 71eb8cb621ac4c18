"""hnsignal 主应用入口."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hnsignal.api import articles
from hnsignal.config import get_settings
from hnsignal.core.repository import ArticleRepository
from hnsignal.models.database import async_session_maker, close_db, init_db
from hnsignal.scheduler import create_scheduler, shutdown_scheduler

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """应用生命周期管理."""
    app_settings = get_settings()

    # 启动时初始化
    logger.info("正在初始化数据库...")
    await init_db(app_settings.database_url)

    repository = ArticleRepository(async_session_maker())
    app.state.repository = repository

    logger.info("正在启动定时任务...")
    create_scheduler(app_settings, repository)

    logger.info("hnsignal 启动完成！")
    yield

    # 关闭时清理
    logger.info("正在关闭...")
    await shutdown_scheduler()
    await close_db()
    logger.info("hnsignal 已关闭")


app = FastAPI(
    title="hnsignal",
    description="Hacker News 文章抓取、去重与筛选服务",
    version="0.1.0",
    lifespan=lifespan,
)

# 注册路由
app.include_router(articles.router)


@app.get("/")
async def root() -> dict:
    """根路径."""
    return {
        "name": "hnsignal",
        "version": "0.1.0",
        "description": "Hacker News 文章抓取、去重与筛选服务",
    }


@app.get("/health")
async def health() -> dict:
    """健康检查."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hnsignal.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
