"""定时任务定义."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hnsignal.config import Settings
from hnsignal.core.repository import ArticleRepository
from hnsignal.fetcher.crawler import CrawlError, HackerNewsCrawler

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


async def crawl_task(
    settings: Settings,
    repository: ArticleRepository,
    crawler: HackerNewsCrawler | None = None,
) -> int:
    """抓取任务：抓取首页文章并入库，返回入库数量."""
    if not settings.crawl_enabled:
        logger.info("抓取已禁用，跳过")
        return 0

    logger.info("开始抓取任务...")
    crawler = crawler or HackerNewsCrawler(settings)

    try:
        articles = await crawler.scrape()
    except CrawlError as e:
        logger.error(f"抓取任务失败: {e}")
        return 0

    if not articles:
        logger.info("没有抓取到文章")
        return 0

    saved = await repository.save(articles)
    logger.info(f"抓取任务完成: 抓取={len(articles)}, 入库={saved}")
    return saved


async def _scheduled_crawl(settings: Settings, repository: ArticleRepository) -> None:
    """调度器入口，异常只记录不中断后续调度."""
    try:
        await crawl_task(settings, repository)
    except Exception as e:
        logger.exception(f"抓取任务异常: {e}")


def create_scheduler(
    settings: Settings, repository: ArticleRepository
) -> AsyncIOScheduler:
    """创建并启动定时任务调度器."""
    global _scheduler

    _scheduler = AsyncIOScheduler()

    # 同一时间只允许一个抓取任务写入
    _scheduler.add_job(
        _scheduled_crawl,
        "interval",
        minutes=settings.crawl_interval_minutes,
        args=[settings, repository],
        id="crawl_task",
        name="Hacker News 抓取",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    # 启动时立即执行一次
    _scheduler.add_job(
        _scheduled_crawl,
        "date",  # 一次性任务
        args=[settings, repository],
        id="crawl_task_initial",
        name="初始抓取",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info(
        f"定时任务调度器已启动，抓取间隔: {settings.crawl_interval_minutes} 分钟"
    )

    return _scheduler


async def shutdown_scheduler() -> None:
    """关闭定时任务调度器."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("定时任务调度器已关闭")
        _scheduler = None
