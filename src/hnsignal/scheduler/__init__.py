"""定时任务."""

from hnsignal.scheduler.tasks import crawl_task, create_scheduler, shutdown_scheduler

__all__ = [
    "crawl_task",
    "create_scheduler",
    "shutdown_scheduler",
]
