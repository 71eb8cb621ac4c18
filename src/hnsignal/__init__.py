"""hnsignal - Hacker News 文章抓取与查询服务."""

__version__ = "0.1.0"
