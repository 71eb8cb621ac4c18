"""应用配置管理."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置（环境变量）."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 数据库配置
    database_url: str = "sqlite+aiosqlite:///./hnsignal.db"

    # Hacker News 抓取配置
    hn_base_url: str = "https://news.ycombinator.com/"
    source_name: str = "Hacker News"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # 正文抓取配置
    fetch_timeout_seconds: float = 10.0
    fetch_concurrency: int = 4
    crawl_timeout_seconds: float = 300.0
    max_content_length: int = 10000
    extract_mode: Literal["body", "readable"] = "body"

    # 定时任务配置
    crawl_enabled: bool = True
    crawl_interval_minutes: int = 60


@lru_cache
def get_settings() -> Settings:
    """获取应用配置（带缓存）."""
    return Settings()
