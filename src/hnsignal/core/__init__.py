"""核心业务逻辑."""

from hnsignal.core.filters import ArticleFilter
from hnsignal.core.repository import ArticleRepository

__all__ = [
    "ArticleFilter",
    "ArticleRepository",
]
