"""Article 文章模型."""

from datetime import datetime

from sqlmodel import Field, SQLModel

# 摘要占位文本，不视为有效摘要
NO_SUMMARY_PLACEHOLDER = "No summary available"


class ArticleBase(SQLModel):
    """文章公共字段."""

    hn_id: int = Field(default=0, index=True, description="Hacker News item ID")
    title: str = Field(index=True, description="标题（去重键）")
    link: str = Field(description="原文链接")
    article_rank: int = Field(default=0, description="抓取时在首页的排名")
    content: str = Field(default="", description="抽取的纯文本内容")
    summary: str | None = Field(default=None, description="摘要（外部服务写入）")
    source: str = Field(default="Hacker News", description="来源")
    upvotes: int | None = Field(default=None, description="点赞数")
    comment_count: int | None = Field(default=None, description="评论数")
    comment_link: str | None = Field(default=None, description="评论页链接")
    flagged: bool = Field(default=False, description="是否被标记")
    dead: bool = Field(default=False, description="是否已失效")
    dupe: bool = Field(default=False, description="是否重复")
    commit_hash: str | None = Field(default=None, description="摘要任务的提交版本")
    model_name: str | None = Field(default=None, description="摘要使用的模型")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Article(ArticleBase, table=True):
    """一次抓取快照（每次抓取插入新行，不原地更新）."""

    __tablename__ = "articles"  # type: ignore[assignment]
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True, description="自增 ID，越大越新")


class ArticleRead(ArticleBase):
    """文章响应模型，可空字段序列化为 null."""

    id: int
