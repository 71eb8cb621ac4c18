"""文章查询条件组合."""

from dataclasses import dataclass

from sqlalchemy import ColumnElement

from hnsignal.models.article import NO_SUMMARY_PLACEHOLDER, Article


@dataclass(frozen=True)
class ArticleFilter:
    """
    文章查询条件.

    三个布尔维度（flagged/dead/dupe）为三态：None 表示"要求 false"，
    True/False 表示精确匹配。阈值为 0 时不生成条件。
    所有取值都以绑定参数传入，只有条件是否出现会变化。
    """

    flagged: bool | None = None
    dead: bool | None = None
    dupe: bool | None = None
    min_upvotes: int = 0
    min_comments: int = 0
    require_summary: bool = False

    def __post_init__(self) -> None:
        if self.min_upvotes < 0 or self.min_comments < 0:
            msg = "阈值不能为负数"
            raise ValueError(msg)

    def predicates(self) -> list[ColumnElement[bool]]:
        """生成 WHERE 条件列表."""
        predicates: list[ColumnElement[bool]] = []

        if self.require_summary:
            predicates.extend(
                [
                    Article.summary.isnot(None),  # type: ignore[union-attr]
                    Article.summary != "",
                    Article.summary != NO_SUMMARY_PLACEHOLDER,
                ]
            )

        predicates.extend(
            [
                Article.flagged == _required(self.flagged),
                Article.dead == _required(self.dead),
                Article.dupe == _required(self.dupe),
            ]
        )

        if self.min_upvotes > 0:
            predicates.append(Article.upvotes >= self.min_upvotes)  # type: ignore[operator]
        if self.min_comments > 0:
            predicates.append(Article.comment_count >= self.min_comments)  # type: ignore[operator]

        return predicates


def _required(value: bool | None) -> bool:
    """未指定的维度默认要求 false."""
    return value if value is not None else False
