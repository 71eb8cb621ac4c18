"""Hacker News 首页抓取."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from hnsignal.config import Settings
from hnsignal.fetcher.normalizer import ContentNormalizer
from hnsignal.models.article import Article
from hnsignal.utils.html_parser import parse_int

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."


class CrawlError(Exception):
    """首页抓取失败（整批作废）."""


@dataclass
class ListingItem:
    """首页列表中的一条文章."""

    title: str
    link: str
    hn_id: int = 0
    rank: int = 0
    flagged: bool = False
    dead: bool = False
    dupe: bool = False
    upvotes: int | None = None
    comment_count: int | None = None
    comment_link: str | None = None


def truncate_content(content: str, max_length: int) -> str:
    """超过长度时截断并追加截断标记."""
    if len(content) > max_length:
        return content[:max_length] + TRUNCATION_MARKER
    return content


def is_http_link(link: str) -> bool:
    """是否为 http/https 链接；无法解析的链接返回 False."""
    try:
        return urlparse(link).scheme in ("http", "https")
    except ValueError:
        return False


def parse_listing(html: str, base_url: str) -> list[ListingItem]:
    """
    解析首页列表，按页面顺序返回文章.

    缺少标题或链接的行会被跳过。
    """
    soup = BeautifulSoup(html, "lxml")
    items: list[ListingItem] = []

    for row in soup.select("tr.athing"):
        anchor = row.select_one("td.title > span.titleline > a")
        if anchor is None:
            continue

        title = anchor.get_text(strip=True)
        link = str(anchor.get("href") or "").strip()
        if not title or not link:
            continue

        row_id = str(row.get("id") or "")
        rank_el = row.select_one("span.rank")
        titleline_text = anchor.parent.get_text() if anchor.parent else ""

        item = ListingItem(
            title=title,
            link=link,
            hn_id=int(row_id) if row_id.isdigit() else 0,
            rank=parse_int(rank_el.get_text() if rank_el else None) or 0,
            flagged="[flagged]" in titleline_text,
            dead="[dead]" in titleline_text,
            dupe="[dupe]" in titleline_text,
        )

        # 紧随其后的非 athing 行是 subtext
        subtext = row.find_next_sibling("tr")
        if isinstance(subtext, Tag) and "athing" not in (subtext.get("class") or []):
            _parse_subtext(subtext, item, base_url)

        items.append(item)

    return items


def _parse_subtext(subtext: Tag, item: ListingItem, base_url: str) -> None:
    """解析标题下方的点赞数和评论信息."""
    score = subtext.select_one("span.score")
    if score is not None:
        item.upvotes = parse_int(score.get_text())

    for anchor in subtext.find_all("a"):
        text = anchor.get_text(" ", strip=True).lower()
        href = str(anchor.get("href") or "")
        if "comment" in text or text == "discuss":
            item.comment_count = parse_int(text) or 0
            try:
                item.comment_link = urljoin(base_url, href) if href else None
            except ValueError:
                item.comment_link = None
            break


class HackerNewsCrawler:
    """
    抓取 Hacker News 首页及其链接的正文.

    单篇文章抓取失败只会丢弃该篇；首页本身不可用时抛出 CrawlError。
    返回的列表是发现顺序的逆序：排名靠前的文章最后入库，获得最大的 ID。
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        normalizer: ContentNormalizer | None = None,
    ) -> None:
        self.settings = settings
        self.normalizer = normalizer or ContentNormalizer(mode=settings.extract_mode)
        self._client = client
        self._owns_client = client is None

    async def scrape(self) -> list[Article]:
        """执行一次抓取，返回待入库的文章."""
        client = self._client or httpx.AsyncClient(
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=True,
        )
        try:
            return await asyncio.wait_for(
                self._scrape(client),
                timeout=self.settings.crawl_timeout_seconds,
            )
        except TimeoutError as e:
            msg = f"抓取超时（{self.settings.crawl_timeout_seconds} 秒）"
            raise CrawlError(msg) from e
        finally:
            if self._owns_client:
                await client.aclose()

    async def _scrape(self, client: httpx.AsyncClient) -> list[Article]:
        base_url = self.settings.hn_base_url
        logger.info(f"正在访问 {base_url}")

        try:
            response = await self._get(client, base_url)
            response.raise_for_status()
        except (httpx.HTTPError, TimeoutError) as e:
            msg = f"无法获取首页 {base_url}: {e!r}"
            raise CrawlError(msg) from e

        try:
            items = parse_listing(response.text, base_url)
        except ParserRejectedMarkup as e:
            msg = f"无法解析首页 {base_url}: {e}"
            raise CrawlError(msg) from e

        logger.info(f"首页共发现 {len(items)} 篇文章")

        candidates: list[ListingItem] = []
        for item in items:
            if is_http_link(item.link):
                candidates.append(item)
            else:
                logger.info(f"跳过不支持的链接: {item.link}")

        # 使用信号量控制并发，gather 保持发现顺序
        semaphore = asyncio.Semaphore(self.settings.fetch_concurrency)

        async def fetch_with_semaphore(item: ListingItem) -> str | None:
            async with semaphore:
                return await self._fetch_content(client, item.link)

        contents = await asyncio.gather(
            *(fetch_with_semaphore(item) for item in candidates)
        )

        now = datetime.utcnow()
        articles: list[Article] = []
        for item, content in zip(candidates, contents, strict=True):
            if content is None:
                continue
            articles.append(self._build_article(item, content, now))

        articles.reverse()

        logger.info(
            f"抓取完成: 成功={len(articles)}, "
            f"丢弃={len(candidates) - len(articles)}, "
            f"跳过={len(items) - len(candidates)}"
        )
        return articles

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        """GET 请求，整个请求（含读取响应体）受 fetch_timeout_seconds 限制."""
        timeout = self.settings.fetch_timeout_seconds
        # 整体期限，覆盖逐字节返回的慢速响应
        async with asyncio.timeout(timeout):
            return await client.get(url, timeout=timeout)

    async def _fetch_content(self, client: httpx.AsyncClient, url: str) -> str | None:
        """抓取并规范化单篇正文；失败返回 None."""
        try:
            response = await self._get(client, url)
        except TimeoutError:
            logger.warning(
                f"抓取正文超时: {url} ({self.settings.fetch_timeout_seconds} 秒)"
            )
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"抓取正文失败: {url} - {e!r}")
            return None

        if not response.is_success:
            logger.warning(f"抓取正文失败: {url} - 状态码 {response.status_code}")
            return None

        content = self.normalizer.normalize(response.content, url)
        return truncate_content(content, self.settings.max_content_length)

    def _build_article(
        self, item: ListingItem, content: str, now: datetime
    ) -> Article:
        return Article(
            hn_id=item.hn_id,
            title=item.title,
            link=item.link,
            article_rank=item.rank,
            content=content,
            source=self.settings.source_name,
            upvotes=item.upvotes,
            comment_count=item.comment_count,
            comment_link=item.comment_link,
            flagged=item.flagged,
            dead=item.dead,
            dupe=item.dupe,
            created_at=now,
            updated_at=now,
        )
