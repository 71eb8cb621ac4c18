"""正文内容规范化."""

import logging
from typing import Literal

from bs4 import UnicodeDammit
from trafilatura import extract

from hnsignal.utils.html_parser import body_text, clean_whitespace

logger = logging.getLogger(__name__)


class ContentNormalizer:
    """
    将原始响应字节转换为 UTF-8 纯文本.

    编码只通过内容嗅探判断（BOM、文档内声明、统计检测），不依赖响应头。
    编码或解析失败时返回空字符串，由调用方当作"无内容"处理。
    """

    def __init__(self, mode: Literal["body", "readable"] = "body") -> None:
        self.mode = mode

    def normalize(self, raw: bytes, url: str) -> str:
        """规范化一篇文章的原始内容."""
        html = self.decode(raw, url)
        if not html:
            return ""

        try:
            if self.mode == "readable":
                text = self._readable_text(html, url)
                if text:
                    return text
            return body_text(html)
        except Exception as e:
            logger.warning(f"解析 HTML 失败: {url} - {e}")
            return ""

    def decode(self, raw: bytes, url: str) -> str:
        """嗅探编码并解码为字符串；结果不是合法 UTF-8 时返回空字符串."""
        if not raw:
            return ""

        dammit = UnicodeDammit(raw, is_html=True)
        text = dammit.unicode_markup
        if text is None:
            logger.warning(f"无法识别内容编码: {url}")
            return ""

        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning(f"转换后的内容不是合法 UTF-8: {url} ({dammit.original_encoding})")
            return ""

        return text

    def _readable_text(self, html: str, url: str) -> str:
        """使用 trafilatura 提取正文."""
        text = extract(
            html,
            url=url,
            include_comments=False,
            include_tables=True,
            output_format="txt",
            favor_precision=False,
        )
        return clean_whitespace(text or "")
