"""HTML 解析工具."""

import re

from bs4 import BeautifulSoup

# 非正文节点，提取前移除
_NON_TEXT_TAGS = ["script", "style", "noscript", "template"]


def clean_whitespace(text: str) -> str:
    """
    清理多余空白.

    按行切分，去掉每行首尾空白并丢弃空行，再用换行符拼接。
    """
    if not text:
        return ""

    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if line:
            lines.append(line)

    return "\n".join(lines)


def body_text(html: str) -> str:
    """
    提取 HTML 文档 body 的纯文本.

    Args:
        html: HTML 内容

    Returns:
        清理后的纯文本；没有 body 时返回整个文档的文本
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    for element in soup(_NON_TEXT_TAGS):
        element.decompose()

    root = soup.body or soup
    return clean_whitespace(root.get_text())


def parse_int(text: str | None) -> int | None:
    """从文本中提取第一个整数，如 "123 points" -> 123."""
    if not text:
        return None

    match = re.search(r"\d+", text)
    return int(match.group()) if match else None
