"""测试正文规范化."""

from unittest.mock import MagicMock, patch

from hnsignal.fetcher.normalizer import ContentNormalizer
from hnsignal.utils.html_parser import body_text, clean_whitespace, parse_int

URL = "https://example.com/post"


class TestCleanWhitespace:
    """测试 clean_whitespace 函数."""

    def test_trims_lines_and_drops_blank_lines(self) -> None:
        """去掉行首尾空白和空行."""
        text = "  first line  \n\n\t\n   second\r\n\xa0third\xa0\n"
        assert clean_whitespace(text) == "first line\nsecond\nthird"

    def test_empty_input(self) -> None:
        """空输入返回空字符串."""
        assert clean_whitespace("") == ""
        assert clean_whitespace("\n  \n") == ""


class TestBodyText:
    """测试 body_text 函数."""

    def test_extracts_body_and_skips_scripts(self) -> None:
        """只提取 body 文本，移除 script/style."""
        html = (
            "<html><head><title>Page Title</title>"
            "<style>p { color: red; }</style></head>"
            "<body>\n  <h1> Hello </h1>\n\n   <p>World  </p>"
            "<script>var x = 1;</script></body></html>"
        )
        assert body_text(html) == "Hello\nWorld"

    def test_keeps_navigation_text(self) -> None:
        """整页 body 文本包括导航等内容."""
        html = "<html><body><nav>Home</nav>\n<article>Story</article></body></html>"
        assert body_text(html) == "Home\nStory"


class TestParseInt:
    """测试 parse_int 函数."""

    def test_parses_first_number(self) -> None:
        assert parse_int("123 points") == 123
        assert parse_int("45\xa0comments") == 45

    def test_returns_none_without_digits(self) -> None:
        assert parse_int("discuss") is None
        assert parse_int(None) is None


class TestContentNormalizer:
    """测试 ContentNormalizer."""

    def test_normalizes_utf8_with_bom(self) -> None:
        """带 BOM 的 UTF-8 内容."""
        raw = b"\xef\xbb\xbf" + "<html><body><p>日本語のテキスト</p></body></html>".encode()
        assert ContentNormalizer().normalize(raw, URL) == "日本語のテキスト"

    def test_detects_encoding_from_meta_declaration(self) -> None:
        """根据文档内的 charset 声明转换编码."""
        html = (
            '<html><head><meta charset="iso-8859-1"></head>'
            "<body><p>Café crème brûlée</p></body></html>"
        )
        raw = html.encode("latin-1")
        assert ContentNormalizer().normalize(raw, URL) == "Café crème brûlée"

    def test_empty_bytes(self) -> None:
        """空内容返回空字符串."""
        assert ContentNormalizer().normalize(b"", URL) == ""

    def test_undetectable_encoding_yields_empty_text(self) -> None:
        """无法识别编码时返回空字符串而不是抛出异常."""
        with patch("hnsignal.fetcher.normalizer.UnicodeDammit") as mock_dammit:
            mock_dammit.return_value = MagicMock(unicode_markup=None)
            assert ContentNormalizer().normalize(b"<html></html>", URL) == ""

    def test_invalid_utf8_yields_empty_text(self) -> None:
        """转换结果不是合法 UTF-8 时返回空字符串."""
        with patch("hnsignal.fetcher.normalizer.UnicodeDammit") as mock_dammit:
            mock_dammit.return_value = MagicMock(
                unicode_markup="<html><body>\ud800</body></html>",
                original_encoding="utf-8",
            )
            assert ContentNormalizer().normalize(b"<html></html>", URL) == ""

    def test_readable_mode_uses_trafilatura(self) -> None:
        """readable 模式使用 trafilatura 提取的正文."""
        raw = b"<html><body><nav>Menu</nav>\n<p>Main text</p></body></html>"
        with patch(
            "hnsignal.fetcher.normalizer.extract", return_value="  Main text \n\n"
        ) as mock_extract:
            result = ContentNormalizer(mode="readable").normalize(raw, URL)

        assert result == "Main text"
        assert mock_extract.call_args.kwargs["url"] == URL

    def test_readable_mode_falls_back_to_body(self) -> None:
        """trafilatura 无结果时退回 body 文本."""
        raw = b"<html><body><nav>Menu</nav>\n<p>Main text</p></body></html>"
        with patch("hnsignal.fetcher.normalizer.extract", return_value=None):
            result = ContentNormalizer(mode="readable").normalize(raw, URL)

        assert result == "Menu\nMain text"
