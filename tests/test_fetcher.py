import httpx
import pytest

from feed_articles.exceptions import FetchError
from feed_articles.fetcher import charset_of, decode_body, fetch_feed_text

from tests.feeds import xml_response

URL = "https://feeds.example.com/rss"


# ── charset_of ────────────────────────────────────────────────

class TestCharsetOf:
    def test_extracts_charset(self):
        assert charset_of("text/xml;charset=windows-1251") == "windows-1251"

    def test_quoted_and_upper_case(self):
        assert charset_of('application/rss+xml; charset="UTF-8"') == "utf-8"

    def test_no_charset(self):
        assert charset_of("text/xml") is None

    def test_no_header(self):
        assert charset_of(None) is None
        assert charset_of("") is None


# ── decode_body ───────────────────────────────────────────────

class TestDecodeBody:
    def test_windows_1251(self):
        raw = "Новости дня".encode("cp1251")
        assert decode_body(raw, "text/xml;charset=windows-1251") == "Новости дня"

    def test_cp1251_alias(self):
        raw = "Привет".encode("cp1251")
        assert decode_body(raw, "text/xml; charset=cp1251") == "Привет"

    def test_utf8_default(self):
        assert decode_body("Grüße".encode("utf-8"), "text/xml") == "Grüße"

    def test_missing_header_is_utf8(self):
        assert decode_body("Grüße".encode("utf-8"), None) == "Grüße"

    def test_bom_dropped(self):
        assert decode_body(b"\xef\xbb\xbf<rss/>", "text/xml") == "<rss/>"

    def test_other_charsets_read_as_utf8(self):
        # only code page 1251 gets special treatment
        assert decode_body("abc".encode("latin-1"), "text/xml; charset=iso-8859-1") == "abc"


# ── fetch_feed_text ───────────────────────────────────────────

class TestFetchFeedText:
    @pytest.mark.asyncio
    async def test_returns_decoded_text(self, mock_client):
        async with mock_client({URL: xml_response("<rss/>")}) as client:
            assert await fetch_feed_text(client, URL) == "<rss/>"

    @pytest.mark.asyncio
    async def test_decodes_legacy_cyrillic(self, mock_client):
        body = "<rss><channel><item><title>Новости дня</title></item></channel></rss>".encode("cp1251")
        response = httpx.Response(200, content=body, headers={"content-type": "text/xml;charset=windows-1251"})
        async with mock_client({URL: response}) as client:
            assert "Новости дня" in await fetch_feed_text(client, URL)

    @pytest.mark.asyncio
    async def test_http_error_status(self, mock_client):
        async with mock_client({URL: httpx.Response(404)}) as client:
            with pytest.raises(FetchError, match="404"):
                await fetch_feed_text(client, URL)

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_client):
        async with mock_client({}) as client:
            with pytest.raises(FetchError, match="Name or service not known"):
                await fetch_feed_text(client, URL)
