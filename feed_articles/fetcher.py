from __future__ import annotations

from email.message import Message
from typing import Optional

import httpx
import structlog

from .exceptions import FetchError

logger = structlog.get_logger()

_LEGACY_CYRILLIC = "cp1251"


def charset_of(content_type: Optional[str]) -> Optional[str]:
    """Return the lower-cased charset parameter of a Content-Type header, if any."""
    if not content_type:
        return None
    msg = Message()
    msg["content-type"] = content_type
    charset = msg.get_param("charset")
    if not isinstance(charset, str) or not charset.strip():
        return None
    return charset.strip().strip('"').lower()


def decode_body(raw: bytes, content_type: Optional[str] = None) -> str:
    """
    Decode a feed body before it reaches the XML parser.

    Code page 1251 bodies (windows-1251, cp1251, ...) are decoded as such;
    everything else is read as UTF-8. The XML declaration is ignored because
    legacy-encoded feeds frequently declare the wrong encoding.
    """
    charset = charset_of(content_type)
    if charset and "1251" in charset:
        return raw.decode(_LEGACY_CYRILLIC, errors="replace")
    return raw.decode("utf-8-sig", errors="replace")


async def fetch_feed_text(client: httpx.AsyncClient, url: str) -> str:
    """
    GET a feed URL and return its decoded markup.

    Raises FetchError on network failures, timeouts and non-2xx responses.
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(str(e) or f"Failed to fetch feed: {url} ({type(e).__name__})") from e

    content_type = response.headers.get("content-type")
    logger.debug("feed_fetched", url=url, bytes=len(response.content), charset=charset_of(content_type))
    return decode_body(response.content, content_type)
