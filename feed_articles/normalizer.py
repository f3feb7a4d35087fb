from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional
import time

from bs4 import BeautifulSoup
from feedparser.datetimes import _parse_date


def as_list(value: Any) -> List[Any]:
    """Coerce a tree value to a list: None -> [], list -> itself, other -> [value]."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> Optional[str]:
    """
    Text of a tree value.

    Elements carrying attributes or mixed content (e.g. Atom
    `<title type="html">`) are dicts with their text under `#text`. A dict
    without `#text` (e.g. Atom `type="xhtml"` content wrapping a `<div>`)
    yields the text of its child elements, in document order.
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    if not isinstance(value, dict):
        return str(value)
    if "#text" in value:
        return value["#text"]

    parts: List[str] = []
    stack: List[Any] = [value]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            if "#text" in node:
                parts.append(node["#text"])
                continue
            stack.extend(reversed([v for k, v in node.items() if not k.startswith("@")]))
        elif isinstance(node, list):
            stack.extend(reversed(node))
        elif node is not None:
            parts.append(str(node))
    return "".join(parts) or None


def strip_markup(fragment: Any) -> Optional[str]:
    """Reduce an HTML fragment to its visible text."""
    html = text_of(fragment)
    if html is None:
        return None
    return BeautifulSoup(html, "html.parser").get_text().strip()


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an RSS/Atom date into a timezone-aware UTC datetime.

    Uses feedparser's date handlers (RFC 822, ISO 8601 and friends).
    Returns None when the value is missing or cannot be parsed.
    """
    s = text_of(value)
    if not s or not s.strip():
        return None
    parsed = _parse_date(s.strip())
    if not isinstance(parsed, time.struct_time):
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (ValueError, OverflowError):
        # e.g. year 0, which feedparser accepts but datetime does not
        return None
