from __future__ import annotations

import re

from .exceptions import UnknownFeedTypeError

FEED_TYPE_RSS = "rss"
FEED_TYPE_ATOM = "atom"

_RSS_SIGNATURE = re.compile(r"<(rss|rdf)\b", re.IGNORECASE)
_ATOM_SIGNATURE = re.compile(r"<feed\b", re.IGNORECASE)


def detect_feed_type(markup: str) -> str:
    """
    Tell RSS from Atom by looking for the root tag in the raw markup.

    RSS 2.0 (`<rss`) and RSS 1.0 (`<rdf:RDF`) win over Atom (`<feed`).
    Raises UnknownFeedTypeError when neither signature is present.
    """
    if _RSS_SIGNATURE.search(markup):
        return FEED_TYPE_RSS
    if _ATOM_SIGNATURE.search(markup):
        return FEED_TYPE_ATOM
    raise UnknownFeedTypeError("Unknown feed type: no <rss>, <rdf> or <feed> root element found")
