from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from .classifier import FEED_TYPE_ATOM, FEED_TYPE_RSS, detect_feed_type
from .exceptions import FeedStructureError
from .models import Article
from .normalizer import as_list, strip_markup, text_of, to_datetime
from .xmltree import parse_xml

logger = structlog.get_logger()

# item/entry must stay lists so single-item feeds iterate like any other
_FORCE_LIST = ("item", "entry")


def _title(value: Any) -> str:
    return (text_of(value) or "").strip()


def _author_name(entry: Dict[str, Any]) -> Optional[str]:
    # several <author> elements: first one wins
    author = as_list(entry.get("author"))
    if not author:
        return None
    first = author[0]
    if isinstance(first, dict):
        return text_of(first.get("name"))
    return text_of(first)


def _rss_items(tree: Dict[str, Any]) -> List[Any]:
    if "rss" in tree:
        channel = tree["rss"].get("channel") if isinstance(tree["rss"], dict) else None
        if not isinstance(channel, dict):
            raise FeedStructureError("RSS document has no <channel>")
        return as_list(channel.get("item"))
    if "rdf:RDF" in tree:
        # RSS 1.0 keeps items next to the channel, not inside it
        rdf = tree["rdf:RDF"]
        if not isinstance(rdf, dict) or "channel" not in rdf:
            raise FeedStructureError("RDF document has no <channel>")
        return as_list(rdf.get("item"))
    raise FeedStructureError(f"Expected an <rss> or <rdf:RDF> root, got <{next(iter(tree), '')}>")


def parse_rss(tree: Dict[str, Any], source: str) -> List[Article]:
    """Map an RSS 2.0 / RSS 1.0 tree to articles, one per item, in document order."""
    articles = []
    for item in _rss_items(tree):
        if not isinstance(item, dict):
            item = {}
        articles.append(Article(
            title=_title(item.get("title")),
            author=text_of(item.get("dc:creator")) or text_of(item.get("author")),
            category=item.get("category"),
            description=strip_markup(item.get("description")),
            content=strip_markup(item.get("content:encoded")),
            link=text_of(item.get("link")),
            source=source,
            published=to_datetime(item.get("pubDate") or item.get("dc:date")),
        ))
    return articles


def _alternate_link(entry: Dict[str, Any]) -> Optional[str]:
    for link in as_list(entry.get("link")):
        if isinstance(link, dict) and link.get("@rel") == "alternate":
            return link.get("@href")
    return None


def parse_youtube_entry(entry: Dict[str, Any], source: str) -> Article:
    """
    Map a YouTube Atom entry (one carrying `media:group`).

    The link is the href of the rel="alternate" link, i.e. the watch page.
    Entries without such a link keep `link=None`.
    """
    link = _alternate_link(entry)
    if link is None:
        logger.warning("youtube_entry_without_alternate_link", url=source, entry_id=text_of(entry.get("id")))

    group = entry.get("media:group")
    if not isinstance(group, dict):
        group = {}

    return Article(
        title=text_of(entry.get("title")) or "",
        author=_author_name(entry),
        description=strip_markup(group.get("media:description")),
        link=link,
        source=source,
        published=to_datetime(entry.get("published")),
    )


def parse_atom(tree: Dict[str, Any], source: str) -> List[Article]:
    """Map an Atom tree to articles; YouTube entries take their own path."""
    if "feed" not in tree:
        raise FeedStructureError(f"Expected a <feed> root, got <{next(iter(tree), '')}>")
    feed = tree["feed"]
    entries = as_list(feed.get("entry")) if isinstance(feed, dict) else []

    articles = []
    for entry in entries:
        if not isinstance(entry, dict):
            entry = {}
        if "media:group" in entry:
            articles.append(parse_youtube_entry(entry, source))
            continue
        articles.append(Article(
            title=_title(entry.get("title")),
            author=_author_name(entry),
            category=entry.get("category"),
            description=strip_markup(entry.get("description") or entry.get("summary")),
            content=strip_markup(entry.get("content:encoded") or entry.get("content")),
            link=entry.get("link"),
            source=source,
            published=to_datetime(entry.get("published")),
        ))
    return articles


_NORMALIZERS = {
    FEED_TYPE_RSS: parse_rss,
    FEED_TYPE_ATOM: parse_atom,
}


def parse_feed(markup: str, source: str) -> List[Article]:
    """
    Classify decoded feed markup, parse it and normalize it to articles.

    Raises UnknownFeedTypeError or FeedStructureError.
    """
    feed_type = detect_feed_type(markup)
    tree = parse_xml(markup, force_list=_FORCE_LIST)
    articles = _NORMALIZERS[feed_type](tree, source)
    logger.info("feed_parsed", url=source, feed_type=feed_type, articles=len(articles))
    return articles
