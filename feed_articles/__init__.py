"""
feed_articles

Fetches RSS/Atom feeds (YouTube channel feeds included) and returns their
items as normalized articles.

Core ideas:
- Input: one or more feed URLs
- Process: fetch → classify (RSS or Atom) → parse → normalize, one pipeline per URL, run concurrently
- Output: one list of Article per URL, or a FeedFailure marker for URLs that failed;
  optionally flattened into one list and sorted by any Article field

Example
-------
from feed_articles import FeedParser, FeedFailure

feed = FeedParser(
    [
        "https://www.youtube.com/feeds/videos.xml?channel_id=UCsvMopMspsGw89AWim0FMfw",
        "http://www.dailymail.co.uk/articles.rss",
    ],
    flatten=True,
    sort={"key": "title", "order": "asc"},
)

for item in feed.run():
    if isinstance(item, FeedFailure):
        print("failed:", item.source, item.error)
    else:
        print(item.title)
"""
from .config import Settings, __version__
from .core import FeedParser, flatten_results, sort_articles
from .exceptions import FeedError, FeedStructureError, FetchError, UnknownFeedTypeError
from .models import Article, FeedFailure, SortSpec
from .parser import parse_feed

__all__ = [
    "Article",
    "FeedError",
    "FeedFailure",
    "FeedParser",
    "FeedStructureError",
    "FetchError",
    "Settings",
    "SortSpec",
    "UnknownFeedTypeError",
    "__version__",
    "flatten_results",
    "parse_feed",
    "sort_articles",
]
