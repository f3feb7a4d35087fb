"""Command line front end: fetch feeds and print their article titles (or JSON)."""
from __future__ import annotations

import json
import logging
from typing import Any

import fire
import structlog
from dotenv import load_dotenv

from .config import Settings
from .core import FeedParser
from .models import FeedFailure


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
    )


def _to_json(results: Any) -> Any:
    if isinstance(results, list):
        return [_to_json(r) for r in results]
    return results.to_dict()


def _print_titles(results: Any) -> None:
    for result in results:
        if isinstance(result, list):
            _print_titles(result)
        elif isinstance(result, FeedFailure):
            print(f"! {result.source}: {result.error}")
        else:
            print(result.title)


def fetch(*urls: str, flatten: bool = False, sort_key: str = "", order: str = "asc", as_json: bool = False) -> None:
    """
    Fetch one or more RSS/Atom feeds.
    urls: feed URLs
    flatten: merge all feeds into a single list
    sort_key: Article field to sort by (title, author, published, ...)
    order: asc or desc
    as_json: print the results as JSON instead of one title per line
    """
    if not urls:
        raise fire.core.FireError("at least one feed URL is required")
    settings = Settings.from_env()
    feed = FeedParser(
        list(urls),
        flatten=flatten,
        sort={"key": sort_key, "order": order} if sort_key else None,
        settings=settings,
    )
    results = feed.run()
    if as_json:
        print(json.dumps(_to_json(results), default=str, ensure_ascii=False, indent=2))
    else:
        _print_titles(results)


def main() -> None:
    """feed-articles: fetch RSS/Atom feeds as normalized articles."""
    load_dotenv()
    _configure_logging(Settings.from_env().log_level)
    fire.Fire(fetch)
