from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import cmp_to_key
from typing import Any, AsyncIterator, List, Mapping, Optional, Sequence, Union

import httpx
import structlog

from .config import Settings
from .exceptions import FeedError
from .fetcher import fetch_feed_text
from .models import Article, FeedFailure, FetchResult, SortSpec
from .parser import parse_feed

logger = structlog.get_logger()

_MISSING = object()

Item = Union[Article, FeedFailure]


def _sort_value(item: Any, key: str) -> Any:
    value = getattr(item, key, _MISSING)
    return _MISSING if value is None else value


def compare_values(key: str, order: str = "asc"):
    """
    Build a cmp function ordering records by `key`.

    Strings compare case-insensitively. A pair where either side lacks the
    key, or whose values cannot be ordered against each other, compares equal.
    """
    sign = -1 if order == "desc" else 1

    def compare(a: Any, b: Any) -> int:
        va, vb = _sort_value(a, key), _sort_value(b, key)
        if va is _MISSING or vb is _MISSING:
            return 0
        if isinstance(va, str):
            va = va.upper()
        if isinstance(vb, str):
            vb = vb.upper()
        try:
            comparison = (va > vb) - (va < vb)
        except TypeError:
            return 0
        return sign * comparison

    return compare


def sort_articles(items: Sequence[Item], key: str, order: str = "asc") -> List[Item]:
    """Stable sort of articles (and failure markers) by an Article field."""
    return sorted(items, key=cmp_to_key(compare_values(key, order)))


def flatten_results(results: Sequence[FetchResult]) -> List[Item]:
    """Concatenate per-URL article lists; failure markers are kept in place."""
    out: List[Item] = []
    for result in results:
        if isinstance(result, list):
            out.extend(result)
        else:
            out.append(result)
    return out


def _to_sort_spec(sort: Union[SortSpec, Mapping[str, Any], None]) -> Optional[SortSpec]:
    if sort is None or isinstance(sort, SortSpec):
        return sort
    if not sort.get("key"):
        return None
    return SortSpec(key=sort["key"], order=sort.get("order") or "asc")


class FeedParser:
    """
    High-level API: fetch RSS/Atom feeds concurrently and return normalized articles.

    Pipeline per URL: fetch → classify → parse → normalize. A URL that fails
    at any step yields a FeedFailure instead of articles; its siblings are
    unaffected.

    Results of `parse()`:
    - default: one entry per URL, in input order (list of articles or FeedFailure)
    - flatten=True: a single list of articles and FeedFailure markers
    - sort: applied per URL, or once over the flattened list
    """

    def __init__(
        self,
        urls: Union[str, Sequence[str]],
        *,
        flatten: bool = False,
        sort: Union[SortSpec, Mapping[str, Any], None] = None,
        max_concurrency: Optional[int] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.urls: List[str] = [urls] if isinstance(urls, str) else list(urls)
        self.flatten = flatten
        self.sort = _to_sort_spec(sort)
        self.settings = settings or Settings.from_env()
        self.max_concurrency = max_concurrency or self.settings.max_concurrency
        self._client = client

    @classmethod
    def create(cls, urls: Union[str, Sequence[str]], options: Optional[Mapping[str, Any]] = None) -> "FeedParser":
        """Build a parser from an options mapping with `flatten` and `sort` keys."""
        options = dict(options or {})
        return cls(urls, **options)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(
            timeout=self.settings.timeout,
            follow_redirects=self.settings.follow_redirects,
            headers={"User-Agent": self.settings.user_agent},
        ) as client:
            yield client

    @staticmethod
    async def read(client: httpx.AsyncClient, url: str) -> FetchResult:
        """Fetch and normalize one feed. Failures come back as FeedFailure."""
        try:
            markup = await fetch_feed_text(client, url)
            return parse_feed(markup, url)
        except FeedError as e:
            logger.warning("feed_failed", url=url, error=str(e))
            return FeedFailure(error=str(e), source=url)
        except Exception as e:
            # anything else is still confined to this URL
            logger.exception("feed_failed_unexpectedly", url=url)
            return FeedFailure(error=str(e) or type(e).__name__, source=url)

    async def parse(self) -> Union[List[FetchResult], List[Item]]:
        async with self._session() as client:
            if self.max_concurrency:
                semaphore = asyncio.Semaphore(self.max_concurrency)

                async def bounded(url: str) -> FetchResult:
                    async with semaphore:
                        return await self.read(client, url)

                results = await asyncio.gather(*(bounded(u) for u in self.urls))
            else:
                results = await asyncio.gather(*(self.read(client, u) for u in self.urls))

        results = list(results)
        failures = sum(1 for r in results if isinstance(r, FeedFailure))
        logger.info("parse_complete", urls=len(self.urls), failures=failures)

        if self.flatten:
            items = flatten_results(results)
            if self.sort:
                items = sort_articles(items, self.sort.key, self.sort.order)
            return items

        if self.sort:
            results = [
                sort_articles(r, self.sort.key, self.sort.order) if isinstance(r, list) else r
                for r in results
            ]
        return results

    def run(self) -> Union[List[FetchResult], List[Item]]:
        """Synchronous wrapper around `parse()`."""
        return asyncio.run(self.parse())

