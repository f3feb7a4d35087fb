from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Article:
    """
    Normalized representation of one RSS item or Atom entry.

    `category` and `link` keep whatever shape the feed markup had: a single
    value, a list of values, or (for generic Atom links) attribute dicts.
    """
    title: str
    source: str
    link: Any = None
    author: Optional[str] = None
    category: Any = None
    description: Optional[str] = None
    content: Optional[str] = None
    published: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        if self.author is not None:
            data["author"] = self.author
        if self.category is not None:
            data["category"] = self.category
        data["description"] = self.description
        data["content"] = self.content
        data["link"] = self.link
        data["source"] = self.source
        if self.published is not None:
            data["published"] = self.published
        return data


@dataclass(frozen=True)
class FeedFailure:
    """Error marker standing in for the articles of a feed that failed."""
    error: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "source": self.source}


@dataclass(frozen=True)
class SortSpec:
    key: str
    order: str = "asc"

    def __post_init__(self) -> None:
        if self.order not in ("asc", "desc"):
            raise ValueError(f"Unknown sort order: {self.order!r} (expected 'asc' or 'desc')")


FetchResult = Union[List[Article], FeedFailure]
