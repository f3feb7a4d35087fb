class FeedError(Exception):
    """Base class for failures confined to a single feed URL."""


class FetchError(FeedError):
    """Raised when a feed cannot be fetched (network, timeout, HTTP status)."""


class UnknownFeedTypeError(FeedError):
    """Raised when a document looks like neither RSS nor Atom."""


class FeedStructureError(FeedError):
    """Raised when a feed is not well-formed XML or lacks its channel/feed root."""
