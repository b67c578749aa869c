"""Feed source adapter and the bundled default feed list."""

from .source import FeedDocument, FeedFetcher, fetch_feed, make_fetcher, parse_feed
from .defaults import DEFAULT_FEEDS_FILE, DefaultFeed, load_default_feeds

__all__ = [
    "FeedDocument",
    "FeedFetcher",
    "fetch_feed",
    "make_fetcher",
    "parse_feed",
    "DEFAULT_FEEDS_FILE",
    "DefaultFeed",
    "load_default_feeds",
]
