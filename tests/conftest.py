import io
import logging

import pytest
from rich.console import Console

from rsscast.db import CatalogStore
from rsscast.exceptions import FeedUnavailable
from rsscast.feeds import FeedDocument


class FakeSource:
    """Feed fetcher that answers from a dict and records every URL asked for."""

    def __init__(self, documents=None, failing=()):
        self.documents = dict(documents or {})
        self.failing = set(failing)
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url in self.failing or url not in self.documents:
            raise FeedUnavailable(url, "unreachable")
        return self.documents[url]


@pytest.fixture
def catalog_path(tmp_path):
    return str(tmp_path / "rss.sqlite3")


@pytest.fixture
def store(catalog_path):
    catalog = CatalogStore(catalog_path)
    catalog.ensure_schema()
    yield catalog
    catalog.close()


@pytest.fixture
def out():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def fake_source():
    return FakeSource(
        {
            "https://news.ycombinator.com/rss": FeedDocument(
                "Hacker News", "https://news.ycombinator.com/rss"
            ),
            "https://go.dev/blog/feed.atom": FeedDocument(
                "The Go Blog", "https://go.dev/blog/feed.atom"
            ),
        }
    )


@pytest.fixture
def reset_rsscast_logger():
    yield
    logger = logging.getLogger("rsscast")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
