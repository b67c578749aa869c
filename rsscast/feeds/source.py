"""
Feed source: fetch a feed URL and extract its title and canonical link.

Only the channel-level metadata is read. RSS 2.0, RSS 1.0 (RDF) and Atom
documents are accepted. Every failure (timeout, connection error, HTTP error
status, unparseable or incomplete document) is raised as FeedUnavailable, which
callers treat as a per-feed, recoverable error.
"""

import functools
import logging
from typing import Callable, List, NamedTuple

import requests
from bs4 import BeautifulSoup, Tag

from rsscast.config import DEFAULT_FETCH_TIMEOUT, DEFAULT_USER_AGENT, Settings
from rsscast.exceptions import FeedUnavailable
from rsscast.logger import log_function


logger = logging.getLogger("rsscast.feeds")


class FeedDocument(NamedTuple):
    """Normalized feed metadata: both values trimmed and non-empty."""

    title: str
    link: str


FeedFetcher = Callable[[str], FeedDocument]


def _local_name(tag: Tag) -> str:
    # "atom:link" and "link" both count as link
    return tag.name.split(":")[-1]


def _children(container: Tag, name: str) -> List[Tag]:
    return [
        child
        for child in container.find_all(True, recursive=False)
        if _local_name(child) == name
    ]


def _feed_title(container: Tag) -> str:
    for tag in _children(container, "title"):
        title = tag.get_text(strip=True)
        if title:
            return title
    return ""


def _feed_link(container: Tag) -> str:
    """Prefer the self link (the feed's own URL), then the first usable link."""
    links = _children(container, "link")
    for tag in links:
        if tag.get("rel") == "self" and tag.get("href"):
            return tag["href"].strip()
    for tag in links:
        link = tag.get_text(strip=True) or tag.get("href", "").strip()
        if link:
            return link
    return ""


def parse_feed(content: bytes, url: str) -> FeedDocument:
    """
    Extract the title and canonical link from a raw feed document.

    Args:
        content: Raw document bytes as returned by the server
        url: URL the document came from (used in error messages only)

    Returns:
        FeedDocument with trimmed title and link

    Raises:
        FeedUnavailable: If the document is not a feed or lacks a title or link
    """
    soup = BeautifulSoup(content, "xml")

    container = soup.find("channel") or soup.find("feed")
    if container is None:
        raise FeedUnavailable(url, "not an RSS or Atom document")

    title = _feed_title(container)
    link = _feed_link(container)
    if not title or not link:
        raise FeedUnavailable(url, "feed document has no title or link")

    return FeedDocument(title=title.strip(), link=link.strip())


@log_function(logger_name="rsscast.feeds", log_args=True, log_result=True)
def fetch_feed(
    url: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> FeedDocument:
    """
    Fetch a feed and return its normalized title and link.

    Args:
        url: Feed URL
        timeout: Seconds to wait for the server before giving up
        user_agent: User-Agent header sent with the request

    Returns:
        FeedDocument(title, link)

    Raises:
        FeedUnavailable: On timeout, network error, HTTP error or parse error
    """
    logger.info(f"Fetching feed from {url}...")
    try:
        response = requests.get(
            url, timeout=timeout, headers={"User-Agent": user_agent}
        )
        response.raise_for_status()
    except requests.Timeout as e:
        raise FeedUnavailable(url, f"timed out after {timeout}s") from e
    except requests.RequestException as e:
        raise FeedUnavailable(url, str(e)) from e

    return parse_feed(response.content, url)


def make_fetcher(settings: Settings) -> FeedFetcher:
    """Bind fetch_feed to the configured timeout and User-Agent."""
    return functools.partial(
        fetch_feed, timeout=settings.fetch_timeout, user_agent=settings.user_agent
    )
