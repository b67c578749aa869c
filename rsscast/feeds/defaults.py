"""Bundled default feed list, used to seed an empty catalog."""

import json
import logging
from pathlib import Path
from typing import NamedTuple, Tuple, Union


logger = logging.getLogger("rsscast.feeds")

DEFAULT_FEEDS_FILE = Path(__file__).resolve().parent / "data" / "rss_feeds.json"


class DefaultFeed(NamedTuple):
    title: str
    link: str


def load_default_feeds(
    path: Union[str, Path] = DEFAULT_FEEDS_FILE,
) -> Tuple[DefaultFeed, ...]:
    """
    Load the seed candidates, in file order.

    Entries without a link are dropped with a warning. The result is a tuple
    so the list can be passed around without being modified.
    """
    with open(path, encoding="utf-8") as file:
        entries = json.load(file)

    feeds = []
    for entry in entries:
        link = (entry.get("link") or "").strip()
        if not link:
            logger.warning(f"Skipping default feed without link: {entry!r}")
            continue
        feeds.append(DefaultFeed(title=(entry.get("title") or "").strip(), link=link))
    return tuple(feeds)
