"""
Catalog sync and user commands.

One invocation walks through:
    open catalog -> ensure schema -> seed if empty -> run one command -> close

Commands:
    list         print every feed in catalog order
    add LINK     fetch LINK and store the feed's canonical title and link
    remove TEXT  delete feeds whose title or link contains TEXT
    subscribe TEXT / unsubscribe TEXT
                 set / clear subscribed_at on feeds whose title or link contains TEXT

Per-feed and per-command failures are logged and reported, never raised past
run_command(); the catalog is closed on every path.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rich.console import Console
from rich.text import Text

from rsscast.db import CatalogStore, FeedRecord, open_catalog
from rsscast.exceptions import FeedUnavailable, QueryFailed
from rsscast.feeds import DefaultFeed, FeedDocument, FeedFetcher
from rsscast.logger import log_function


logger = logging.getLogger("rsscast.catalog")

console = Console()

DEFAULT_COMMAND = "list"
COMMANDS = ("list", "add", "remove", "subscribe", "unsubscribe")
TARGET_COMMANDS = frozenset(COMMANDS) - {"list"}


def _report_error(out: Console, message: str) -> None:
    out.print(Text(message, style="bold red"))


@log_function(logger_name="rsscast.catalog")
def seed_empty_catalog(
    store: CatalogStore,
    default_feeds: Sequence[DefaultFeed],
    fetch: FeedFetcher,
) -> Dict[str, int]:
    """
    Populate an empty feeds table from the bundled default list.

    Each default feed is fetched first and stored under its canonical title
    and link. Feeds that cannot be fetched are skipped; the rest are still
    seeded. Does nothing when the catalog already holds feeds.

    Returns:
        Dictionary with statistics:
        - added: Number of default feeds inserted
        - skipped: Number of default feeds that failed validation
    """
    stats = {"added": 0, "skipped": 0}

    [feeds] = store.exec("selectFeeds")
    if len(feeds) > 0:
        return stats

    logger.info(f"Seeding empty catalog with {len(default_feeds)} default feeds")
    for candidate in default_feeds:
        try:
            feed = fetch(candidate.link)
        except FeedUnavailable as e:
            logger.warning(f"Skipping default feed {candidate.link}: {e.reason}")
            stats["skipped"] += 1
            continue

        store.exec("insertFeed", [feed.title, feed.link])
        stats["added"] += 1

    logger.info(
        f"Seeding done: {stats['added']} added, {stats['skipped']} skipped"
    )
    return stats


@log_function(logger_name="rsscast.catalog")
def list_feeds(store: CatalogStore, out: Console = console) -> List[FeedRecord]:
    """Print every feed, in the order the catalog returns them."""
    [rows] = store.exec("selectFeeds")
    feeds = [FeedRecord.from_row(row) for row in rows]

    out.print()
    if not feeds:
        out.print(Text("  No feeds.", style="dim"))
        out.print()
        return feeds

    for feed in feeds:
        title_line = Text(f"  {feed.title}", style="bold green")
        if feed.subscribed:
            title_line.append(f"  (subscribed since {feed.subscribed_at})", style="cyan")
        out.print(title_line)
        out.print(Text(f"  {feed.link}", style="bold yellow"))
        out.print()

    return feeds


@log_function(logger_name="rsscast.catalog", log_args=True)
def add_feed(
    store: CatalogStore,
    link: str,
    fetch: FeedFetcher,
    out: Console = console,
) -> Optional[FeedDocument]:
    """
    Fetch a feed and add it to the catalog under its canonical title and link.

    The stored link is the one found in the feed document, which may differ
    from the URL given here.

    Returns:
        The stored FeedDocument, or None if the feed could not be fetched
    """
    try:
        feed = fetch(link.strip())
    except FeedUnavailable as e:
        logger.warning(f"Not adding {link}: {e.reason}")
        _report_error(out, f"Could not add {link}: {e.reason}")
        return None

    store.exec("insertFeed", [feed.title, feed.link])
    out.print(Text.assemble("Added ", (feed.title, "bold green"), f" ({feed.link})"))
    return feed


def _mutate_matching(
    store: CatalogStore, operation: str, match: str, verb: str, out: Console
) -> int:
    [result] = store.exec(operation, [match])
    count = max(result.rowcount, 0)
    logger.info(f"{operation} {match!r}: {count} feed(s)")
    out.print(Text(f"{verb} {count} feed(s) matching {match!r}"))
    return count


@log_function(logger_name="rsscast.catalog", log_args=True)
def remove_feed(store: CatalogStore, match: str, out: Console = console) -> int:
    """Delete every feed whose title or link contains match. Returns the count."""
    return _mutate_matching(store, "deleteFeed", match, "Removed", out)


@log_function(logger_name="rsscast.catalog", log_args=True)
def subscribe_feed(store: CatalogStore, match: str, out: Console = console) -> int:
    """Mark every feed whose title or link contains match as subscribed now."""
    return _mutate_matching(store, "subscribeFeed", match, "Subscribed to", out)


@log_function(logger_name="rsscast.catalog", log_args=True)
def unsubscribe_feed(store: CatalogStore, match: str, out: Console = console) -> int:
    """Clear the subscription of every feed whose title or link contains match."""
    return _mutate_matching(store, "unsubscribeFeed", match, "Unsubscribed from", out)


def parse_command(
    flags: Mapping[str, Optional[str]], default: str = DEFAULT_COMMAND
) -> str:
    """Return the first command whose option flag was given, else default."""
    for name, value in flags.items():
        if name in TARGET_COMMANDS and value is not None:
            return name
    return default


def run_command(
    store: CatalogStore,
    command: str,
    target: Optional[str],
    default_feeds: Sequence[DefaultFeed],
    fetch: FeedFetcher,
    out: Console = console,
) -> bool:
    """
    Ensure the schema, seed if needed, and run one command on an open store.

    QueryFailed is caught here: it is logged, reported, and the command is
    abandoned. UnknownOperation is not caught.

    Returns:
        True if the command ran to completion, False if it was abandoned
    """
    try:
        store.ensure_schema()
        seed_empty_catalog(store, default_feeds, fetch)

        if command == "list":
            list_feeds(store, out)
        elif command == "add":
            return add_feed(store, target, fetch, out) is not None
        elif command == "remove":
            remove_feed(store, target, out)
        elif command == "subscribe":
            subscribe_feed(store, target, out)
        elif command == "unsubscribe":
            unsubscribe_feed(store, target, out)

        return True

    except QueryFailed as e:
        logger.error(f"Command {command} failed: {e.detail}")
        _report_error(out, f"Command {command} failed: {e.detail}")
        return False


def rss(
    db_path: str,
    default_feeds: Iterable[DefaultFeed],
    fetch: FeedFetcher,
    command: Optional[str] = None,
    target: Optional[str] = None,
    flags: Optional[Mapping[str, Optional[str]]] = None,
    out: Console = console,
) -> bool:
    """
    Run one rsscast invocation against the catalog at db_path.

    Args:
        db_path: Catalog file location
        default_feeds: Seed candidates for an empty catalog
        fetch: Feed source used to validate feeds before insertion
        command: Explicit command name; when None it is derived from flags
        target: Link or match text; when None it is taken from flags[command]
        flags: Option flags given by the user (e.g. {"add": "https://..."})
        out: Console that receives user-facing output

    Returns:
        True if the command completed, False if it was abandoned

    Raises:
        ValueError: Unknown command, or missing target for a command that needs one
        StoreUnavailable: If the catalog file cannot be opened
        UnknownOperation: If a command refers to an unregistered query
    """
    flags = dict(flags or {})
    command = command or parse_command(flags)
    if command not in COMMANDS:
        raise ValueError(f"Unknown command: {command!r}")

    if target is None:
        target = flags.get(command)
    if command in TARGET_COMMANDS and not target:
        raise ValueError(f"Command {command!r} needs a link or match text")

    logger.info(f"Running command {command} on catalog {db_path}")
    with open_catalog(db_path) as store:
        return run_command(store, command, target, tuple(default_feeds), fetch, out)
