"""Feed catalog commands: seeding, list, add, remove, subscribe, unsubscribe."""

from .commands import (
    COMMANDS,
    DEFAULT_COMMAND,
    add_feed,
    list_feeds,
    parse_command,
    remove_feed,
    rss,
    run_command,
    seed_empty_catalog,
    subscribe_feed,
    unsubscribe_feed,
)

__all__ = [
    "COMMANDS",
    "DEFAULT_COMMAND",
    "add_feed",
    "list_feeds",
    "parse_command",
    "remove_feed",
    "rss",
    "run_command",
    "seed_empty_catalog",
    "subscribe_feed",
    "unsubscribe_feed",
]
