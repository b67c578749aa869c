#!/usr/bin/env python3
"""
CLI interface for the rsscast feed catalog.

Usage:
    uv run -m rsscast                                   # List feeds
    uv run -m rsscast add https://go.dev/blog/feed.atom # Add a feed
    uv run -m rsscast --add https://go.dev/blog/feed.atom
    uv run -m rsscast remove ycombinator                # Remove matching feeds
    uv run -m rsscast subscribe "Go Blog"               # Subscribe matching feeds
    uv run -m rsscast unsubscribe "Go Blog"
    uv run -m rsscast --db /tmp/feeds.sqlite3 --verbose # Other catalog, debug output
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.text import Text

from rsscast.config import Settings
from rsscast.exceptions import StoreUnavailable, UnknownOperation
from rsscast.feeds import load_default_feeds, make_fetcher
from rsscast.logger import setup_logging
from .commands import COMMANDS, TARGET_COMMANDS, console, parse_command, rss


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rsscast",
        description="RSS feeds management utility.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rsscast                                  # List feeds
  rsscast add https://go.dev/blog/feed.atom
  rsscast --remove ycombinator             # Remove feeds matching "ycombinator"
  rsscast subscribe Go                     # Subscribe to feeds matching "Go"
        """,
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        help="Command to run (default: list)",
    )
    parser.add_argument(
        "target", nargs="?", help="Feed link, or text to match against title/link"
    )
    parser.add_argument("--add", metavar="LINK", help="Add a new RSS feed.")
    parser.add_argument(
        "--remove", metavar="TEXT", help="Remove feeds whose title or link contains TEXT."
    )
    parser.add_argument(
        "--subscribe",
        metavar="TEXT",
        help="Subscribe to feeds whose title or link contains TEXT.",
    )
    parser.add_argument(
        "--unsubscribe",
        metavar="TEXT",
        help="Unsubscribe from feeds whose title or link contains TEXT.",
    )
    parser.add_argument(
        "--db", metavar="PATH", help="Catalog file (overrides RSSCAST_DB_PATH)"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Detailed console output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the rsscast CLI.

    Returns the process exit code: 0 on success (including commands that
    reported a recoverable error), 1 when the catalog cannot be opened, 130
    when interrupted by the user.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    flags = {name: getattr(args, name) for name in COMMANDS if name in TARGET_COMMANDS}
    command = args.command or parse_command(flags)
    target = args.target if args.target is not None else flags.get(command)
    if command in TARGET_COMMANDS and not target:
        parser.error(f"{command} requires a link or match text")

    settings = Settings.from_env().with_db_path(args.db)

    try:
        logger = setup_logging(
            logger_name="rsscast",
            log_file=settings.log_file,
            verbose=args.verbose,
        )
    except OSError as e:
        # Run without a log file rather than not at all
        logger = logging.getLogger("rsscast")
        console.print(
            Text(f"Warning: cannot write log file {settings.log_file}: {e}", style="dim"),
            highlight=False,
        )
    logger.info(f"Starting rsscast {command}")

    try:
        rss(
            settings.db_path,
            load_default_feeds(),
            make_fetcher(settings),
            command=command,
            target=target,
        )
        return 0

    except StoreUnavailable as e:
        logger.error(f"Catalog unavailable: {e}")
        console.print(Text.assemble(("Error: ", "bold red"), str(e)))
        return 1
    except UnknownOperation as e:
        logger.error(f"Internal error: {e}")
        console.print(Text.assemble(("Internal error: ", "bold red"), str(e)))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
