"""
Configuration settings for the rsscast command.

Values come from the environment (a local .env file is loaded first) and are
gathered into an immutable Settings instance that the CLI passes down to the
catalog store, the feed source and the logging setup.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


logger = logging.getLogger("rsscast.config")

DEFAULT_DB_PATH = str(Path.home() / ".rss.sqlite3")
DEFAULT_FETCH_TIMEOUT = 5.0  # seconds
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/78.0.3904.108 Safari/537.36"
)
DEFAULT_LOG_FILE = str(Path.home() / ".rsscast" / "rsscast.log")


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_FETCH_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            f"Invalid RSSCAST_FETCH_TIMEOUT {raw!r}, using {DEFAULT_FETCH_TIMEOUT}s"
        )
        return DEFAULT_FETCH_TIMEOUT
    if value <= 0:
        logger.warning(
            f"RSSCAST_FETCH_TIMEOUT must be positive, using {DEFAULT_FETCH_TIMEOUT}s"
        )
        return DEFAULT_FETCH_TIMEOUT
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings for one rsscast invocation"""

    # Catalog file
    db_path: str = DEFAULT_DB_PATH

    # Feed source
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    # Logging
    log_file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from RSSCAST_* environment variables."""
        load_dotenv()
        return cls(
            db_path=os.path.expanduser(os.getenv("RSSCAST_DB_PATH", DEFAULT_DB_PATH)),
            fetch_timeout=_parse_timeout(os.getenv("RSSCAST_FETCH_TIMEOUT")),
            user_agent=os.getenv("RSSCAST_USER_AGENT") or DEFAULT_USER_AGENT,
            log_file=os.path.expanduser(
                os.getenv("RSSCAST_LOG_FILE") or DEFAULT_LOG_FILE
            ),
        )

    def with_db_path(self, db_path: Optional[str]) -> "Settings":
        """Return a copy pointing at another catalog file (CLI --db override)."""
        if not db_path:
            return self
        return replace(self, db_path=os.path.expanduser(db_path))
