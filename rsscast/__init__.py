"""rsscast: a personal command-line catalog of RSS feeds."""

__version__ = "0.1.0"
