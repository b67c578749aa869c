"""
Database package for the rsscast feed catalog.

Structure:
- models.py: SQLAlchemy table definitions (Feed, Article) and the FeedRecord row type
- queries.py: named-query registry, the only place statements are built
- database.py: CatalogStore (file lifecycle, exec, schema ensure) and open_catalog()

Usage:
    from rsscast.db import open_catalog

    with open_catalog(path) as store:
        store.ensure_schema()
        [feeds] = store.exec("selectFeeds")
"""

from .models import Base, Feed, Article, FeedRecord
from .queries import QUERIES, render
from .database import CatalogStore, ResultSet, open_catalog, validate_catalog_path

__all__ = [
    # Models
    "Base",
    "Feed",
    "Article",
    "FeedRecord",
    # Query registry
    "QUERIES",
    "render",
    # Catalog store
    "CatalogStore",
    "ResultSet",
    "open_catalog",
    "validate_catalog_path",
]
