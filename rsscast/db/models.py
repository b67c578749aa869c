"""
SQLAlchemy table definitions for the rsscast feed catalog.

The declarative classes are used for their Table metadata: the named queries
in queries.py build DDL and DML statements from them, so the column layout
lives in one place.

Tables:
    feeds: tracked RSS sources and their subscription state
    articles: reserved for article storage, not read or written yet
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Feed(Base):
    """
    One tracked RSS source.

    Attributes:
        id: Primary key, assigned by SQLite
        title: Feed title as returned by the feed document, trimmed
        link: Canonical feed link, trimmed (natural key for matching, not unique)
        subscribed_at: NULL when known but not subscribed, else time of subscription
        created_at: Insertion time, set by the database
    """

    __tablename__ = "feeds"

    id = Column(Integer, primary_key=True)
    title = Column(Text)
    link = Column(Text)
    subscribed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<Feed(id={self.id}, title='{self.title}', link='{self.link}')>"


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    article_id = Column(
        Integer, ForeignKey("articles.id", onupdate="CASCADE", ondelete="CASCADE")
    )
    title = Column(Text)
    link = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())


@dataclass(frozen=True)
class FeedRecord:
    """Typed view of a row returned by the selectFeeds query."""

    id: int
    title: str
    link: str
    subscribed_at: Optional[datetime]
    created_at: Optional[datetime]

    @property
    def subscribed(self) -> bool:
        return self.subscribed_at is not None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "FeedRecord":
        return cls(
            id=row["id"],
            title=row["title"],
            link=row["link"],
            subscribed_at=row.get("subscribed_at"),
            created_at=row.get("created_at"),
        )
