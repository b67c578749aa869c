"""
Named-query registry for the feed catalog.

Every statement the catalog runs is defined here and looked up by name; no
other module composes SQL. A template takes positional string arguments and
returns the statements to execute, in order. Arguments are always bound as
parameters, never interpolated into the query text.

Match-based operations select rows whose title or link *contains* the given
string (SQL ``LIKE '%' || :value || '%'``), so one call may touch zero, one or
many rows.
"""

from types import MappingProxyType
from typing import Callable, Mapping, Sequence, Tuple

from sqlalchemy import delete, insert, or_, select, text, update
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql import func
from sqlalchemy.sql.base import Executable
from sqlalchemy.sql.elements import ColumnElement

from rsscast.exceptions import QueryFailed, UnknownOperation
from .models import Article, Feed

Statements = Tuple[Executable, ...]
QueryTemplate = Callable[..., Statements]

feeds = Feed.__table__
articles = Article.__table__


def _matching(value: str) -> ColumnElement:
    """Substring match against either the link or the title."""
    return or_(feeds.c.link.contains(value), feeds.c.title.contains(value))


def has_table(name: str) -> Statements:
    return (
        text(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name"
        ).bindparams(name=name),
    )


def create_table_feeds() -> Statements:
    return (CreateTable(feeds, if_not_exists=True),)


def create_table_articles() -> Statements:
    return (CreateTable(articles, if_not_exists=True),)


def select_feeds() -> Statements:
    return (select(feeds),)


def insert_feed(title: str, link: str) -> Statements:
    return (insert(feeds).values(title=title, link=link),)


def delete_feed(match: str) -> Statements:
    return (delete(feeds).where(_matching(match)),)


def subscribe_feed(match: str) -> Statements:
    return (
        update(feeds)
        .where(_matching(match))
        .values(subscribed_at=func.current_timestamp()),
    )


def unsubscribe_feed(match: str) -> Statements:
    return (update(feeds).where(_matching(match)).values(subscribed_at=None),)


QUERIES: Mapping[str, QueryTemplate] = MappingProxyType(
    {
        "hasTable": has_table,
        "createTableFeeds": create_table_feeds,
        "createTableArticles": create_table_articles,
        "selectFeeds": select_feeds,
        "insertFeed": insert_feed,
        "deleteFeed": delete_feed,
        "subscribeFeed": subscribe_feed,
        "unsubscribeFeed": unsubscribe_feed,
    }
)


def render(
    name: str,
    args: Sequence[str] = (),
    queries: Mapping[str, QueryTemplate] = QUERIES,
) -> Statements:
    """
    Build the statements for a named operation.

    Args:
        name: Registered operation name (e.g. "selectFeeds")
        args: Positional string arguments for the template
        queries: Registry to look the name up in

    Returns:
        Tuple of executable statements, run in order by the store

    Raises:
        UnknownOperation: If the name is not registered
        QueryFailed: If the argument count does not fit the template
    """
    try:
        template = queries[name]
    except KeyError:
        raise UnknownOperation(name) from None
    try:
        return template(*args)
    except TypeError as e:
        raise QueryFailed(f"{name}: {e}") from e
