import pytest
from sqlalchemy.dialects import sqlite

from rsscast.db.queries import QUERIES, render
from rsscast.exceptions import QueryFailed, UnknownOperation


def _sql(statement):
    return str(statement.compile(dialect=sqlite.dialect()))


def test_registry_names():
    assert set(QUERIES) == {
        "hasTable",
        "createTableFeeds",
        "createTableArticles",
        "selectFeeds",
        "insertFeed",
        "deleteFeed",
        "subscribeFeed",
        "unsubscribeFeed",
    }


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        QUERIES["dropEverything"] = lambda: ()


def test_unknown_operation():
    with pytest.raises(UnknownOperation) as excinfo:
        render("dropEverything")
    assert excinfo.value.name == "dropEverything"


def test_wrong_argument_count_is_query_failure():
    with pytest.raises(QueryFailed):
        render("insertFeed", ["only a title"])


def test_arguments_are_bound_not_interpolated():
    [statement] = render("deleteFeed", ["it's"])
    sql = _sql(statement)
    assert "it's" not in sql
    assert "LIKE" in sql
    assert "feeds.link" in sql and "feeds.title" in sql


def test_subscribe_and_unsubscribe_target_subscribed_at():
    [subscribe] = render("subscribeFeed", ["Go"])
    [unsubscribe] = render("unsubscribeFeed", ["Go"])
    assert "CURRENT_TIMESTAMP" in _sql(subscribe)
    assert "subscribed_at" in _sql(unsubscribe)
    assert "CURRENT_TIMESTAMP" not in _sql(unsubscribe)


def test_create_statements_are_idempotent_ddl():
    [feeds] = render("createTableFeeds")
    [articles] = render("createTableArticles")
    assert "IF NOT EXISTS feeds" in _sql(feeds)
    articles_sql = _sql(articles)
    assert "IF NOT EXISTS articles" in articles_sql
    assert "ON DELETE CASCADE" in articles_sql
    assert "ON UPDATE CASCADE" in articles_sql
