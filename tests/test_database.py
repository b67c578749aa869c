import os
import sqlite3
from types import MappingProxyType
from unittest import mock

import pytest
from sqlalchemy import text

from rsscast.db import CatalogStore, QUERIES, open_catalog, validate_catalog_path
from rsscast.exceptions import QueryFailed, StoreUnavailable, UnknownOperation


def _tables(path):
    with sqlite3.connect(path) as conn:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        ).fetchall()
    return [row[0] for row in rows]


def test_open_does_not_create_tables(catalog_path):
    store = CatalogStore(catalog_path)
    store.close()
    assert os.path.exists(catalog_path)
    assert _tables(catalog_path) == []


def test_missing_directory_is_store_unavailable(tmp_path):
    with pytest.raises(StoreUnavailable):
        CatalogStore(str(tmp_path / "missing" / "rss.sqlite3"))


def test_directory_path_is_store_unavailable(tmp_path):
    is_valid, message = validate_catalog_path(str(tmp_path))
    assert not is_valid
    assert "directory" in message


def test_ensure_schema_is_idempotent(catalog_path):
    with open_catalog(catalog_path) as store:
        assert store.ensure_schema() == ["feeds", "articles"]
        assert store.ensure_schema() == []

    with open_catalog(catalog_path) as store:
        assert store.ensure_schema() == []

    assert _tables(catalog_path) == ["articles", "feeds"]


def test_has_table_probe(store):
    [found] = store.exec("hasTable", ["feeds"])
    [missing] = store.exec("hasTable", ["entries"])
    assert [row["name"] for row in found] == ["feeds"]
    assert len(missing) == 0


def test_insert_and_select_rows(store):
    [inserted] = store.exec("insertFeed", ["Hacker News", "https://news.ycombinator.com/rss"])
    assert inserted.rowcount == 1

    [rows] = store.exec("selectFeeds")
    assert len(rows) == 1
    row = rows[0]
    assert set(row) == {"id", "title", "link", "subscribed_at", "created_at"}
    assert row["title"] == "Hacker News"
    assert row["subscribed_at"] is None
    assert row["created_at"] is not None


def test_quotes_in_arguments_are_stored_verbatim(store):
    store.exec("insertFeed", ["O'Reilly Radar", "https://example.com/o'reilly.xml"])
    [deleted] = store.exec("deleteFeed", ["o'reilly"])
    assert deleted.rowcount == 1


def test_subscribe_then_unsubscribe(store):
    store.exec("insertFeed", ["Go Blog", "https://go.dev/blog/feed"])

    [updated] = store.exec("subscribeFeed", ["Go"])
    assert updated.rowcount == 1
    [[row]] = store.exec("selectFeeds")
    assert row["subscribed_at"] is not None

    store.exec("unsubscribeFeed", ["go.dev"])
    [[row]] = store.exec("selectFeeds")
    assert row["subscribed_at"] is None


def test_unknown_operation(store):
    with pytest.raises(UnknownOperation):
        store.exec("truncateFeeds")


def test_execution_error_is_query_failed(catalog_path):
    queries = MappingProxyType(
        dict(QUERIES, broken=lambda: (text("SELECT * FROM no_such_table"),))
    )
    with CatalogStore(catalog_path, queries=queries) as store:
        with pytest.raises(QueryFailed) as excinfo:
            store.exec("broken")
    assert "no_such_table" in excinfo.value.detail


def test_multi_statement_operation_returns_one_result_per_statement(catalog_path):
    queries = MappingProxyType(
        dict(
            QUERIES,
            pair=lambda: (text("SELECT 1 AS one"), text("SELECT 2 AS two")),
        )
    )
    with CatalogStore(catalog_path, queries=queries) as store:
        first, second = store.exec("pair")
    assert first[0] == {"one": 1}
    assert second[0] == {"two": 2}


def test_close_is_idempotent(catalog_path):
    store = CatalogStore(catalog_path)
    store.close()
    store.close()
    assert store.closed


def test_exec_after_close_fails(catalog_path):
    store = CatalogStore(catalog_path)
    store.close()
    with pytest.raises(QueryFailed):
        store.exec("selectFeeds")


def test_open_catalog_closes_on_error(catalog_path):
    with mock.patch.object(
        CatalogStore, "close", autospec=True, side_effect=CatalogStore.close
    ) as close:
        with pytest.raises(RuntimeError):
            with open_catalog(catalog_path) as store:
                raise RuntimeError("boom")

    assert close.call_count == 1
    assert store.closed


def _read_only_connection(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA query_only=ON")
    cursor.close()


def test_read_only_catalog_is_store_unavailable(catalog_path):
    CatalogStore(catalog_path).close()

    with mock.patch(
        "rsscast.db.database.configure_sqlite_connection", _read_only_connection
    ):
        with pytest.raises(StoreUnavailable):
            CatalogStore(catalog_path)


@pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0,
    reason="root ignores file permission bits",
)
def test_unwritable_catalog_file_is_store_unavailable(catalog_path):
    CatalogStore(catalog_path).close()
    os.chmod(catalog_path, 0o444)
    try:
        with pytest.raises(StoreUnavailable):
            CatalogStore(catalog_path)
    finally:
        os.chmod(catalog_path, 0o644)


def test_delete_feed_matches_title_as_well_as_link(store):
    store.exec("insertFeed", ["Hacker News", "https://news.ycombinator.com/rss"])
    store.exec("insertFeed", ["Go Blog", "https://go.dev/blog/feed"])

    [deleted] = store.exec("deleteFeed", ["Hacker"])

    assert deleted.rowcount == 1
    [rows] = store.exec("selectFeeds")
    assert [row["title"] for row in rows] == ["Go Blog"]
