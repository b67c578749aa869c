"""
SQLite catalog store for rsscast.

This module owns the catalog file for one invocation:
- Opens a single SQLite file through a SQLAlchemy engine (NullPool)
- Executes named operations from the query registry, one transaction per call
- Ensures the feeds and articles tables exist before any business logic runs
- Releases the file exactly once, through close() or the open_catalog() scope

SQLAlchemy errors never leave this module raw: open failures become
StoreUnavailable and execution failures become QueryFailed.
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, Iterator, List, Mapping, Optional, Sequence

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from rsscast.exceptions import QueryFailed, StoreUnavailable
from rsscast.logger import log_function
from .queries import QUERIES, QueryTemplate, render


logger = logging.getLogger("rsscast.db")

REQUIRED_TABLES = (
    ("feeds", "createTableFeeds"),
    ("articles", "createTableArticles"),
)


@dataclass
class ResultSet:
    """
    Rows produced by one executed statement.

    Behaves as a read-only sequence of dict rows (column name -> value).
    For INSERT/UPDATE/DELETE statements, rows is empty and rowcount holds the
    number of affected rows.
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = -1

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]


def validate_catalog_path(path: str) -> tuple[bool, str]:
    """Validate the catalog file path; the parent directory must already exist."""
    if not path:
        return False, "Catalog file path is empty"

    db_path = Path(path).expanduser()
    if db_path.is_dir():
        return False, f"Catalog path is a directory: {db_path}"

    # Check if parent directory exists (but don't create it)
    parent_dir = db_path.parent
    if not parent_dir.is_dir():
        return False, f"Catalog directory does not exist: {parent_dir}"

    if db_path.exists() and not os.access(db_path, os.W_OK):
        return False, f"Catalog file is not writable: {db_path}"

    return True, str(db_path)


def configure_sqlite_connection(dbapi_connection, connection_record):
    """Apply SQLite settings when a connection is created."""
    cursor = dbapi_connection.cursor()

    # Cascades on articles.article_id need foreign keys enabled
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")

    cursor.close()


def _error_detail(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class CatalogStore:
    """
    Persistent feed catalog backed by one SQLite file.

    The file is opened (and created if absent) on construction; tables are not
    created until ensure_schema() runs. Use open_catalog() to get a store that
    is guaranteed to be closed on every exit path.
    """

    def __init__(self, path: str, queries: Mapping[str, QueryTemplate] = QUERIES):
        is_valid, db_info = validate_catalog_path(path)
        if not is_valid:
            logger.error(f"Catalog configuration error: {db_info}")
            raise StoreUnavailable(db_info)

        self.path = db_info
        self._queries = queries
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None

        try:
            self._engine = create_engine(
                f"sqlite:///{self.path}",
                poolclass=NullPool,
                echo=False,  # Set to True to log SQL queries
            )
            event.listen(self._engine, "connect", configure_sqlite_connection)

            self._connection = self._engine.connect()
            # Rewrite the header value so an unwritable catalog fails here, not mid-command
            with self._connection.begin():
                version = self._connection.exec_driver_sql(
                    "PRAGMA user_version"
                ).scalar()
                self._connection.exec_driver_sql(f"PRAGMA user_version = {int(version)}")

        except SQLAlchemyError as e:
            logger.error(f"Failed to open catalog {self.path}: {e}")
            self._release()
            raise StoreUnavailable(
                f"Cannot open catalog {self.path}: {_error_detail(e)}"
            ) from e

        logger.debug(f"Catalog opened: {self.path}")

    def __repr__(self):
        return f"<CatalogStore(path='{self.path}', closed={self.closed})>"

    @property
    def closed(self) -> bool:
        return self._connection is None

    @log_function(logger_name="rsscast.db", log_args=True)
    def exec(self, name: str, args: Sequence[str] = ()) -> List[ResultSet]:
        """
        Execute a named operation and return one result set per statement.

        Args:
            name: Operation name registered in the query registry
            args: Positional string arguments for the operation

        Returns:
            List of ResultSet, in statement order

        Raises:
            UnknownOperation: If the name is not registered
            QueryFailed: On any execution error, or if the store is closed
        """
        statements = render(name, args, self._queries)

        if self._connection is None:
            raise QueryFailed(f"{name}: catalog is closed")

        results: List[ResultSet] = []
        try:
            with self._connection.begin():
                for statement in statements:
                    result = self._connection.execute(statement)
                    if result.returns_rows:
                        rows = [dict(row) for row in result.mappings()]
                        results.append(ResultSet(rows=rows, rowcount=len(rows)))
                    else:
                        results.append(ResultSet(rowcount=result.rowcount))
        except SQLAlchemyError as e:
            logger.error(f"Catalog operation {name} failed: {e}")
            raise QueryFailed(f"{name}: {_error_detail(e)}") from e

        return results

    @log_function(logger_name="rsscast.db")
    def ensure_schema(self) -> List[str]:
        """
        Create the feeds and articles tables if they are missing.

        Probes each table with hasTable and only runs its CREATE statement when
        the probe comes back empty. Safe to call any number of times.

        Returns:
            Names of the tables that were created by this call
        """
        created = []
        for table_name, create_operation in REQUIRED_TABLES:
            [probe] = self.exec("hasTable", [table_name])
            if len(probe) == 0:
                self.exec(create_operation)
                created.append(table_name)
                logger.info(f"Created catalog table {table_name}")
        return created

    def close(self) -> None:
        """Release the catalog file. Calling it again is a no-op."""
        if self._connection is None and self._engine is None:
            return
        self._release()
        logger.debug(f"Catalog closed: {self.path}")

    def _release(self) -> None:
        connection, engine = self._connection, self._engine
        self._connection = None
        self._engine = None
        try:
            if connection is not None:
                connection.close()
        finally:
            if engine is not None:
                engine.dispose()

    def __enter__(self) -> "CatalogStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@contextmanager
def open_catalog(path: str) -> Generator[CatalogStore, None, None]:
    """
    Context manager for the catalog (one store per invocation).

    The store is closed when the block exits, whether it returned normally,
    returned early or raised.

    Usage:
        with open_catalog(settings.db_path) as store:
            store.ensure_schema()
            store.exec("selectFeeds")
    """
    store = CatalogStore(path)
    try:
        yield store
    finally:
        store.close()
