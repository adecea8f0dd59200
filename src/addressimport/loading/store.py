"""
Relational store for the address hierarchy.

The loader only needs two operations per table, clearing it and inserting a
list of records. SQLiteAddressStore provides them on top of sqlite3 and adds
an explicit transaction so that a whole replace can be made atomic.
"""

import sqlite3
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from addressimport.errors import StoreError
from addressimport.hierarchy.models import BARANGAYS, LGUS, PROVINCES, REGIONS
from addressimport.utils.logging import get_logger

log = get_logger(__name__)

TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    REGIONS: ("code", "name"),
    PROVINCES: ("code", "name", "region_code"),
    LGUS: ("code", "name", "province_code"),
    BARANGAYS: ("code", "name", "province_code", "lgu_code"),
}

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS regions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS provinces (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    region_code TEXT NOT NULL REFERENCES regions (code)
);
CREATE TABLE IF NOT EXISTS lgus (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    province_code TEXT NOT NULL REFERENCES provinces (code)
);
CREATE TABLE IF NOT EXISTS barangays (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL,
    name TEXT NOT NULL,
    province_code TEXT NOT NULL REFERENCES provinces (code),
    lgu_code TEXT NOT NULL REFERENCES lgus (code)
);
CREATE INDEX IF NOT EXISTS idx_barangays_code ON barangays (code);
"""


@runtime_checkable
class AddressStore(Protocol):
    """Minimal store contract used by the loader."""

    def delete_all(self, table: str) -> None:
        """Remove every row of table. Raises StoreError on failure."""
        ...

    def insert_many(self, table: str, records: Sequence[Mapping[str, Any]]) -> None:
        """Insert records into table. Raises StoreError on failure."""
        ...


@runtime_checkable
class TransactionalStore(AddressStore, Protocol):
    """Store that can group several operations into one transaction."""

    def transaction(self) -> Any:
        """Context manager committing on success and rolling back on error."""
        ...


class SQLiteAddressStore:
    """
    AddressStore backed by a SQLite database.

    Each delete_all and insert_many call commits on its own unless it runs
    inside transaction(), in which case everything commits together.
    """

    def __init__(self, path: Path | str, *, enforce_foreign_keys: bool = True) -> None:
        """
        Open (and create if needed) the database.

        Args:
            path: Database file, or ":memory:".
            enforce_foreign_keys: Reject orphaned parent codes on insert and
                deletes of referenced parents.
        """
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Autocommit mode; transactions are opened explicitly. The CLI
            # runs loads on a worker thread, one operation at a time.
            self._conn = sqlite3.connect(
                self.path, isolation_level=None, check_same_thread=False
            )
            self._conn.execute(
                f"PRAGMA foreign_keys = {'ON' if enforce_foreign_keys else 'OFF'}"
            )
        except sqlite3.Error as e:
            msg = f"Cannot open database {self.path}: {e}"
            raise StoreError(msg) from e

        self.enforce_foreign_keys = enforce_foreign_keys
        self.initialize()

    def initialize(self) -> None:
        """Create the hierarchy tables if they do not exist."""
        try:
            self._conn.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            msg = f"Cannot create schema: {e}"
            raise StoreError(msg) from e

    def _columns(self, table: str) -> tuple[str, ...]:
        try:
            return TABLE_COLUMNS[table]
        except KeyError:
            msg = f"Unknown table: {table!r}"
            raise StoreError(msg, table=table) from None

    @contextmanager
    def _step(self, table: str) -> Iterator[sqlite3.Connection]:
        """Run one operation in its own transaction unless one is already open."""
        own_transaction = not self._conn.in_transaction
        try:
            if own_transaction:
                self._conn.execute("BEGIN")
            yield self._conn
            if own_transaction:
                self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            if own_transaction and self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise StoreError(str(e), table=table) from e

    def delete_all(self, table: str) -> None:
        self._columns(table)
        with self._step(table) as conn:
            cursor = conn.execute(f"DELETE FROM {table}")  # noqa: S608
        log.debug("Cleared table", table=table, rows=cursor.rowcount)

    def insert_many(self, table: str, records: Sequence[Mapping[str, Any]]) -> None:
        columns = self._columns(table)
        placeholders = ", ".join(f":{col}" for col in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"  # noqa: S608
        with self._step(table) as conn:
            conn.executemany(sql, records)
        log.debug("Inserted records", table=table, rows=len(records))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group every operation in the block into one transaction."""
        if self._conn.in_transaction:
            msg = "A transaction is already open"
            raise StoreError(msg)
        try:
            self._conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        try:
            yield
        except BaseException:
            # SQLite may already have rolled back on its own (disk full, I/O error).
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            log.info("Rolled back transaction", path=self.path)
            raise
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise StoreError(str(e)) from e

    def count(self, table: str) -> int:
        """Number of rows currently stored in table."""
        self._columns(table)
        try:
            (n,) = self._conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()  # noqa: S608
        except sqlite3.Error as e:
            raise StoreError(str(e), table=table) from e
        return int(n)

    def fetch_all(self, table: str) -> list[dict[str, Any]]:
        """All rows of table in insertion order, without the surrogate id."""
        columns = self._columns(table)
        try:
            cursor = self._conn.execute(
                f"SELECT {', '.join(columns)} FROM {table} ORDER BY id"  # noqa: S608
            )
            return [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(str(e), table=table) from e

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SQLiteAddressStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
