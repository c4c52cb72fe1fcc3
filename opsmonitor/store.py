"""A small transactional record store with tables of JSON documents."""

from __future__ import annotations

import json
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from os import PathLike
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

Record = dict
Predicate = Union[None, Mapping[str, Any], Callable[[Record], bool]]


class StoreError(Exception):
    """Raised when a read, write or commit against the store fails."""


class NotFoundError(StoreError, LookupError):
    """Raised when a lookup for a single record finds nothing."""


@dataclass
class Page:
    """Pagination request and result: 1-based page index, page size, total hits."""

    index: int = 1
    size: int = 10
    total: int = 0


def matches(record: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
    """Return True when every column in ``where`` equals the record's value."""
    return all(record.get(column) == value for column, value in where.items())


def like(value: Any, needle: str) -> bool:
    """Case-insensitive substring test, as SQL ``LIKE '%needle%'``."""
    if value is None:
        text = ""
    elif isinstance(value, str):
        text = value
    elif isinstance(value, (list, tuple, dict)):
        text = json.dumps(value, ensure_ascii=False)
    else:
        text = str(value)
    return needle.casefold() in text.casefold()


def paginate(items: Iterable[Any], page: Page) -> list:
    """Return the slice of ``items`` that ``page`` selects.

    A negative size means no limit; an offset below zero is ignored.
    """
    items = list(items)
    offset = max((page.index - 1) * page.size, 0)
    if page.size < 0:
        return items[offset:]
    return items[offset:offset + page.size]


def _as_predicate(predicate: Predicate) -> Callable[[Record], bool]:
    if predicate is None:
        return lambda record: True
    if isinstance(predicate, Mapping):
        where = dict(predicate)
        return lambda record: matches(record, where)
    if callable(predicate):
        return predicate
    raise TypeError(f"unsupported predicate: {predicate!r}")


def _encode(record: Mapping[str, Any]) -> str:
    if not isinstance(record, Mapping):
        raise TypeError(f"record must be a mapping, not {type(record).__name__}")
    return json.dumps(dict(record), ensure_ascii=False)


class Store:
    """Named tables of JSON records kept in an SQLite database.

    Every write runs in its own transaction and is rolled back on failure.
    Records come back as fresh dicts in insertion order.
    """

    def __init__(self, path: Union[str, PathLike] = ":memory:") -> None:
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(str(path), check_same_thread=False)
            with self._conn:
                self._conn.execute(
                    "CREATE TABLE IF NOT EXISTS records ("
                    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                    "tbl TEXT NOT NULL, data TEXT NOT NULL)"
                )
                self._conn.execute(
                    "CREATE INDEX IF NOT EXISTS records_tbl ON records (tbl)"
                )
        except sqlite3.Error as exc:
            raise StoreError(f"open failed -> {exc}") from exc

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except (sqlite3.Error, TypeError, ValueError) as exc:
                self._safe_rollback()
                raise StoreError(f"{action} -> {exc}") from exc
            except BaseException:
                self._safe_rollback()
                raise
            try:
                self._conn.commit()
            except sqlite3.Error as exc:
                self._safe_rollback()
                raise StoreError(f"commit failed -> {exc}") from exc

    def _safe_rollback(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error:
            pass

    def _rows(self, table: str) -> list[tuple[int, Record]]:
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "SELECT id, data FROM records WHERE tbl = ? ORDER BY id", (table,)
                )
                rows = cursor.fetchall()
            except sqlite3.Error as exc:
                raise StoreError(f"read failed -> {exc}") from exc
        return [(rowid, json.loads(data)) for rowid, data in rows]

    def create(self, table: str, record: Mapping[str, Any]) -> Record:
        """Insert a record and return a copy of what was stored."""
        with self._transaction("write failed"):
            data = _encode(record)
            self._conn.execute(
                "INSERT INTO records (tbl, data) VALUES (?, ?)", (table, data)
            )
        return json.loads(data)

    def _rewrite(self, table: str, where: Mapping[str, Any], changes: Mapping[str, Any]) -> int:
        with self._transaction("update failed"):
            hits = [(rowid, rec) for rowid, rec in self._rows(table) if matches(rec, where)]
            for rowid, rec in hits:
                rec.update(changes)
                self._conn.execute(
                    "UPDATE records SET data = ? WHERE id = ?", (_encode(rec), rowid)
                )
        return len(hits)

    def update(self, table: str, where: Mapping[str, Any], column: str, value: Any) -> int:
        """Set one column on every matching record; return how many matched."""
        return self._rewrite(table, where, {column: value})

    def updates(self, table: str, where: Mapping[str, Any], values: Mapping[str, Any]) -> int:
        """Set several columns on every matching record, skipping ``None`` values.

        Returns how many records matched.
        """
        changes = {column: value for column, value in values.items() if value is not None}
        return self._rewrite(table, where, changes)

    def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Remove every matching record; return how many were removed."""
        with self._transaction("delete failed"):
            ids = [(rowid,) for rowid, rec in self._rows(table) if matches(rec, where)]
            self._conn.executemany("DELETE FROM records WHERE id = ?", ids)
        return len(ids)

    def find(self, table: str, predicate: Predicate = None) -> list[Record]:
        """Return all records accepted by ``predicate`` (a callable or a where-mapping)."""
        accept = _as_predicate(predicate)
        return [rec for _, rec in self._rows(table) if accept(rec)]

    def first(self, table: str, predicate: Predicate = None) -> Record:
        """Return the first accepted record or raise NotFoundError."""
        accept = _as_predicate(predicate)
        for _, rec in self._rows(table):
            if accept(rec):
                return rec
        raise NotFoundError(f"record not found in {table}")

    def count(self, table: str, predicate: Predicate = None) -> int:
        """Return how many records ``predicate`` accepts."""
        return len(self.find(table, predicate))

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()


__all__ = [
    "NotFoundError",
    "Page",
    "Store",
    "StoreError",
    "like",
    "matches",
    "paginate",
]