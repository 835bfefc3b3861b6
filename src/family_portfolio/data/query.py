"""Row mapping, a small SELECT builder and the CRUD base shared by the ledger repositories.

Values are stored as SQLite-friendly scalars: Decimal as TEXT (no float
rounding), dates and datetimes as ISO strings, enums by value, bools as 0/1.
"""

import dataclasses
import logging
import sqlite3
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

from .database import Database, get_db

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_date(v) -> date:
    if isinstance(v, date):
        return v
    return date.fromisoformat(str(v)[:10])


def _parse_datetime(v) -> datetime:
    if isinstance(v, datetime):
        return v
    return datetime.fromisoformat(str(v))


_SCALARS = {
    Decimal: lambda v: Decimal(str(v)),
    datetime: _parse_datetime,
    date: _parse_date,
    bool: bool,
    int: int,
    str: str,
}


def _unwrap_optional(hint):
    if typing.get_origin(hint) is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _converter_for(hint):
    hint = _unwrap_optional(hint)
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint
    return _SCALARS.get(hint)


def to_sql_value(val):
    """Python value -> value sqlite3 can bind."""
    if val is None:
        return None
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, Decimal):
        return str(val)
    if isinstance(val, (date, datetime)):
        return val.isoformat()
    return val


class RowMapper(Generic[T]):
    """Builds ledger dataclasses from sqlite3.Row objects using their type hints.

    A column that is NULL or not selected falls back to the field default;
    a required field with neither makes construction fail with TypeError.
    """

    def __init__(self, model_class: type[T]):
        self.model_class = model_class
        fields = dataclasses.fields(model_class)  # type: ignore[arg-type]
        hints = typing.get_type_hints(model_class)
        self.field_names = [f.name for f in fields]
        self._defaults = {f.name: f.default for f in fields if f.default is not dataclasses.MISSING}
        self._converters = {name: _converter_for(hints.get(name)) for name in self.field_names}

    def map(self, row: sqlite3.Row) -> T:
        present = set(row.keys())
        kwargs: dict = {}
        for name in self.field_names:
            raw = row[name] if name in present else None
            if raw is None:
                if name in self._defaults:
                    kwargs[name] = self._defaults[name]
                elif name in present:
                    kwargs[name] = None
                continue
            convert = self._converters[name]
            kwargs[name] = convert(raw) if convert else raw
        return self.model_class(**kwargs)

    def map_all(self, rows) -> list[T]:
        return [self.map(r) for r in rows]

    def to_row(self, obj: T, exclude: frozenset = frozenset()) -> dict:
        return {
            name: to_sql_value(getattr(obj, name))
            for name in self.field_names
            if name not in exclude
        }


class QueryBuilder:
    """Fluent single-table SELECT with AND-ed conditions."""

    def __init__(self, table: str):
        self._table = table
        self._conditions: list[tuple[str, tuple]] = []
        self._order: Optional[str] = None
        self._limit: Optional[int] = None

    def where(self, condition: str, *params) -> "QueryBuilder":
        self._conditions.append((condition, params))
        return self

    def order_by(self, clause: str) -> "QueryBuilder":
        self._order = clause
        return self

    def limit(self, n: int) -> "QueryBuilder":
        self._limit = n
        return self

    def build(self) -> tuple[str, list]:
        parts = [f"SELECT * FROM {self._table}"]
        if self._conditions:
            parts.append("WHERE " + " AND ".join(c for c, _ in self._conditions))
        if self._order:
            parts.append(f"ORDER BY {self._order}")
        if self._limit is not None:
            parts.append(f"LIMIT {int(self._limit)}")
        params = [p for _, ps in self._conditions for p in ps]
        return " ".join(parts), params

    def fetch_one(self, conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
        return conn.execute(*self.build()).fetchone()

    def fetch_all(self, conn: sqlite3.Connection) -> list[sqlite3.Row]:
        return conn.execute(*self.build()).fetchall()


class BaseRepository(Generic[T]):
    """get_by_id / list_all / delete / insert / save over one ledger table."""

    _table: str
    _mapper: RowMapper  # type: ignore[type-arg]
    _default_order: str = "id"
    _generated = frozenset({"id", "created_at", "updated_at"})

    def _db(self) -> Database:
        return get_db()

    def _query(self) -> QueryBuilder:
        return QueryBuilder(self._table)

    def _write(self, sql: str, params) -> sqlite3.Cursor:
        """Execute one write; commit unless inside ``Database.transaction()``."""
        db = self._db()
        cursor = db.conn.execute(sql, params)
        if not db._in_transaction:
            db.conn.commit()
        return cursor

    def get_by_id(self, id: int) -> Optional[T]:
        row = self._query().where("id = ?", id).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def list_all(self) -> list[T]:
        rows = self._query().order_by(self._default_order).fetch_all(self._db().conn)
        return self._mapper.map_all(rows)

    def delete(self, id: int) -> bool:
        removed = self._write(f"DELETE FROM {self._table} WHERE id = ?", (id,)).rowcount > 0
        logger.debug("Delete %s id=%s: %s", self._table, id, "done" if removed else "no such row")
        return removed

    def _insert(self, obj: T) -> T:
        values = self._mapper.to_row(obj, exclude=self._generated)
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        cursor = self._write(
            f"INSERT INTO {self._table} ({columns}) VALUES ({placeholders})", list(values.values()),
        )
        logger.debug("Inserted %s id=%s", self._table, cursor.lastrowid)
        return self.get_by_id(cursor.lastrowid)

    def save(self, obj: T) -> T:
        """UPDATE every writable column of ``obj`` by its id; bumps updated_at where present."""
        values = self._mapper.to_row(obj, exclude=self._generated)
        assignments = [f"{col} = ?" for col in values]
        if "updated_at" in self._mapper.field_names:
            assignments.append("updated_at = CURRENT_TIMESTAMP")
        self._write(
            f"UPDATE {self._table} SET {', '.join(assignments)} WHERE id = ?",
            [*values.values(), obj.id],
        )
        return self.get_by_id(obj.id)
