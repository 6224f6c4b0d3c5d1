"""Generic table access: the single seam every repository goes through.

``TableQuery`` describes a select against one table (equality, null checks,
inclusive date ranges, academic period, creation time) and
``MySQLTableGateway`` executes it. Driver failures leave the gateway only as
``DataAccessError`` so callers can decide what a failed fetch means.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.period import PeriodScope
from .connection import DatabaseConnection
from .mysql_base import table_cursor

_IDENT_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


def _ident(name: str) -> str:
    if not _IDENT_RE.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f"`{name}`"


class TableQuery:
    """Chainable select description; every filter is AND-ed."""

    def __init__(self, table: str, columns: Sequence[str] = ()):
        self.table = table
        self.columns = tuple(columns)
        self._clauses: List[str] = []
        self._params: List[Any] = []
        self._order: List[str] = []
        self._limit: Optional[int] = None

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._clauses.append(f"{_ident(column)}=%s")
        self._params.append(value)
        return self

    def is_null(self, column: str) -> "TableQuery":
        self._clauses.append(f"{_ident(column)} IS NULL")
        return self

    def not_null(self, column: str) -> "TableQuery":
        self._clauses.append(f"{_ident(column)} IS NOT NULL")
        return self

    def date_between(self, column: str, start: Optional[date], end: Optional[date]) -> "TableQuery":
        """Inclusive on both ends; either bound may be open."""
        if start is not None:
            self._clauses.append(f"{_ident(column)} >= %s")
            self._params.append(start)
        if end is not None:
            self._clauses.append(f"{_ident(column)} <= %s")
            self._params.append(end)
        return self

    def created_since(self, moment: datetime) -> "TableQuery":
        self._clauses.append("`created_at` >= %s")
        self._params.append(moment)
        return self

    def in_period(self, period: Optional[PeriodScope]) -> "TableQuery":
        if period is not None:
            self.eq("academic_year", period.academic_year)
            self.eq("semester", int(period.semester))
        return self

    def order_by(self, column: str, *, desc: bool = False) -> "TableQuery":
        self._order.append(f"{_ident(column)} {'DESC' if desc else 'ASC'}")
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = int(count)
        return self

    def _where(self) -> str:
        return f" WHERE {' AND '.join(self._clauses)}" if self._clauses else ""

    def select_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        cols = ", ".join(_ident(c) for c in self.columns) if self.columns else "*"
        sql = f"SELECT {cols} FROM {_ident(self.table)}{self._where()}"
        if self._order:
            sql += f" ORDER BY {', '.join(self._order)}"
        if self._limit is not None:
            sql += f" LIMIT {self._limit}"
        return sql, tuple(self._params)

    def count_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        return f"SELECT COUNT(*) AS n FROM {_ident(self.table)}{self._where()}", tuple(self._params)


class MySQLTableGateway:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch(self, query: TableQuery) -> List[Dict[str, Any]]:
        sql, params = query.select_sql()
        with table_cursor(self._conn_factory, "read", query.table) as cur:
            cur.execute(sql, params)
            return list(cur.fetchall() or [])

    def fetch_one(self, query: TableQuery) -> Optional[Dict[str, Any]]:
        sql, params = query.limit(1).select_sql()
        with table_cursor(self._conn_factory, "read", query.table) as cur:
            cur.execute(sql, params)
            return cur.fetchone() or None

    def count(self, query: TableQuery) -> int:
        sql, params = query.count_sql()
        with table_cursor(self._conn_factory, "count", query.table) as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
            return int(row["n"]) if row else 0

    def insert_one(self, table: str, row: Mapping[str, Any]) -> int:
        cols = list(row)
        sql = (
            f"INSERT INTO {_ident(table)}({', '.join(_ident(c) for c in cols)}) "
            f"VALUES({', '.join(['%s'] * len(cols))})"
        )
        with table_cursor(self._conn_factory, "insert into", table) as cur:
            cur.execute(sql, tuple(row[c] for c in cols))
            return int(cur.lastrowid)

    def insert_many(self, table: str, rows: Sequence[Mapping[str, Any]]) -> int:
        """Insert all rows in one transaction; returns the number inserted."""
        if not rows:
            return 0
        cols = list(rows[0])
        sql = (
            f"INSERT INTO {_ident(table)}({', '.join(_ident(c) for c in cols)}) "
            f"VALUES({', '.join(['%s'] * len(cols))})"
        )
        with table_cursor(self._conn_factory, "insert into", table) as cur:
            cur.executemany(sql, [tuple(r[c] for c in cols) for r in rows])
            return len(rows)

    def update_by_id(self, table: str, row_id: int, values: Mapping[str, Any]) -> bool:
        if not values:
            return False
        assignments = ", ".join(f"{_ident(c)}=%s" for c in values)
        sql = f"UPDATE {_ident(table)} SET {assignments} WHERE `id`=%s"
        with table_cursor(self._conn_factory, "update", table) as cur:
            cur.execute(sql, (*values.values(), int(row_id)))
            return cur.rowcount > 0

    def delete_by_id(self, table: str, row_id: int) -> bool:
        with table_cursor(self._conn_factory, "delete from", table) as cur:
            cur.execute(f"DELETE FROM {_ident(table)} WHERE `id`=%s", (int(row_id),))
            return cur.rowcount > 0
