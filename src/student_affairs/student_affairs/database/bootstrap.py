from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# (student name, class name, dormitory name or None)
DEMO_STUDENTS = (
    ("Ahmad Fauzi", "Class 7A", "Abu Bakar"),
    ("Fatimah Azzahra", "Class 7A", None),
    ("Yusuf Hasan", "Class 7B", "Umar"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Split on ';' outside quotes, skipping '--' comment lines.
    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    buf: list[str] = []
    quote = ""
    for ch in "\n".join(lines):
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = ""
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(**config.connect_kwargs(with_database=with_database), use_pure=True)


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_sql_file(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        count = 0
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_sql_file(db_config, schema_path)
    logger.info("Applied %s schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _apply_sql_file(db_config, seed_path)
    logger.info("Applied %s seed statements from %s", count, seed_path)


def ensure_demo_students(db_config: dict) -> None:
    """Insert demo students wired to the seeded classes/dormitories (idempotent)."""
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def get_id(table: str, name: str | None) -> int | None:
            if name is None:
                return None
            if table not in {"classes", "dormitories"}:
                raise RuntimeError(f"Unsupported lookup table: {table}")
            cur.execute(f"SELECT id FROM {table} WHERE name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing {table} row for name={name}")
            return int(row["id"])

        for name, class_name, dorm_name in DEMO_STUDENTS:
            cur.execute("SELECT id FROM students WHERE name=%s", (name,))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO students (name, class_id, dormitory_id) VALUES (%s, %s, %s)",
                (name, get_id("classes", class_name), get_id("dormitories", dorm_name)),
            )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
