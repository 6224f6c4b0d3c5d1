from __future__ import annotations

import logging
from contextlib import contextmanager

import mysql.connector

from ..core.exceptions import DataAccessError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def table_cursor(conn_factory: DatabaseConnection, action: str, table: str):
    """Dictionary cursor for one statement against ``table``.

    Commits on success and rolls back on any error. Driver errors leave as
    ``DataAccessError`` naming the action and table.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.warning("%s on %s failed: %s", action, table, e)
        raise DataAccessError(f"Failed to {action} {table}: {e}", cause=e) from e

    try:
        cur = conn.cursor(dictionary=True)
        try:
            yield cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.warning("%s on %s failed: %s", action, table, e)
        raise DataAccessError(f"Failed to {action} {table}: {e}", cause=e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
