from __future__ import annotations

from contextlib import contextmanager, suppress
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import StorageError, ValidationError
from .connection import DatabaseConnection

# Raised for a row the server refuses (too long, bad value, key clash).
# The server itself is fine, so these must not trigger a failover.
REJECTED_ROW_ERRORS = (mysql_errors.DataError, mysql_errors.IntegrityError)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(conn, cursor)`` on a fresh connection; commit on success.

    Rejected rows surface as ``ValidationError``; every other driver error
    surfaces as ``StorageError`` so callers can fail over without depending
    on mysql-connector.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(f"Cannot connect to {conn_factory.config.describe()}: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except REJECTED_ROW_ERRORS as e:
        _rollback_quietly(conn)
        raise ValidationError(f"Attendance record rejected by the database: {e.msg or e}") from e
    except mysql.connector.Error as e:
        _rollback_quietly(conn)
        raise StorageError(str(e)) from e
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        with suppress(mysql.connector.Error):
            conn.close()


def _rollback_quietly(conn) -> None:
    # A dropped connection fails the rollback too; the original error wins.
    with suppress(mysql.connector.Error):
        conn.rollback()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
