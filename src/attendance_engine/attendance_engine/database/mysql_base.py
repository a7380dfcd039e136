"""Helpers shared by the MySQL adapters."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..common.datetime_utils import coerce_date, parse_hhmm
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Yield (connection, cursor) wrapped in one transaction.

    Commits when the block completes and rolls back if it raises. Each call
    opens its own connection, so timer threads and request threads never
    share one.
    """

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def to_date(value: Any) -> date:
    """DATE columns normally arrive as ``date``; tolerate strings from older drivers."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return coerce_date(str(value))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns arrive as ``time``, ``timedelta`` or an 'HH:MM:SS' string depending on the driver."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()
    if isinstance(value, str):
        return parse_hhmm(value)
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")
