"""Schema bootstrap for the MySQL adapters (used by create_app and scripts/init_db.py)."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_DATABASE_LINES = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b.*?;\s*$")
_SQL_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|;|[^'";]+|['"]""", re.S)


def strip_database_statements(sql: str) -> str:
    """Drop CREATE DATABASE / USE lines; the configured database name wins."""
    return _DATABASE_LINES.sub("", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split on ';' outside quoted literals. Lines starting with '--' are dropped."""

    body = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    current: List[str] = []
    for token in _SQL_TOKEN.findall(body):
        if token != ";":
            current.append(token)
            continue
        stmt = "".join(current).strip()
        current = []
        if stmt:
            yield stmt

    tail = "".join(current).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement. Returns the statement count."""

    ensure_database_exists(db_config)
    statements = list(iter_sql_statements(strip_database_statements(Path(schema_path).read_text(encoding="utf-8"))))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d schema statement(s) from %s", len(statements), schema_path)
    return len(statements)


def list_tables(db_config: dict) -> List[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
