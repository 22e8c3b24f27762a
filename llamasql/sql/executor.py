from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from typing import Any, Dict, List, Optional, Union

from ..schema import DDL_STATEMENTS, TABLE_NAMES
from .safety import safe_select_only
from .seed import CLEAR_ORDER, INSERTS

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]
RawResult = Union[Rows, str]


def _default_db_path() -> str:
    # Allow override for a file-backed DB; in-memory otherwise
    env = os.getenv("LLAMASQL_DB_PATH")
    if env:
        return env
    return ":memory:"


def _read_only_from_env() -> bool:
    return os.getenv("LLAMASQL_READ_ONLY", "").strip().lower() in ("1", "true", "yes", "on")


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, str)):
        return value
    return str(value)


def first_statement(sql: str) -> str:
    """
    Cut ``sql`` after its first complete statement.

    Anything after the first terminating ``;`` (a second statement, or prose
    the model appended) is ignored. Semicolons inside string literals and
    comments do not terminate.
    """
    for i, ch in enumerate(sql):
        if ch == ";" and sqlite3.complete_statement(sql[: i + 1]):
            return sql[: i + 1]
    return sql


def _error_json(exc: BaseException) -> str:
    return json.dumps({
        "message": str(exc),
        "code": getattr(exc, "sqlite_errorname", None) or "SQLITE_ERROR",
        "errno": getattr(exc, "sqlite_errorcode", None) or 1,
    })


class SQLiteStore:
    """
    Relational store holding the demonstration tables.

    ``execute`` never raises for query errors: a failed statement comes back
    as a JSON-encoded error string with a ``message`` field. Callers inspect
    the shape of the result instead of catching exceptions.
    """

    def __init__(self, db_path: Optional[str] = None, read_only: Optional[bool] = None):
        self.db_path = db_path or _default_db_path()
        self.read_only = _read_only_from_env() if read_only is None else read_only
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.execute("PRAGMA foreign_keys = ON")

    def seed(self) -> None:
        """(Re)create the tables and repopulate the fixed demo rows."""
        with self._lock:
            cur = self._conn.cursor()
            try:
                for ddl in DDL_STATEMENTS:
                    cur.execute(ddl)
                for table in CLEAR_ORDER:
                    cur.execute(f"DELETE FROM {table}")
                for statement, rows in INSERTS:
                    cur.executemany(statement, rows)
                self._conn.commit()
            except sqlite3.Error:
                logger.exception("Seeding %s failed", self.db_path)
                self._conn.rollback()
                raise
        logger.info("Seeded store %s: %s", self.db_path, self.table_counts())

    def execute(self, sql: str) -> RawResult:
        """Run ``sql`` and return a list of row dicts or a JSON error string."""
        logger.info("Executing SQL: %s", sql)
        if self.read_only:
            try:
                safe_select_only(sql)
            except ValueError as e:
                logger.warning("Rejected SQL: %s", e)
                return json.dumps({"message": str(e), "code": "READ_ONLY", "errno": 0})
        try:
            with self._lock:
                cur = self._conn.execute(first_statement(sql))
                columns = [c[0] for c in cur.description] if cur.description else []
                raw_rows = cur.fetchall() if columns else []
                self._conn.commit()
        except (sqlite3.Error, sqlite3.Warning) as e:
            logger.warning("SQL execution error: %s", e)
            with self._lock:
                if self._conn.in_transaction:
                    self._conn.rollback()
            return _error_json(e)

        rows = [{col: _json_safe(v) for col, v in zip(columns, row)} for row in raw_rows]
        logger.info("Query returned %d rows.", len(rows))
        return rows

    def table_counts(self) -> Dict[str, int]:
        counts = {}
        with self._lock:
            for table in TABLE_NAMES:
                cur = self._conn.execute(f"SELECT COUNT(*) FROM {table}")
                counts[table] = cur.fetchone()[0]
        return counts

    def close(self) -> None:
        self._conn.close()


_store: Optional[SQLiteStore] = None
_store_lock = threading.Lock()


def get_store() -> SQLiteStore:
    """Process-wide store, created and seeded once on first use."""
    global _store
    with _store_lock:
        if _store is None:
            store = SQLiteStore()
            store.seed()
            _store = store
        return _store


def execute_sql_query(sql: str) -> RawResult:
    return get_store().execute(sql)
