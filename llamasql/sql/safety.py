from __future__ import annotations

import re

MUTATING_KEYWORDS = [
    "insert", "update", "delete", "drop", "alter", "create",
    "truncate", "attach", "detach", "pragma", "vacuum", "reindex",
]


def safe_select_only(sql: str) -> str:
    """Ensure SQL is SELECT/WITH only (no mutations)."""
    low = (sql or "").lower().strip()
    if not (low.startswith("select") or low.startswith("with")):
        raise ValueError("Only SELECT queries are allowed.")
    for kw in MUTATING_KEYWORDS:
        if re.search(rf"\b{kw}\b", low):
            raise ValueError(f"Unsafe SQL detected: {kw.upper()} is not allowed.")
    return sql
