"""
Payload contract shared by the tool, the orchestrator and the renderers.

Success: {"ok": true, "sql", "rows", "rowCount", "scalar"?}
Failure: {"ok": false, "sql"?, "error"}

``scalar`` is present only for a single-row, single-column result whose
value is a string, a number or null.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

Payload = Dict[str, Any]


def error_payload(error: str, sql: Optional[str] = None) -> Payload:
    payload: Payload = {"ok": False}
    if sql is not None:
        payload["sql"] = sql
    payload["error"] = error
    return payload


def _is_scalar(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _error_text(raw: str) -> str:
    try:
        err = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(err, dict) and isinstance(err.get("message"), str):
        return err["message"]
    return raw


def to_payload(sql: str, raw: Any) -> Payload:
    """
    Normalize a raw store result into a Success or Failure payload.

    A string is an error representation (possibly JSON with a ``message``);
    anything else is treated as a list of row mappings, and non-lists are
    coerced to an empty result. Never raises.
    """
    try:
        if isinstance(raw, str):
            return error_payload(_error_text(raw), sql)

        rows = raw if isinstance(raw, list) else []
        row_count = len(rows)

        payload: Payload = {"ok": True, "sql": sql, "rows": rows, "rowCount": row_count}
        if row_count == 1 and isinstance(rows[0], dict) and len(rows[0]) == 1:
            value = next(iter(rows[0].values()))
            if _is_scalar(value):
                payload["scalar"] = value
        return payload
    except Exception as e:
        return error_payload(str(e) or "Unknown error", sql)


def dumps(payload: Payload) -> str:
    return json.dumps(payload, default=str)


def loads(text: str) -> Optional[Payload]:
    """Parse a payload string; ``None`` when the text is not a JSON object."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None
