from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from .payload import loads

MAX_TABLE_ROWS = 50

INTRO = """
🦙 LlamaSQL - ask the hospital database in plain English
What I can do:
- Turn your question into SQLite over `patients`, `doctors`, `admissions`, `province_names`
- Run it and show the rows (or the single value, for counts and totals)
- Show the SQL that was executed, and the error if it failed
Examples:
- "how many patients are there?"
- "patients per province"
- "which doctor handled the most admissions?"
- "list admissions that have not been discharged yet"
Commands:
- help  → examples + what to ask
- reset → clear the conversation
- exit  → quit
""".strip()

HELP_TEXT = INTRO


def _cell(value: Any) -> Any:
    return "" if value is None else value


def format_table(rows: List[Dict[str, Any]], max_rows: int = MAX_TABLE_ROWS) -> str:
    """Markdown table; columns come from the first row."""
    columns = list(rows[0].keys())
    shown = [{c: _cell(r.get(c)) for c in columns} for r in rows[:max_rows]]
    df = pd.DataFrame(shown, columns=columns)
    return df.to_markdown(index=False)


def format_error(payload: Dict[str, Any]) -> str:
    lines = ["## ❌ Query failed", ""]
    if payload.get("sql"):
        lines.extend(["```sql", str(payload["sql"]), "```", ""])
    lines.append(f"**Error:** {payload.get('error', 'Unknown error')}")
    return "\n".join(lines)


def format_success(payload: Dict[str, Any]) -> str:
    lines = ["**Executed SQL**", "", "```sql", str(payload.get("sql", "")), "```", ""]

    if "scalar" in payload:
        scalar = payload["scalar"]
        lines.extend([
            "## " + ("null" if scalar is None else str(scalar)),
            "*Single-value result*",
            "",
        ])

    rows = payload.get("rows")
    if isinstance(rows, list) and rows:
        count = payload.get("rowCount", len(rows))
        lines.append(format_table(rows))
        lines.append("")
        if len(rows) > MAX_TABLE_ROWS:
            lines.append(f"*📊 Showing first {MAX_TABLE_ROWS} of {count} rows*")
        else:
            lines.append(f"*📊 {count} {'row' if count == 1 else 'rows'}*")
    elif isinstance(rows, list):
        lines.append("No rows returned.")

    return "\n".join(lines).rstrip()


def render_payload(text: str) -> str:
    """Render a payload string for the chat; non-JSON text is shown as-is."""
    payload = loads(text)
    if payload is None:
        return text
    if not payload.get("ok"):
        return format_error(payload)
    return format_success(payload)
