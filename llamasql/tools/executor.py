"""
The ``get_from_db`` tool.

This is the only path from the agent to the store: the agent's tool call,
the orchestrator's fallback and the MCP adapter all go through
``GetFromDBTool.execute_sql``.
"""

import logging
from typing import Any, Dict, Optional

from llamasql.payload import Payload, dumps, error_payload, to_payload
from llamasql.schema import SCHEMA_TEXT
from llamasql.sql.executor import SQLiteStore, get_store

logger = logging.getLogger(__name__)

TOOL_NAME = "get_from_db"

TOOL_DESCRIPTION = f"""Run a SQL query against the SQLite database and return ONLY JSON.

You MUST:
- Produce a complete, syntactically valid SQLite query.
- Prefer SELECT queries.
- Never explain or summarize.
- Always return the tool's JSON result directly.

Schema (quotes are important for SQLite compatibility):
{SCHEMA_TEXT}
"""

SQL_ARG_DESCRIPTION = (
    'A valid SQLite query. Always double-quote identifiers '
    '(e.g., SELECT "first_name" FROM "patients").'
)


class GetFromDBTool:
    """Executes agent-provided SQL and returns the normalized payload."""

    name = TOOL_NAME
    description = TOOL_DESCRIPTION

    def __init__(self, store: Optional[SQLiteStore] = None):
        self.store = store or get_store()

    def openai_spec(self) -> Dict[str, Any]:
        """Function-tool definition for the chat completions API."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        "sql": {"type": "string", "description": SQL_ARG_DESCRIPTION},
                    },
                    "required": ["sql"],
                },
            },
        }

    def execute_sql(self, sql: str) -> Payload:
        raw = self.store.execute(sql)
        return to_payload(sql, raw)

    def run(self, arguments: Optional[Dict[str, Any]]) -> str:
        """Tool-call handler: returns the payload as a JSON string."""
        sql = arguments.get("sql") if isinstance(arguments, dict) else None
        if not sql or not isinstance(sql, str):
            return dumps(error_payload("Missing SQL"))
        logger.info("get_from_db called with sql=%s", sql)
        return dumps(self.execute_sql(sql))
