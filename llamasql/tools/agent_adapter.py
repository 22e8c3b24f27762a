"""
Agent adapter for MCP.

Bridges MCP ↔ non-interactive agent core.
This is the entry point for external MCP clients.
"""

from typing import Any, Dict, List, Optional

from llamasql.payload import error_payload
from llamasql.schema import describe_schema
from llamasql.sql.executor import SQLiteStore
from llamasql.tools.executor import SQL_ARG_DESCRIPTION, TOOL_DESCRIPTION, TOOL_NAME, GetFromDBTool

MCP_TOOLS = [
    {
        "name": TOOL_NAME,
        "description": TOOL_DESCRIPTION,
        "inputSchema": {
            "type": "object",
            "properties": {
                "sql": {"type": "string", "description": SQL_ARG_DESCRIPTION},
            },
            "required": ["sql"],
        },
    },
    {
        "name": "ask_database",
        "description": (
            "Answer a natural language question about the hospital database "
            "(patients, doctors, admissions, provinces). Returns the executed SQL and rows."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "question": {"type": "string", "description": "Question in plain English"},
            },
            "required": ["question"],
        },
    },
    {
        "name": "get_schema",
        "description": "List the tables and columns of the hospital database",
        "inputSchema": {"type": "object", "properties": {}},
    },
]


class MCPAgentAdapter:
    """
    Adapter that allows MCP to call LlamaSQL safely.

    This adapter:
    1. Wraps GetFromDBTool for raw SQL execution
    2. Delegates to agent_core for natural language questions
    """

    def __init__(self, store: Optional[SQLiteStore] = None):
        self.executor = GetFromDBTool(store)
        self._orchestrator = None

    def list_tools(self) -> List[Dict[str, Any]]:
        return MCP_TOOLS

    def analyze(self, question: str) -> Dict[str, Any]:
        """
        Run natural language analysis using the agent core.
        Questions go to the same store as raw SQL.
        Imports lazily to avoid circular imports.
        """
        if self._orchestrator is None:
            from llamasql.agent_core import Orchestrator
            self._orchestrator = Orchestrator(self.executor.store)
        return self._orchestrator.analyze(question)

    def execute_sql(self, sql: str) -> Dict[str, Any]:
        if not sql:
            return error_payload("Missing SQL")
        return self.executor.execute_sql(sql)

    def handle_tool_call(self, tool_name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Dispatch one tool call; failures come back as payloads, never raised."""
        arguments = arguments or {}
        try:
            if tool_name == TOOL_NAME:
                return self.execute_sql(arguments.get("sql", ""))
            if tool_name == "ask_database":
                question = (arguments.get("question") or "").strip()
                if not question:
                    return error_payload("Missing question")
                return self.analyze(question)
            if tool_name == "get_schema":
                return {"ok": True, "tables": describe_schema()}
            return error_payload(f"Unknown tool: {tool_name}")
        except Exception as e:
            return error_payload(str(e) or "Unknown error")
