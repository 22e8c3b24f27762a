"""
Non-interactive core logic for LlamaSQL.

This module:
- Accepts a conversation (system / human / ai messages)
- Lets the agent call the ``get_from_db`` tool
- Returns exactly one JSON payload string per turn
- Contains NO input() or print()
"""

import logging
import re
from typing import Any, Dict, List, Optional

import openai

from .llm import configure_model, run_tool_loop
from .payload import Payload, dumps, error_payload, loads
from .schema import SYSTEM_PROMPT
from .sql.executor import SQLiteStore, get_store
from .tools.executor import GetFromDBTool

logger = logging.getLogger(__name__)

NO_SQL_ERROR = "No tool output or executable SQL was produced. Please rephrase your request."
TIMEOUT_ERROR = "Language model request timed out."

ROLE_MAP = {
    "system": "system",
    "human": "user",
    "user": "user",
    "ai": "assistant",
    "assistant": "assistant",
}

FENCE_RE = re.compile(r"```sql\s*([\s\S]*?)```", re.I)
STATEMENT_RE = re.compile(r"^[ \t]*(?:SELECT|WITH)\b[\s\S]*", re.I | re.M)

_AUTO = object()


class MessageFormatError(ValueError):
    """A stored message could not be turned into a chat message."""


def deserialize_messages(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Map stored messages to chat-completions messages.

    Accepts ``{"role", "content"}`` dicts and LangChain-style stored
    messages ``{"type", "data": {"content"}}``.
    """
    if not isinstance(history, list):
        raise MessageFormatError("Conversation history must be a list of messages.")
    out = []
    for i, msg in enumerate(history):
        if not isinstance(msg, dict):
            raise MessageFormatError(f"Message {i} is not a mapping.")
        role = msg.get("role", msg.get("type"))
        content = msg.get("content")
        if content is None and isinstance(msg.get("data"), dict):
            content = msg["data"].get("content")
        if role not in ROLE_MAP:
            raise MessageFormatError(f"Message {i} has unsupported role: {role!r}")
        if not isinstance(content, str):
            raise MessageFormatError(f"Message {i} has no text content.")
        out.append({"role": ROLE_MAP[role], "content": content})
    return out


def extract_sql(text: Optional[str]) -> Optional[str]:
    """Pull SQL out of free text: a ```sql fence first, then a SELECT/WITH line."""
    if not text:
        return None
    fence = FENCE_RE.search(text)
    if fence:
        return fence.group(1).strip() or None
    stmt = STATEMENT_RE.search(text)
    if stmt:
        return stmt.group(0).strip() or None
    return None


def _last_tool_content(trace: List[Dict[str, Any]]) -> Optional[str]:
    for msg in reversed(trace):
        if msg.get("role") == "tool" and msg.get("content"):
            content = msg["content"]
            return content if isinstance(content, str) else dumps(content)
    return None


class Orchestrator:
    """
    Runs one conversational turn and produces one payload string.

    Extraction order: the most recent tool result, then SQL found in the
    final message text, then a fixed failure.
    """

    def __init__(self, store: Optional[SQLiteStore] = None, client: Any = _AUTO):
        self.store = store or get_store()
        self.client = configure_model() if client is _AUTO else client
        self.tool = GetFromDBTool(self.store)

    def run_agent(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if self.client is None:
            # Deterministic mode: only SQL typed by the user can run.
            return list(messages)
        return run_tool_loop(
            self.client,
            messages,
            tools=[self.tool.openai_spec()],
            handlers={self.tool.name: self.tool.run},
        )

    def _execute_fallback(self, sql: str) -> Payload:
        try:
            return self.tool.execute_sql(sql)
        except Exception as e:
            logger.exception("Fallback execution failed")
            return error_payload(str(e) or "Failed to execute SQL", sql)

    def respond(self, history: List[Dict[str, Any]]) -> str:
        messages = deserialize_messages(history)

        try:
            trace = self.run_agent(messages)
        except openai.APITimeoutError:
            logger.warning("Language model request timed out")
            return dumps(error_payload(TIMEOUT_ERROR))
        except openai.OpenAIError as e:
            logger.warning("Language model request failed: %s", e)
            return dumps(error_payload(f"Language model request failed: {e}"))
        except Exception as e:
            logger.exception("Agent turn failed")
            return dumps(error_payload(str(e) or "Unknown error"))

        tool_content = _last_tool_content(trace)
        if tool_content:
            return tool_content

        final = trace[-1] if trace else {}
        final_text = final.get("content") if isinstance(final.get("content"), str) else None
        sql = extract_sql(final_text)
        if sql:
            logger.info("No tool result; executing SQL from final message")
            return dumps(self._execute_fallback(sql))

        return dumps(error_payload(NO_SQL_ERROR))

    def analyze(self, question: str) -> Payload:
        """Answer a single question with a fresh conversation."""
        history = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "human", "content": question},
        ]
        return loads(self.respond(history)) or error_payload("Malformed payload")


_orchestrator: Optional[Orchestrator] = None


def get_orchestrator() -> Orchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = Orchestrator()
    return _orchestrator


def respond(history: List[Dict[str, Any]]) -> str:
    """Turn entry point over the process-wide store and client."""
    return get_orchestrator().respond(history)


def analyze_query(question: str) -> Payload:
    """
    Pure entrypoint for MCP / API usage: one question, one payload dict.
    """
    return get_orchestrator().analyze(question)
