"""
Pytest configuration and shared fixtures.
"""
import json
from types import SimpleNamespace

import pytest

from llamasql.schema import SYSTEM_PROMPT
from llamasql.sql.executor import SQLiteStore


@pytest.fixture
def store():
    """A freshly seeded in-memory store."""
    s = SQLiteStore(":memory:", read_only=False)
    s.seed()
    yield s
    s.close()


@pytest.fixture
def empty_store():
    """An in-memory store with no tables."""
    s = SQLiteStore(":memory:", read_only=False)
    yield s
    s.close()


@pytest.fixture(autouse=True)
def no_model_env(monkeypatch):
    """Keep tests offline regardless of the developer's environment."""
    for var in ("OPENAI_API_KEY", "LLAMASQL_BASE_URL", "LLAMASQL_READ_ONLY", "LLAMASQL_DB_PATH"):
        monkeypatch.delenv(var, raising=False)


def tool_call(sql=None, call_id="call_1", name="get_from_db", arguments=None):
    """Build a tool call the way the OpenAI SDK exposes it."""
    if arguments is None:
        arguments = json.dumps({} if sql is None else {"sql": sql})
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def reply(content=None, tool_calls=None):
    """Build a chat completion response with a single choice."""
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeCompletions:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(dict(kwargs, messages=list(kwargs.get("messages", []))))
        if not self.responses:
            raise AssertionError("FakeClient ran out of scripted responses")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class FakeClient:
    """Scripted stand-in for ``openai.OpenAI``."""

    def __init__(self, *responses):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def conversation():
    """Factory for a conversation ending with a user question."""
    def _make(question="How many patients are there?"):
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "human", "content": question},
        ]
    return _make


# Markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "mcp: marks tests related to MCP functionality")
