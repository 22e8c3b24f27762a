"""
Tests for the interactive agent.
Covers turn bookkeeping and the command loop.
"""
import json

import pytest

from conftest import reply, tool_call
from llamasql.agent import new_conversation, run_agent, take_turn
from llamasql.agent_core import Orchestrator
from llamasql.schema import SYSTEM_PROMPT


class TestConversation:
    """Conversation history handling."""

    def test_new_conversation(self):
        assert new_conversation() == [{"role": "system", "content": SYSTEM_PROMPT}]

    def test_take_turn_appends_question_and_payload(self, store, fake_client):
        orch = Orchestrator(store, fake_client(reply(None, [tool_call("SELECT COUNT(*) FROM patients;")]), reply("ok")))
        history = new_conversation()
        text = take_turn(orch, history, "How many patients are there?")
        assert json.loads(text)["scalar"] == 15
        assert history[1] == {"role": "human", "content": "How many patients are there?"}
        assert history[2] == {"role": "ai", "content": text}

    def test_payloads_feed_the_next_turn(self, store, fake_client):
        client = fake_client(reply("SELECT 1"), reply("SELECT 2"))
        orch = Orchestrator(store, client)
        history = new_conversation()
        take_turn(orch, history, "first")
        take_turn(orch, history, "second")
        sent = client.completions.calls[1]["messages"]
        assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]
        assert json.loads(sent[2]["content"])["sql"] == "SELECT 1"

    def test_bad_history_becomes_failure(self, store):
        orch = Orchestrator(store, None)
        history = [{"role": "robot", "content": "beep"}]
        payload = json.loads(take_turn(orch, history, "hi"))
        assert payload["ok"] is False
        assert "unsupported role" in payload["error"]

    def test_unexpected_fault_becomes_failure(self, store, monkeypatch):
        orch = Orchestrator(store, None)

        def boom(history):
            raise RuntimeError()

        monkeypatch.setattr(orch, "respond", boom)
        payload = json.loads(take_turn(orch, new_conversation(), "hi"))
        assert payload == {"ok": False, "error": "Unexpected error"}


class TestRunAgent:
    """The interactive command loop."""

    @pytest.fixture
    def feed(self, monkeypatch, store):
        monkeypatch.setattr("llamasql.agent.get_store", lambda: store)

        def _feed(*answers):
            it = iter(answers)

            def fake_input(prompt=""):
                try:
                    return next(it)
                except StopIteration:
                    raise EOFError
            monkeypatch.setattr("builtins.input", fake_input)
        return _feed

    def test_deterministic_session(self, feed, capsys):
        feed("SELECT COUNT(*) FROM patients;", "exit")
        run_agent()
        out = capsys.readouterr().out
        assert "Deterministic mode" in out
        assert "## 15" in out
        assert "Goodbye" in out

    def test_help_and_reset(self, feed, capsys):
        feed("help", "reset", "", "quit")
        run_agent()
        out = capsys.readouterr().out
        assert out.count("LlamaSQL") >= 2
        assert "Conversation reset." in out

    def test_eof_exits(self, feed, capsys):
        feed()
        run_agent()
        assert "Goodbye" in capsys.readouterr().out

    def test_failure_rendered(self, feed, capsys):
        feed("what is the meaning of life?", "bye")
        run_agent()
        out = capsys.readouterr().out
        assert "Query failed" in out
        assert "rephrase" in out
