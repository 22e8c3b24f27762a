from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from .agent_core import MessageFormatError, Orchestrator
from .explain import INTRO, render_payload
from .llm import model_name
from .payload import dumps, error_payload
from .schema import SYSTEM_PROMPT
from .sql.executor import get_store

EXIT_COMMANDS = ("exit", "quit", "bye", "q")


def configure_logging() -> None:
    level = os.getenv("LLAMASQL_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def new_conversation() -> List[Dict[str, Any]]:
    return [{"role": "system", "content": SYSTEM_PROMPT}]


def take_turn(orchestrator: Orchestrator, history: List[Dict[str, Any]], question: str) -> str:
    """
    Append the question and the resulting payload to ``history``.

    Faults in the turn itself are turned into a Failure payload here.
    """
    history.append({"role": "human", "content": question})
    try:
        text = orchestrator.respond(history)
    except MessageFormatError as e:
        text = dumps(error_payload(str(e)))
    except Exception as e:
        text = dumps(error_payload(str(e) or "Unexpected error"))
    history.append({"role": "ai", "content": text})
    return text


def run_agent():
    configure_logging()
    orchestrator = Orchestrator(store=get_store())
    history = new_conversation()

    print("\n" + INTRO + "\n")

    if orchestrator.client is None:
        print("ℹ️  No model configured (set OPENAI_API_KEY or LLAMASQL_BASE_URL).")
        print("   Deterministic mode: type SQL directly, e.g. SELECT COUNT(*) FROM patients;\n")
    else:
        print(f"✅ Model routing is enabled ({model_name()}).\n")

    while True:
        try:
            q = input("Ask a question: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n👋 Goodbye!\n")
            break

        if not q:
            continue

        if q.lower() in EXIT_COMMANDS:
            print("\n👋 Goodbye!\n")
            break

        if q.lower() == "reset":
            history = new_conversation()
            print("Conversation reset.\n")
            continue

        if q.lower() == "help":
            print("\n" + INTRO + "\n")
            continue

        print("⏳ Thinking...")
        text = take_turn(orchestrator, history, q)
        print()
        print(render_payload(text))
        print()


if __name__ == "__main__":
    run_agent()
