from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.2"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_STEPS = 10

ToolHandler = Callable[[Dict[str, Any]], str]


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def model_name() -> str:
    return os.getenv("LLAMASQL_MODEL", DEFAULT_MODEL)


def request_timeout() -> float:
    return _env_float("LLAMASQL_TIMEOUT", DEFAULT_TIMEOUT)


def max_steps() -> int:
    return max(1, _env_int("LLAMASQL_MAX_STEPS", DEFAULT_MAX_STEPS))


def configure_model() -> Optional[Any]:
    """
    Build an OpenAI-compatible client, or ``None`` for deterministic mode.

    ``LLAMASQL_BASE_URL`` points the client at any compatible server
    (Ollama: http://localhost:11434/v1), in which case no real key is needed.
    """
    api_key = os.getenv("OPENAI_API_KEY")
    base_url = os.getenv("LLAMASQL_BASE_URL")
    if not api_key and not base_url:
        return None
    from openai import OpenAI

    return OpenAI(
        api_key=api_key or "ollama",
        base_url=base_url or None,
        timeout=request_timeout(),
        max_retries=0,
    )


def _assistant_to_dict(message: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {"role": "assistant", "content": message.content}
    tool_calls = getattr(message, "tool_calls", None) or []
    if tool_calls:
        out["tool_calls"] = [
            {
                "id": tc.id,
                "type": "function",
                "function": {"name": tc.function.name, "arguments": tc.function.arguments},
            }
            for tc in tool_calls
        ]
    return out


def _parse_arguments(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        args = json.loads(raw or "{}")
    except (TypeError, ValueError):
        logger.warning("Malformed tool arguments: %r", raw)
        return {}
    return args if isinstance(args, dict) else {}


def run_tool_loop(
    client: Any,
    messages: List[Dict[str, Any]],
    tools: List[Dict[str, Any]],
    handlers: Dict[str, ToolHandler],
    steps: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Let the model call tools until it answers without a tool call.

    Returns the full trace: the input messages followed by every assistant
    and tool message produced. Stops after ``steps`` model calls.
    """
    trace = list(messages)
    limit = steps or max_steps()
    for step in range(limit):
        resp = client.chat.completions.create(
            model=model_name(),
            temperature=0,
            messages=trace,
            tools=tools,
        )
        message = resp.choices[0].message
        assistant = _assistant_to_dict(message)
        trace.append(assistant)

        tool_calls = assistant.get("tool_calls") or []
        if not tool_calls:
            return trace

        for call in tool_calls:
            name = call["function"]["name"]
            handler = handlers.get(name)
            if handler is None:
                content = json.dumps({"ok": False, "error": f"Unknown tool: {name}"})
            else:
                content = handler(_parse_arguments(call["function"]["arguments"]))
            trace.append({
                "role": "tool",
                "tool_call_id": call["id"],
                "name": name,
                "content": content,
            })
        logger.debug("Tool step %d done (%d calls)", step + 1, len(tool_calls))

    logger.warning("Tool loop stopped after %d steps", limit)
    return trace
