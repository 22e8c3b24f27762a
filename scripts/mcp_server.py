"""
MCP-style tool server for LlamaSQL.

Speaks line-delimited JSON over stdin/stdout:
    {"method": "tools/list"}
    {"method": "tools/call", "params": {"name": "get_from_db", "arguments": {"sql": "..."}}}

Run with: python -m scripts.mcp_server --serve
"""

import json
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from llamasql.agent import configure_logging
from llamasql.tools.agent_adapter import MCPAgentAdapter


def handle_request(adapter: MCPAgentAdapter, request: dict) -> dict:
    method = request.get("method")
    if method == "tools/list":
        return {"tools": adapter.list_tools()}
    if method == "tools/call":
        params = request.get("params") or {}
        return adapter.handle_tool_call(params.get("name", ""), params.get("arguments") or {})
    return {"error": f"Unknown method: {method}"}


def serve(stdin=sys.stdin, stdout=sys.stdout):
    adapter = MCPAgentAdapter()

    print("LlamaSQL MCP Server started", file=sys.stderr)
    print(f"Available tools: {[t['name'] for t in adapter.list_tools()]}", file=sys.stderr)

    for line in stdin:
        line = line.strip()
        if not line:
            continue
        try:
            response = handle_request(adapter, json.loads(line))
        except json.JSONDecodeError:
            response = {"error": "Invalid JSON"}
        except Exception as e:
            response = {"error": str(e)}
        stdout.write(json.dumps(response, default=str) + "\n")
        stdout.flush()


if __name__ == "__main__":
    configure_logging()
    if "--serve" in sys.argv:
        serve()
    else:
        adapter = MCPAgentAdapter()
        print("Available tools:")
        for tool in adapter.list_tools():
            print(f"  - {tool['name']}: {tool['description'].splitlines()[0][:60]}")
        print("\nExample: get_schema")
        print(json.dumps(adapter.handle_tool_call("get_schema", {}), indent=2))
        print("\nTo run as MCP server: python -m scripts.mcp_server --serve")
