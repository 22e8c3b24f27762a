"""
Tools module for LlamaSQL (agent and MCP boundary).
"""

from .executor import GetFromDBTool
from .agent_adapter import MCPAgentAdapter

__all__ = [
    "GetFromDBTool",
    "MCPAgentAdapter",
]
