# LlamaSQL - natural-language chat over a hospital SQLite database
"""
LlamaSQL - ask questions in English, get SQL results back.
"""

from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env")

__version__ = "0.1.0"

from .agent import run_agent
from .agent_core import Orchestrator, analyze_query, respond
from .payload import to_payload
from .sql.executor import SQLiteStore
from .tools import GetFromDBTool, MCPAgentAdapter

__all__ = [
    "__version__",
    "run_agent",
    "respond",
    "analyze_query",
    "Orchestrator",
    "to_payload",
    "SQLiteStore",
    "GetFromDBTool",
    "MCPAgentAdapter",
]
