"""SQL utilities for LlamaSQL."""
from .executor import SQLiteStore, execute_sql_query, get_store
from .safety import safe_select_only

__all__ = ["SQLiteStore", "execute_sql_query", "get_store", "safe_select_only"]
