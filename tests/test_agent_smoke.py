"""
Smoke tests for the agent module.
These tests verify basic imports and module structure.
"""


class TestAgentImports:
    """Test that all agent modules can be imported."""

    def test_agent_imports(self):
        """Test main agent module imports."""
        import llamasql.agent
        assert hasattr(llamasql.agent, "run_agent")

    def test_agent_core_imports(self):
        """Test agent_core module imports."""
        import llamasql.agent_core
        assert hasattr(llamasql.agent_core, "analyze_query")
        assert hasattr(llamasql.agent_core, "respond")

    def test_tools_imports(self):
        """Test tools module imports."""
        from llamasql.tools import GetFromDBTool, MCPAgentAdapter
        assert GetFromDBTool is not None
        assert MCPAgentAdapter is not None

    def test_sql_imports(self):
        """Test SQL module imports."""
        from llamasql.sql import (
            SQLiteStore,
            execute_sql_query,
            get_store,
            safe_select_only,
        )
        assert SQLiteStore is not None
        assert execute_sql_query is not None
        assert get_store is not None
        assert safe_select_only is not None


class TestModuleStructure:
    """Test module structure and attributes."""

    def test_llamasql_version(self):
        """Test that version is defined."""
        import llamasql
        assert llamasql.__version__ == "0.1.0"

    def test_llamasql_exports(self):
        """Test main package exports."""
        from llamasql import (
            Orchestrator,
            analyze_query,
            respond,
            run_agent,
            to_payload,
        )
        assert callable(run_agent)
        assert callable(analyze_query)
        assert callable(respond)
        assert callable(to_payload)
        assert isinstance(Orchestrator, type)
