"""
Tests for the Knex-compatible Database facade.

Tests cover:
- db(table) builder creation
- Raw SQL escape hatch
- Schema stand-ins (probe, create/drop)
- Compatibility no-ops (client info, destroy, on)
- Strict mode
- Process-level db proxy and request-scoped get_db
"""

import asyncio
import logging
from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from supashim.db.builder import QueryBuilder
from supashim.db.request_context import set_request_context
from supashim.db.shim import Database, _DatabaseProxy, get_db
from supashim.errors import UnsupportedOperationError


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class TestTableAccess:
    def test_call_returns_fresh_builder(self, mock_supabase):
        db = Database(mock_supabase)
        first = db("recipes")
        second = db("recipes")

        assert isinstance(first, QueryBuilder)
        assert first is not second
        assert first.table == "recipes"

    def test_table_alias(self, mock_supabase):
        assert Database(mock_supabase).table("recipes").table == "recipes"

    def test_range_window_passed_to_builders(self, mock_supabase, mock_query):
        db = Database(mock_supabase, range_window=25)
        _run(db("recipes").offset(5).select())
        mock_query.range.assert_called_once_with(5, 29)

    def test_end_to_end_query(self, mock_supabase, mock_query, sample_recipes):
        mock_query.execute.return_value = MagicMock(data=sample_recipes[1:2])
        db = Database(mock_supabase)

        async def go():
            return await db("recipes").where("cuisine", "italian").order_by("name").limit(1)

        assert _run(go()) == sample_recipes[1:2]


class TestRaw:
    def test_select_one_canned(self, mock_supabase):
        result = _run(Database(mock_supabase).raw("SELECT 1"))

        assert result == [{"1": 1}]
        mock_supabase.table.assert_not_called()

    def test_other_sql_placeholder(self, mock_supabase, caplog):
        with caplog.at_level(logging.WARNING, logger="supashim.db.shim"):
            result = _run(Database(mock_supabase).raw("SELECT * FROM recipes"))

        assert result == [{"message": "Raw SQL queries are not directly supported with Supabase"}]
        mock_supabase.table.assert_not_called()
        mock_supabase.rpc.assert_not_called()
        assert "Raw SQL not directly supported: SELECT * FROM recipes" in caplog.text

    def test_exact_match_only(self, mock_supabase):
        result = _run(Database(mock_supabase).raw("select 1"))
        assert result[0].get("message")

    def test_strict_raises(self, mock_supabase):
        db = Database(mock_supabase, strict=True)

        assert _run(db.raw("SELECT 1")) == [{"1": 1}]
        with pytest.raises(UnsupportedOperationError) as exc_info:
            _run(db.raw("DELETE FROM recipes"))
        assert exc_info.value.operation == "raw"
        mock_supabase.table.assert_not_called()


class TestSchema:
    def test_has_table_true(self, mock_supabase):
        assert _run(Database(mock_supabase).schema.has_table("recipes")) is True
        mock_supabase.table.assert_called_once_with("recipes")

    def test_has_table_permission_error_reports_missing(self, mock_supabase, mock_query):
        mock_query.execute.side_effect = APIError({"message": "permission denied", "code": "42501"})
        assert _run(Database(mock_supabase).schema.hasTable("secrets")) is False

    def test_create_table_noop(self, mock_supabase, caplog):
        with caplog.at_level(logging.WARNING, logger="supashim.db.shim"):
            result = _run(Database(mock_supabase).schema.create_table("recipes", lambda t: None))

        assert result is True
        mock_supabase.table.assert_not_called()
        assert "Creating tables not supported: recipes" in caplog.text

    def test_drop_table_noop(self, mock_supabase):
        assert _run(Database(mock_supabase).schema.dropTable("recipes")) is True
        mock_supabase.table.assert_not_called()

    def test_strict_schema_mutation_raises(self, mock_supabase):
        schema = Database(mock_supabase, strict=True).schema

        with pytest.raises(UnsupportedOperationError):
            _run(schema.create_table("recipes"))
        with pytest.raises(UnsupportedOperationError):
            _run(schema.drop_table("recipes"))
        # Probing is still allowed
        assert _run(schema.has_table("recipes")) is True


class TestCompatibility:
    def test_client_info(self, mock_supabase):
        assert Database(mock_supabase).client.config.client == "supabase"

    def test_destroy(self, mock_supabase):
        assert _run(Database(mock_supabase).destroy()) is True
        mock_supabase.assert_not_called()

    def test_on_returns_db(self, mock_supabase, caplog):
        db = Database(mock_supabase)
        callback = MagicMock()

        with caplog.at_level(logging.INFO, logger="supashim.db.shim"):
            assert db.on("error", callback) is db
            assert db.on("query", callback) is db

        callback.assert_not_called()
        assert caplog.text.count("Registered error handler") == 1


class TestProcessAccess:
    def test_proxy_builds_lazily(self, mock_supabase):
        proxy = _DatabaseProxy()

        with patch("supashim.db.client.get_client", return_value=mock_supabase) as get_client:
            builder = proxy("recipes")
            assert proxy.client.config.client == "supabase"

        get_client.assert_called_once()
        assert builder.table == "recipes"
        assert proxy.range_window == 1000

    def test_proxy_reset(self, mock_supabase):
        proxy = _DatabaseProxy()
        with patch("supashim.db.client.get_client", return_value=mock_supabase) as get_client:
            proxy("a")
            proxy.reset()
            proxy("b")
        assert get_client.call_count == 2

    def test_get_db_without_token_uses_shared_client(self, mock_supabase):
        with patch("supashim.db.client.get_client", return_value=mock_supabase):
            db = get_db()
        assert db.remote is mock_supabase

    def test_get_db_with_token_uses_authenticated_client(self, mock_supabase):
        set_request_context(access_token="user-jwt")

        with patch(
            "supashim.db.client.get_authenticated_client", return_value=mock_supabase
        ) as get_authenticated_client:
            db = get_db()

        get_authenticated_client.assert_called_once_with("user-jwt")
        assert db.remote is mock_supabase

    def test_strict_setting_reaches_get_db(self, mock_supabase, mock_query, monkeypatch):
        from supashim.config import Settings

        monkeypatch.setenv("SHIM_STRICT_UNSUPPORTED", "true")
        monkeypatch.setenv("SHIM_RANGE_WINDOW", "200")
        strict_settings = Settings()

        with patch("supashim.config.settings", strict_settings), \
             patch("supashim.db.client.get_client", return_value=mock_supabase):
            db = get_db()

        assert db.strict is True
        with pytest.raises(UnsupportedOperationError):
            _run(db.raw("x"))
        with pytest.raises(UnsupportedOperationError):
            _run(db.schema.create_table("recipes"))

        _run(db("recipes").offset(10).select())
        mock_query.range.assert_called_once_with(10, 209)
