"""
Pytest configuration and fixtures for Supashim tests.
"""

import os
import pytest
from unittest.mock import MagicMock

# Set test environment before importing supashim modules
os.environ["SHIM_ENV"] = "development"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-not-real")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key-not-real")


@pytest.fixture
def mock_query():
    """
    Mock PostgREST request builder.

    Every builder method returns the same mock, so call order on
    eq/order/limit/range can be asserted directly.
    """
    query = MagicMock()
    query.select.return_value = query
    query.insert.return_value = query
    query.update.return_value = query
    query.delete.return_value = query
    query.eq.return_value = query
    query.order.return_value = query
    query.limit.return_value = query
    query.range.return_value = query
    query.execute.return_value = MagicMock(data=[])
    return query


@pytest.fixture
def mock_supabase(mock_query):
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()
    mock_client.table.return_value = mock_query
    return mock_client


@pytest.fixture
def sample_recipes():
    """Sample recipe rows as Supabase returns them."""
    return [
        {"id": "recipe-1", "user_id": "user-1", "name": "Pancakes", "cuisine": "american"},
        {"id": "recipe-2", "user_id": "user-1", "name": "Carbonara", "cuisine": "italian"},
        {"id": "recipe-3", "user_id": "user-1", "name": "Pad Thai", "cuisine": "thai"},
    ]


@pytest.fixture(autouse=True)
def clean_request_context():
    """Each test starts without an authenticated request."""
    from supashim.db.request_context import clear_request_context

    clear_request_context()
    yield
    clear_request_context()
