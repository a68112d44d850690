"""
Pytest configuration for the invoicing backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.

    Query builder chains (table().insert().execute(), ...) resolve to
    MagicMocks, so tests only set the bits they assert on.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture(autouse=True)
def clear_view_cache():
    """Every test starts with an empty view cache."""
    from invoicing.services import view_cache

    view_cache.clear()
    yield
    view_cache.clear()
