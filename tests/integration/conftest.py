"""Integration test conftest.

Inherits the root conftest.py fixtures (db_session, test_shop, etc.).
Every test gets its own in-memory SQLite database: real SQL executes,
nothing persists.
"""

import pytest


@pytest.fixture(autouse=True)
def _mark_integration(request):
    """Auto-mark all tests in this directory as integration."""
    request.node.add_marker(pytest.mark.integration)
