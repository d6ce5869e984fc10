"""Pytest fixtures for the email discovery service tests.

This module provides shared fixtures for testing the FastAPI application,
including the test client and common test data.
"""

import pytest
from fastapi.testclient import TestClient

from mailfinder.main import app
from mailfinder.routers import discovery


@pytest.fixture
def client():
    """Create a test client for the FastAPI application.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def fast_discovery(monkeypatch):
    """Run discovery sessions without the inter-domain delay, on a clean registry."""
    monkeypatch.setattr(discovery, "INTER_DOMAIN_DELAY_SECONDS", 0)
    discovery._sessions_db.clear()
    discovery._cancel_events.clear()
    yield
    discovery._sessions_db.clear()
    discovery._cancel_events.clear()


@pytest.fixture
def sample_executives():
    """Executive lookup result for example.com.

    Returns:
        dict: Role label to full name or None.
    """
    return {
        "Founder": "John Doe",
        "CEO": "Jane Smith",
        "CTO": None,
        "COO": "null",
    }
