"""
Shared Test Fixtures and Configuration

Unit tests never touch a database or the network: repositories and the LLM
client are patched. Integration tests (tests/integration) need a PostgreSQL
reachable through TEST_DATABASE_URL.
"""

import os
from datetime import date
from typing import Generator

import pytest

from tests.factories import TEST_USER_ID, make_entry_row


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Force predictable settings for the whole session and restore afterwards.
    """
    original_env = os.environ.copy()
    os.environ.update(
        {
            "JWT_SECRET": "test-secret-please-ignore-0123456789",
            "JWT_ALG": "HS256",
            "ACCESS_TOKEN_EXPIRE_MIN": "60",
            "LLM_BASE_URL": "https://llm.test/v1",
            "LLM_API_KEY": "test-api-key",
            "LLM_MODEL": "test-model",
            "LOG_LEVEL": "WARNING",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Sample Data
# ============================================================================


@pytest.fixture
def today() -> date:
    """A fixed reference day so date arithmetic is reproducible."""
    return date(2024, 5, 15)


@pytest.fixture
def entry_row() -> dict:
    return make_entry_row()


# ============================================================================
# API Client
# ============================================================================


@pytest.fixture
def client():
    """
    TestClient with auth bypassed for TEST_USER_ID.

    The app lifespan (DB pool) is not started because the client is not used
    as a context manager.
    """
    from fastapi.testclient import TestClient

    from auth import dependencies as auth_dependencies
    from main import app

    app.dependency_overrides[auth_dependencies.current_user_id] = lambda: TEST_USER_ID
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
