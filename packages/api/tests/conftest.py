# This project was developed with assistance from AI tools.
"""Shared fixtures for API tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
clears dependency overrides after every test so one test's store or policy
never leaks into the next.
"""

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.core.policy import get_access_policy
from src.main import app as real_app
from src.services.store import get_query_client

from factories import TEST_JWT_SECRET, make_policy
from fakes import FakeQueryClient


@pytest.fixture(autouse=True)
def _clean_overrides():
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def policy():
    return make_policy()


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", TEST_JWT_SECRET)
    return TEST_JWT_SECRET


@pytest.fixture
def make_client(policy, jwt_secret):
    """Factory fixture: wire the real app to a fake store, return TestClient."""

    def _make(store: FakeQueryClient, access_policy=None) -> TestClient:
        real_app.dependency_overrides[get_query_client] = lambda: store
        real_app.dependency_overrides[get_access_policy] = lambda: access_policy or policy
        return TestClient(real_app)

    return _make
