"""
Shared fixtures for all tests
"""
import os

# Settings are read at import time, test values must be in place first
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_DIR"] = ""
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from nedc_admin.main import app
from nedc_admin.application.web.auth import get_anonymous_client, get_backend_client, require_token
from nedc_admin.infrastructure.api.client import BackendClient
from tests.fixtures.mock_backend import TEST_TOKEN, MockBackend


@pytest.fixture
def backend() -> MockBackend:
    """Fresh mock backend for each test"""
    return MockBackend()


@pytest.fixture
def api_client(backend) -> BackendClient:
    """Backend client with a token, for service tests"""
    return backend.client()


@pytest.fixture
def test_client(backend) -> TestClient:
    """FastAPI test client wired to the mock backend"""

    async def _override_backend_client(token: str = Depends(require_token)):
        client = backend.client(token)
        try:
            yield client
        finally:
            await client.aclose()

    async def _override_anonymous_client():
        client = backend.client(None)
        try:
            yield client
        finally:
            await client.aclose()

    app.dependency_overrides[get_backend_client] = _override_backend_client
    app.dependency_overrides[get_anonymous_client] = _override_anonymous_client
    with TestClient(app, follow_redirects=False) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def logged_in_client(test_client, backend) -> TestClient:
    """Test client holding a session token, the login request is not recorded"""
    backend.add("POST", "/admin/login", {"token": TEST_TOKEN})
    response = test_client.post("/login", data={"email": "admin@nedcgroup.se", "password": "secret"})
    assert response.status_code == 302
    backend.requests.clear()
    return test_client


# Automatic markers
def pytest_collection_modifyitems(config, items):
    """Applies markers by test location"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
