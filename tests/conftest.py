import pytest
from fastapi.testclient import TestClient
from main import create_app
from app.core.config import Settings

@pytest.fixture
def test_api_key():
    return "test-secret-key"

@pytest.fixture
def test_settings(tmp_path, test_api_key):
    """Settings pointing at a fresh upload root for each test."""
    return Settings(API_KEY=test_api_key, UPLOAD_DIR=tmp_path / "uploads")

@pytest.fixture
def upload_dir(test_settings):
    return test_settings.UPLOAD_DIR

@pytest.fixture
def test_client(test_settings):
    """Create a test client for the FastAPI app."""
    with TestClient(create_app(test_settings)) as client:
        yield client

@pytest.fixture
def authenticated_client(test_client, test_api_key):
    """Create a test client that sends the shared API key."""
    test_client.headers.update({"x-api-key": test_api_key})
    return test_client
