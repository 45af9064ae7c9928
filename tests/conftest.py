import pytest
import os
import shutil
from pathlib import Path

from fastapi.testclient import TestClient

from mailtriage.api import app
from mailtriage.config import DashboardConfig
from mailtriage.mocks.store import MockEmailStore
from tests.factories import get_dummy_records

MOCK_DATA_PATH = str(Path(__file__).resolve().parent.parent / "mailtriage" / "data" / "mock_store.json")

@pytest.fixture
def test_config(monkeypatch):
    """Forces the test environment: in-memory store seeded from the bundled mock data."""
    monkeypatch.setenv("MAILTRIAGE_ENV", "test")
    monkeypatch.setenv("MOCK_DATA_PATH", MOCK_DATA_PATH)
    monkeypatch.setenv("MAILTRIAGE_TOKEN_SECRET", "test-secret")
    monkeypatch.setenv("MAILTRIAGE_REQUIRE_AUTH", "false")
    return DashboardConfig()

@pytest.fixture
def api_client(test_config):
    """TestClient with the lifespan run, so app.state is populated from the test config."""
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture
def secured_api_client(test_config, monkeypatch):
    monkeypatch.setenv("MAILTRIAGE_REQUIRE_AUTH", "true")
    with TestClient(app) as client:
        yield client

@pytest.fixture
def mock_store():
    return MockEmailStore(MOCK_DATA_PATH)

@pytest.fixture
def dummy_records():
    return get_dummy_records()

@pytest.fixture
def chroma_config(test_config, tmp_path, monkeypatch):
    """Config pointing Chroma at a throwaway directory. Needs the default embedding model."""
    if os.getenv("MAILTRIAGE_RUN_INTEGRATION") != "1":
        pytest.skip("Set MAILTRIAGE_RUN_INTEGRATION=1 to run Chroma integration tests")
    test_config.chroma_db_path = str(tmp_path / "chroma")
    yield test_config
    shutil.rmtree(test_config.chroma_db_path, ignore_errors=True)
