"""
Test configuration and fixtures for PhytoScan.

- In-memory key-value storage and history store per test
- Diagnosis session wired to a mock Claude service and quality analyzer
- TestClient with session and file service dependency overrides
- Generated leaf images on disk
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from phytoscan.api.dependencies import get_file_service, get_session
from phytoscan.main import app
from phytoscan.services.file_service import FileService
from phytoscan.services.history_service import HistoryStore
from phytoscan.services.session_service import DiagnosisSession
from phytoscan.services.storage import MemoryKeyValueStore
from tests.fixtures.mocks import MockClaudeService, MockQualityAnalyzer


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def history_store(storage: MemoryKeyValueStore) -> HistoryStore:
    """Empty, loaded history store over in-memory storage."""
    store = HistoryStore(storage, key="test_history", max_entries=50)
    store.load()
    return store


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_claude_service(monkeypatch) -> MockClaudeService:
    """
    Mock Claude service for testing AI functionality.

    Returns a mock service that can be configured per test.
    """
    mock_service = MockClaudeService()

    # build_session() constructs the classifier through this name
    monkeypatch.setattr(
        "phytoscan.api.dependencies.ClaudeService", lambda: mock_service
    )

    return mock_service


@pytest.fixture
def mock_quality_analyzer() -> MockQualityAnalyzer:
    return MockQualityAnalyzer()


@pytest.fixture
def session(
    history_store: HistoryStore,
    mock_claude_service: MockClaudeService,
    mock_quality_analyzer: MockQualityAnalyzer,
) -> DiagnosisSession:
    return DiagnosisSession(
        history=history_store,
        classifier=mock_claude_service,
        quality_analyzer=mock_quality_analyzer,
    )


# =============================================================================
# Image Fixtures
# =============================================================================


@pytest.fixture
def leaf_image(tmp_path) -> str:
    """A well-lit 640x480 green JPEG."""
    path = tmp_path / "leaf.jpg"
    Image.new("RGB", (640, 480), (60, 150, 60)).save(path)
    return str(path)


@pytest.fixture
def leaf_image_bytes(leaf_image) -> bytes:
    with open(leaf_image, "rb") as f:
        return f.read()


# =============================================================================
# TestClient Fixtures
# =============================================================================


@pytest.fixture
def client(session: DiagnosisSession, tmp_path) -> Generator[TestClient, None, None]:
    """
    TestClient with the diagnosis session injected.

    Uploads go to a per-test temp directory.
    """
    file_service = FileService(upload_dir=str(tmp_path / "uploads"))

    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_file_service] = lambda: file_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
