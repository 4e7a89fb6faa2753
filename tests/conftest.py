"""Shared test fixtures and configuration for the test suite."""

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add the parent directory to the path for imports
import sys

sys.path.append(str(Path(__file__).parent.parent))

from taskboard.config import Settings
from taskboard.main import create_app
from taskboard.services.store import JsonFileTaskStore
from taskboard.services.task_service import TaskService

from fakes import InMemoryTaskStore


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A throwaway UI directory with an entry document and one asset."""
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "index.html").write_text("<html>task board shell</html>", "utf-8")
    (directory / "app.js").write_text("console.log('board');", "utf-8")
    return directory


@pytest.fixture
def test_settings(tmp_path: Path, static_dir: Path, monkeypatch) -> Settings:
    """Create test settings with temporary paths."""
    for name in ("PORT", "ORIGIN", "DATA_FILE", "STATIC_DIR", "MAX_BODY_BYTES", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)

    return Settings(
        port=4000,
        data_file=tmp_path / "data" / "db.json",
        static_dir=static_dir,
        max_body_bytes=4096,
        log_level="DEBUG",
    )


@pytest.fixture
def data_file(test_settings: Settings) -> Path:
    return test_settings.data_file


@pytest.fixture
def store(data_file: Path) -> JsonFileTaskStore:
    """JSON store writing into the temporary directory."""
    return JsonFileTaskStore(data_file)


@pytest.fixture
def task_service(store: JsonFileTaskStore) -> TaskService:
    """Create a task service over a temporary JSON file."""
    return TaskService(store)


@pytest.fixture
def memory_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def memory_service(memory_store: InMemoryTaskStore) -> TaskService:
    """Task service without disk I/O."""
    return TaskService(memory_store)


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


# Test data fixtures
@pytest.fixture
def sample_task_data():
    """Sample task data for testing."""
    return {"title": "Test Task", "description": "This is a test task description"}
