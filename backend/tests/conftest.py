"""
Example API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (app factory, API client,
       fixture runner, temporary fixture files).

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings: Settings with auth disabled
    ├── id_generator: Deterministic id source (always 42)
    ├── app: FastAPI app built from the two above
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    ├── fixture_runner: FixtureRunner building a fresh app per fixture
    └── write_fixture: Writes markdown fixture files under tmp_path
"""

import os
from pathlib import Path

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ.pop("AUTH_TOKEN", None)
os.environ["FIXTURES_DIR"] = str(Path(__file__).parent / "fixtures")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from example_api.config import Settings
from example_api.harness.runner import FixtureRunner
from example_api.main import create_app
from example_api.services.id_generator import SequenceIdGenerator


@pytest.fixture
def test_settings():
    """Settings as the API ships them: no token check, ids in [2, 100]."""
    return Settings(auth_token=None, log_level="WARNING")


@pytest.fixture
def id_generator():
    """Deterministic stand-in for the random id generator."""
    return SequenceIdGenerator([42])


@pytest.fixture
def app(test_settings, id_generator):
    return create_app(settings=test_settings, id_generator=id_generator)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     Uses ASGITransport to route requests directly to the app.

    Usage:
        async def test_get(test_client):
            response = await test_client.get("/api/examples/1")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fixture_runner(test_settings):
    """FixtureRunner that builds a fresh app (random ids) for every fixture."""
    return FixtureRunner(app_factory=lambda: create_app(settings=test_settings))


@pytest.fixture
def write_fixture(tmp_path):
    """
    Factory writing a fixture document to tmp_path/<name> and returning its path.

    Usage:
        path = write_fixture("get.md", "```http request\\nGET /\\n```\\n---\\n...")
    """
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def get_example_document():
    """A valid fixture: GET /api/examples/1 expecting the built-in example."""
    return """\
```http request
GET /api/examples/1
```
---
```http request
HTTP/1.1 200 OK
content-type: application/json
```
```json
{"id": 1, "title": "Test"}
```
"""


@pytest.fixture
def missing_separator_document():
    """Request and response blocks with no `---` line between them."""
    return """\
```http request
GET /api/examples/1
```
```http request
HTTP/1.1 200 OK
```
"""
