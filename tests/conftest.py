# tests/conftest.py
import asyncio
import json
import pytest
import httpx
from fastapi.testclient import TestClient

# Import application
from app.app import app
from app.config import Settings
from app.dependencies import get_search_client, get_settings


SAMPLE_RESULTS = [
    {
        "url": "https://www.rust-lang.org/learn",
        "score": 0.91,
        "summary": "Learn Rust [1] with   the book.\nGet started quickly.",
    },
    {
        "url": "https://docs.python.org/3/tutorial/",
        "score": 0.87,
        "summary": "The Python Tutorial",
    },
]


class FakeSearchBackend:
    """Backend de recherche simulé : enregistre les requêtes reçues"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: bytes = json.dumps(SAMPLE_RESULTS).encode()
        self.error: Exception | None = None

    def respond_with(self, payload=None, status_code: int = 200, raw: bytes | None = None):
        self.status_code = status_code
        self.body = raw if raw is not None else json.dumps(payload).encode()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"content-type": "application/json"},
        )

    def json_bodies(self) -> list:
        return [json.loads(r.content) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def backend():
    return FakeSearchBackend()


@pytest.fixture
def search_client(backend):
    """Un seul client HTTP par test, fermé à la fin comme dans le lifespan"""
    c = httpx.AsyncClient(transport=backend.transport())
    yield c
    asyncio.run(c.aclose())


@pytest.fixture
def test_settings(monkeypatch):
    """Settings isolées de l'environnement du poste"""
    for name in ("SEARCH_API_URL", "SEARCH_PAGE_SIZE", "SEARCH_API_TIMEOUT", "REQUEST_TIMEOUT", "ENV"):
        monkeypatch.delenv(name, raising=False)
    return Settings()


def _make_client(search_client, test_settings, **kwargs):
    app.dependency_overrides[get_search_client] = lambda: search_client
    app.dependency_overrides[get_settings] = lambda: test_settings
    return TestClient(app, **kwargs)


@pytest.fixture
def client(search_client, test_settings):
    """Client de test branché sur le backend simulé"""
    try:
        with _make_client(search_client, test_settings) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def error_client(search_client, test_settings):
    """Comme client, mais les exceptions serveur deviennent des réponses 500"""
    try:
        with _make_client(search_client, test_settings, raise_server_exceptions=False) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


# Markers for test categories
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "loader: marks tests of the search page loader")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
