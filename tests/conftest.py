"""Root pytest configuration for casync-http tests."""
import pytest

from casync_http.settings import Settings
from casync_http.transport import HttpFetcher

from .fakes.fake_engine import FakeRemoteEngine
from .helpers.store_server import FakeHttpServer


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep the developer's casync settings out of the tests."""
    for name in (
        "CASYNC_VERBOSE",
        "CASYNC_HTTP_TIMEOUT",
        "CASYNC_HTTP_RETRY",
        "CASYNC_HTTP_USER_AGENT",
        "CASYNC_HTTP_ROUND_ROBIN",
        "CASYNC_HTTP_ENGINE",
    ):
        monkeypatch.delenv(name, raising=False)


# Standardized test fixtures
@pytest.fixture
def settings():
    """Standard test settings."""
    return Settings()


@pytest.fixture
def server():
    """Fake HTTP server with no routes; tests add their own."""
    return FakeHttpServer()


@pytest.fixture
def fetcher(settings, server):
    """HTTP fetcher talking to the fake server."""
    return HttpFetcher(settings, client=server.client())


@pytest.fixture
def engine():
    """Fake engine with no pending requests."""
    return FakeRemoteEngine()
