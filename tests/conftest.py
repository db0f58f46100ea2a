"""
Root conftest.py — sys.path, env vars, shared fixtures.

Every test runs against the bundled fixture directory with live and client
modes switched off, so nothing touches the network unless a test wires an
httpx.MockTransport in explicitly.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to sys.path so 'csapi', 'csapi_api' and 'health' are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

FIXTURE_DIR = Path(PROJECT_ROOT) / "fixtures" / "csapi" / "examples"
API_ROOT = "https://h"

CSAPI_ENV_VARS = [
    "CSAPI_API_ROOT", "CSAPI_LIVE", "CSAPI_CLIENT_MODE", "CSAPI_FIXTURE_DIR",
    "CSAPI_TIMEOUT_SECONDS", "CSAPI_DEBUG_LOGGING",
    "CSAPI_SERVER_TITLE", "CSAPI_SERVER_DESCRIPTION", "CSAPI_SERVER_BASE_URL",
]


def _reset_config_caches():
    from csapi.config import get_csapi_config
    from csapi_api.config import reset_server_config

    get_csapi_config.cache_clear()
    reset_server_config()


@pytest.fixture(autouse=True)
def csapi_env(monkeypatch):
    """Clean CSAPI_* environment pointing at the bundled fixtures."""
    for var in CSAPI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CSAPI_FIXTURE_DIR", str(FIXTURE_DIR))
    _reset_config_caches()
    yield monkeypatch
    _reset_config_caches()


@pytest.fixture
def loader():
    from csapi.fixtures import FixtureLoader
    return FixtureLoader(FIXTURE_DIR)


@pytest.fixture
def resolver(loader):
    """Fixture-mode resolver over the bundled fixtures."""
    from csapi.resolver import DataResolver
    return DataResolver(loader=loader, live=False, client_mode=False, api_root=API_ROOT)


@pytest.fixture
def systems(resolver):
    from csapi.endpoints import ResourceType
    return resolver.resolve_records(ResourceType.SYSTEMS)


@pytest.fixture
def make_http_client():
    """
    Factory fixture: httpx.Client answering from a path -> response table.

    Values are JSON bodies, or (status_code, body) tuples. Unknown paths get 404.
    Requests are recorded on client.requests.
    """
    def _make(routes):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            value = routes.get(request.url.path)
            if value is None:
                return httpx.Response(404, json={"code": "NotFound"})
            if isinstance(value, tuple):
                status_code, body = value
                if isinstance(body, (bytes, str)):
                    return httpx.Response(status_code, content=body)
                return httpx.Response(status_code, json=body)
            return httpx.Response(200, json=value)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        client.requests = requests
        return client
    return _make


@pytest.fixture
def fixture_dir():
    """Bundled fixture directory."""
    return FIXTURE_DIR
