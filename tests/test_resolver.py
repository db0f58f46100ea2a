"""
Data resolution layer tests.

Fixture mode reads the bundled fixtures; live and client modes are driven
through httpx.MockTransport.
"""

import json
import logging

import httpx
import pytest

from csapi.endpoints import ResourceType
from csapi.exceptions import (
    FixtureNotFoundError,
    CSAPIRequestError,
    CSAPITimeoutError,
    CSAPIResponseError,
)
from csapi.fixtures import FixtureLoader
from csapi.resolver import DataResolver, ResolutionMode

LIVE_SYSTEMS = {
    "type": "FeatureCollection",
    "itemType": "System",
    "features": [{"type": "Feature", "id": "live-1", "properties": {"name": "Live System"}}],
}


def make_resolver(loader, http_client=None, **kwargs):
    return DataResolver(loader=loader, http_client=http_client, api_root="https://h", **kwargs)


class TestModes:
    def test_fixture_mode_by_default(self, loader):
        assert make_resolver(loader).mode == ResolutionMode.FIXTURE

    def test_client_mode_takes_precedence(self, loader):
        resolver = make_resolver(loader, live=True, client_mode=True)
        assert resolver.mode == ResolutionMode.CLIENT

    def test_modes_from_environment(self, loader, csapi_env):
        from csapi.config import get_csapi_config

        csapi_env.setenv("CSAPI_LIVE", "true")
        get_csapi_config.cache_clear()
        assert DataResolver(loader=loader).mode == ResolutionMode.LIVE


class TestFixtureMode:
    def test_resolves_fixture(self, resolver):
        assert resolver.resolve("systems")["itemType"] == "System"

    def test_live_url_ignored(self, loader, make_http_client):
        http = make_http_client({"/systems": LIVE_SYSTEMS})
        resolver = make_resolver(loader, http, live=False)
        resolver.resolve("systems", "https://h/systems")
        assert http.requests == []

    def test_missing_fixture_is_hard_failure(self, resolver):
        with pytest.raises(FixtureNotFoundError):
            resolver.resolve("nothing_here")

    def test_resolve_records(self, resolver):
        records = resolver.resolve_records(ResourceType.DEPLOYMENTS)
        assert [r.id for r in records] == ["dep-001", "dep-002", "dep-003"]

    def test_resolve_records_rejects_non_filterable_before_io(self, tmp_path):
        resolver = make_resolver(FixtureLoader(tmp_path))
        with pytest.raises(ValueError):
            resolver.resolve_records(ResourceType.OBSERVATIONS)

    def test_invalidate(self, tmp_path):
        path = tmp_path / "systems.json"
        path.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")
        resolver = make_resolver(FixtureLoader(tmp_path))
        assert resolver.resolve("systems") == [{"id": "a"}]

        path.write_text(json.dumps([{"id": "b"}]), encoding="utf-8")
        assert resolver.resolve("systems") == [{"id": "a"}]
        resolver.invalidate("systems")
        assert resolver.resolve("systems") == [{"id": "b"}]

        path.write_text(json.dumps([{"id": "c"}]), encoding="utf-8")
        resolver.invalidate()
        assert resolver.resolve("systems") == [{"id": "c"}]

    def test_changing_resolved_document_does_not_affect_later_calls(self, resolver):
        resolver.resolve("systems")["features"].clear()
        assert len(resolver.resolve_records(ResourceType.SYSTEMS)) == 4


class TestEmptyResultLogging:
    def test_items_without_ids_logged(self, tmp_path, caplog):
        (tmp_path / "systems.json").write_text(json.dumps([{"name": "no id"}]), encoding="utf-8")
        resolver = make_resolver(FixtureLoader(tmp_path))
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve_records(ResourceType.SYSTEMS) == []
        assert "none with an id" in caplog.text

    def test_unrecognized_shape_logged(self, tmp_path, caplog):
        (tmp_path / "systems.json").write_text(json.dumps({"unexpected": True}), encoding="utf-8")
        resolver = make_resolver(FixtureLoader(tmp_path))
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve_records(ResourceType.SYSTEMS) == []
        assert "unrecognized payload shape" in caplog.text

    def test_empty_collection_not_logged(self, tmp_path, caplog):
        (tmp_path / "systems.json").write_text(
            json.dumps({"type": "FeatureCollection", "features": []}), encoding="utf-8"
        )
        resolver = make_resolver(FixtureLoader(tmp_path))
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve_records(ResourceType.SYSTEMS) == []
        assert "normalized to no records" not in caplog.text


class TestLiveMode:
    def test_fetches_live_url(self, loader, make_http_client):
        http = make_http_client({"/systems": LIVE_SYSTEMS})
        resolver = make_resolver(loader, http, live=True)
        assert resolver.resolve("systems", "https://h/systems") == LIVE_SYSTEMS

    def test_resolve_records_uses_canonical_url(self, loader, make_http_client):
        http = make_http_client({"/systems": LIVE_SYSTEMS})
        resolver = make_resolver(loader, http, live=True)
        records = resolver.resolve_records(ResourceType.SYSTEMS)
        assert [r.id for r in records] == ["live-1"]
        assert str(http.requests[0].url) == "https://h/systems"

    def test_without_url_uses_fixture(self, loader, make_http_client):
        http = make_http_client({})
        resolver = make_resolver(loader, http, live=True)
        assert resolver.resolve("system_sys-001")["id"] == "sys-001"
        assert http.requests == []

    def test_error_status(self, loader, make_http_client):
        http = make_http_client({"/systems": (500, {"code": "boom"})})
        resolver = make_resolver(loader, http, live=True)
        with pytest.raises(CSAPIRequestError) as exc_info:
            resolver.resolve("systems", "https://h/systems")
        assert exc_info.value.status_code == 500
        assert exc_info.value.url == "https://h/systems"

    def test_unreachable_is_not_masked_by_fixture(self, loader, make_http_client):
        http = make_http_client({})
        resolver = make_resolver(loader, http, live=True)
        with pytest.raises(CSAPIRequestError):
            resolver.resolve("systems", "https://h/systems")

    def test_timeout(self, loader):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        http = httpx.Client(transport=httpx.MockTransport(handler))
        resolver = make_resolver(loader, http, live=True)
        with pytest.raises(CSAPITimeoutError):
            resolver.resolve("systems", "https://h/systems")

    def test_non_json_body(self, loader, make_http_client):
        http = make_http_client({"/systems": (200, b"<html>not json</html>")})
        resolver = make_resolver(loader, http, live=True)
        with pytest.raises(CSAPIResponseError):
            resolver.resolve("systems", "https://h/systems")


class TestClientMode:
    def test_handlers_for_every_kind(self, resolver):
        assert resolver.has_handler("systems")
        assert resolver.has_handler("endpoint_datastreams")
        assert resolver.has_handler("endpoint_systemHistory")
        assert not resolver.has_handler("system_sys-001")

    def test_invokes_client(self, loader, make_http_client):
        http = make_http_client({"/systems": LIVE_SYSTEMS})
        resolver = make_resolver(loader, http, client_mode=True)
        assert resolver.resolve("endpoint_systems") == LIVE_SYSTEMS

    def test_failing_client_falls_back_to_fixture(self, loader, make_http_client, caplog):
        http = make_http_client({"/systems": (503, {"code": "down"})})
        resolver = make_resolver(loader, http, client_mode=True)
        with caplog.at_level(logging.WARNING):
            data = resolver.resolve("systems")
        assert [f["id"] for f in data["features"]][0] == "sys-001"
        assert "falling back" in caplog.text

    def test_unknown_handler_falls_back(self, loader, make_http_client, caplog):
        http = make_http_client({})
        resolver = make_resolver(loader, http, client_mode=True)
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve("system_sys-001")["id"] == "sys-001"
        assert "No client handler" not in caplog.text
        assert http.requests == []

    def test_fallback_reaches_live_mode(self, loader, make_http_client):
        http = make_http_client({"/systems/sys-001": {"id": "sys-001", "type": "Feature"}})
        resolver = make_resolver(loader, http, client_mode=True, live=True)
        data = resolver.resolve("system_sys-001", "https://h/systems/sys-001")
        assert data == {"id": "sys-001", "type": "Feature"}


class TestHttpClientOwnership:
    def test_shared_client_not_closed(self, loader, make_http_client):
        http = make_http_client({})
        with make_resolver(loader, http):
            pass
        assert not http.is_closed

    def test_owned_client_closed(self, loader):
        resolver = make_resolver(loader)
        client = resolver._get_client()
        resolver.close()
        assert client.is_closed
