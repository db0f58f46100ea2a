"""
CSAPI HTTP trigger tests.

Handlers are called directly with azure.functions.HttpRequest objects.
"""

import json

import azure.functions as func
import pytest

from csapi.endpoints import CANONICAL_ENDPOINTS, find_missing_endpoints
from csapi_api import get_csapi_triggers
from csapi_api.triggers import (
    CSAPILandingPageTrigger,
    CSAPIConformanceTrigger,
    CSAPICollectionTrigger,
    CSAPIItemTrigger,
    CSAPISystemEventsTrigger,
)

BASE = "http://localhost:7071/api/csapi"


def make_request(path, params=None, route_params=None):
    return func.HttpRequest(
        method="GET",
        url=f"{BASE}{path}",
        params=params or {},
        route_params=route_params or {},
        body=b"",
    )


def body_of(response):
    return json.loads(response.get_body())


class TestRegistry:
    def test_has_5_routes(self):
        routes = [t["route"] for t in get_csapi_triggers()]
        assert routes == [
            "csapi",
            "csapi/conformance",
            "csapi/{collection}",
            "csapi/{collection}/{item_id}",
            "csapi/systems/{system_id}/events",
        ]

    def test_all_get(self):
        assert all(t["methods"] == ["GET"] for t in get_csapi_triggers())


class TestLandingPage:
    def test_advertises_every_canonical_endpoint(self):
        response = CSAPILandingPageTrigger().handle(make_request(""))
        assert response.status_code == 200
        links = body_of(response)["links"]
        assert find_missing_endpoints(links) == []
        assert {link["rel"] for link in links} >= set(CANONICAL_ENDPOINTS)

    def test_links_use_request_host(self):
        links = body_of(CSAPILandingPageTrigger().handle(make_request("")))["links"]
        systems = next(link for link in links if link["rel"] == "systems")
        assert systems["href"] == f"{BASE}/systems"

    def test_configured_base_url(self, csapi_env):
        csapi_env.setenv("CSAPI_SERVER_BASE_URL", "https://public.example/")
        links = body_of(CSAPILandingPageTrigger().handle(make_request("")))["links"]
        assert links[0]["href"] == "https://public.example/api/csapi"

    def test_title_from_environment(self, csapi_env):
        csapi_env.setenv("CSAPI_SERVER_TITLE", "Sensor Hub")
        assert body_of(CSAPILandingPageTrigger().handle(make_request("")))["title"] == "Sensor Hub"


class TestConformance:
    def test_conforms_to(self):
        response = CSAPIConformanceTrigger().handle(make_request("/conformance"))
        conforms = body_of(response)["conformsTo"]
        assert "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/advanced-filtering" in conforms


class TestCollection:
    def handle(self, collection, params=None):
        return CSAPICollectionTrigger().handle(
            make_request(f"/{collection}", params, {"collection": collection})
        )

    def test_unfiltered_systems(self):
        response = self.handle("systems")
        assert response.status_code == 200
        assert response.mimetype == "application/geo+json"
        body = body_of(response)
        assert body["type"] == "FeatureCollection"
        assert body["numberMatched"] == 4
        assert body["links"][0]["href"] == f"{BASE}/systems"

    def test_filter_by_observed_property(self):
        body = body_of(self.handle("systems", {"observedProperty": "prop-001"}))
        assert [f["id"] for f in body["features"]] == ["sys-001", "sys-002"]
        assert body["numberReturned"] == 2

    def test_filter_comma_separated_and_wildcard(self):
        body = body_of(self.handle("systems", {"id": "sys-*", "foi": "foi-001"}))
        assert [f["id"] for f in body["features"]] == ["sys-001", "sys-003"]

    def test_keyword(self):
        body = body_of(self.handle("systems", {"q": "drone"}))
        assert [f["id"] for f in body["features"]] == ["drone-001"]

    def test_deployments_by_system(self):
        body = body_of(self.handle("deployments", {"system": "drone-001"}))
        assert [f["id"] for f in body["features"]] == ["dep-003"]

    def test_property_definitions(self):
        response = self.handle("properties", {"baseProperty": "prop-001"})
        assert response.mimetype == "application/json"
        body = body_of(response)
        assert body["type"] == "Collection"
        assert [m["id"] for m in body["members"]] == ["prop-005"]

    def test_non_filterable_collection_ignores_filters(self):
        body = body_of(self.handle("observations", {"id": "obs-001"}))
        assert len(body["members"]) == 3

    def test_unknown_collection(self):
        response = self.handle("widgets")
        assert response.status_code == 404
        assert body_of(response)["code"] == "NotFound"

    def test_missing_collection_fixture(self, csapi_env, tmp_path):
        csapi_env.setenv("CSAPI_FIXTURE_DIR", str(tmp_path))
        response = self.handle("systems")
        assert response.status_code == 404


class TestItem:
    def handle(self, collection, item_id):
        return CSAPIItemTrigger().handle(
            make_request(f"/{collection}/{item_id}", route_params={"collection": collection, "item_id": item_id})
        )

    def test_item_fixture(self):
        response = self.handle("systems", "sys-001")
        assert response.status_code == 200
        body = body_of(response)
        assert body["id"] == "sys-001"
        assert any(link["rel"] == "events" for link in body["links"])

    def test_item_from_collection(self):
        response = self.handle("procedures", "proc-002")
        assert response.mimetype == "application/geo+json"
        body = body_of(response)
        assert body["id"] == "proc-002"
        assert body["links"] == [{
            "rel": "self",
            "type": "application/json",
            "href": f"{BASE}/procedures/proc-002",
        }]

    def test_non_feature_item(self):
        response = self.handle("commands", "cmd-002")
        assert response.mimetype == "application/json"
        assert body_of(response)["parameters"] == {"heading": 90}

    def test_unknown_item(self):
        response = self.handle("systems", "sys-999")
        assert response.status_code == 404
        assert "sys-999" in body_of(response)["description"]


class TestSystemEvents:
    def handle(self, system_id):
        return CSAPISystemEventsTrigger().handle(
            make_request(f"/systems/{system_id}/events", route_params={"system_id": system_id})
        )

    def test_nested_fixture(self):
        body = body_of(self.handle("sys-001"))
        assert [e["id"] for e in body["features"]] == ["evt-001"]
        assert body["links"][0]["href"] == f"{BASE}/systems/sys-001/events"

    def test_selected_from_system_events(self):
        body = body_of(self.handle("sys-002"))
        assert [e["id"] for e in body["features"]] == ["evt-002", "evt-003"]

    def test_system_without_events(self):
        body = body_of(self.handle("drone-001"))
        assert body["features"] == []

    def test_unknown_system(self):
        assert self.handle("sys-999").status_code == 404


class TestBareListFixtures:
    SYSTEMS = [
        {"type": "Feature", "id": "s-1", "properties": {"name": "Mast", "observedProperties": ["p-1"]}},
        {"type": "Feature", "id": "s-2", "properties": {"name": "Buoy"}},
    ]

    @pytest.fixture(autouse=True)
    def bare_list_dir(self, csapi_env, tmp_path):
        (tmp_path / "systems.json").write_text(json.dumps(self.SYSTEMS), encoding="utf-8")
        (tmp_path / "properties.json").write_text(
            json.dumps({"propertyDefs": [{"id": "p-1"}, {"id": "p-2", "baseProperty": "p-1"}]}),
            encoding="utf-8"
        )
        csapi_env.setenv("CSAPI_FIXTURE_DIR", str(tmp_path))

    def test_collection_serves_bare_list(self):
        response = CSAPICollectionTrigger().handle(
            make_request("/systems", route_params={"collection": "systems"})
        )
        body = body_of(response)
        assert [f["id"] for f in body["features"]] == ["s-1", "s-2"]
        assert body["numberMatched"] == 2

    def test_filter_on_bare_list(self):
        response = CSAPICollectionTrigger().handle(
            make_request("/systems", {"observedProperty": "p-1"}, {"collection": "systems"})
        )
        assert [f["id"] for f in body_of(response)["features"]] == ["s-1"]

    def test_keyed_property_definitions(self):
        response = CSAPICollectionTrigger().handle(
            make_request("/properties", {"baseProperty": "p-1"}, {"collection": "properties"})
        )
        assert [f["id"] for f in body_of(response)["features"]] == ["p-2"]

    def test_item_found_in_bare_list(self):
        response = CSAPIItemTrigger().handle(
            make_request("/systems/s-2", route_params={"collection": "systems", "item_id": "s-2"})
        )
        assert response.status_code == 200
        assert body_of(response)["properties"]["name"] == "Buoy"
