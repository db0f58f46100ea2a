"""
CSAPI Endpoint Service Layer

Business logic for the fixture-backed Connected Systems endpoints.
Collections of the five filterable resource kinds honour the CSAPI query
parameters (id, parent, system, procedure, foi, observedProperty,
controlledProperty, baseProperty, objectType, q) through csapi.filtering.

Date: 19 OCT 2026
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from csapi.client import RESOURCE_KINDS
from csapi.endpoints import (
    CANONICAL_ENDPOINTS,
    EXTENDED_ENDPOINTS,
    ResourceType,
    build_csapi_url,
    build_nested_url,
)
from csapi.exceptions import ResourceNotFoundError
from csapi.filtering import FILTERS, apply_filter
from csapi.fixtures import FixtureLoader
from csapi.matchers import geometry_filter_placeholder
from csapi.models import CSAPIConformance
from csapi.normalizer import normalize, normalize_records
from csapi.resolver import DataResolver
from csapi.validation import is_resource_collection

from .config import CSAPIServerConfig

logger = logging.getLogger(__name__)

CONFORMANCE_CLASSES = [
    "http://www.opengis.net/spec/ogcapi-common-1/1.0/conf/core",
    "http://www.opengis.net/spec/ogcapi-features-1/1.0/conf/core",
    "http://www.opengis.net/spec/ogcapi-features-1/1.0/conf/geojson",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/api-common",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/system",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/deployment",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/procedure",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/sf",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/property",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-1/1.0/conf/advanced-filtering",
    "http://www.opengis.net/spec/ogcapi-connectedsystems-2/1.0/conf/api-common",
]


class CSAPIFixtureService:
    """Connected Systems endpoint business logic over fixture data."""

    def __init__(self, config: CSAPIServerConfig, resolver: Optional[DataResolver] = None):
        """Initialize service with configuration."""
        self.config = config
        # Endpoints always serve fixtures; live/client modes belong to callers
        self.resolver = resolver or DataResolver(
            loader=FixtureLoader(config.fixture_dir),
            live=False,
            client_mode=False
        )

    def _resource_type(self, collection: str) -> ResourceType:
        if collection not in EXTENDED_ENDPOINTS:
            raise ResourceNotFoundError(f"Collection not found: {collection}")
        return ResourceType(collection)

    def get_landing_page(self, api_root: str) -> Dict[str, Any]:
        """
        Landing page advertising every canonical endpoint.

        Args:
            api_root: Root for link generation (e.g. http://host/api/csapi)
        """
        links = [
            {
                "rel": "self",
                "type": "application/json",
                "href": api_root,
                "title": "This document"
            },
            {
                "rel": "conformance",
                "type": "application/json",
                "href": f"{api_root}/conformance",
                "title": "Conformance classes"
            }
        ]
        for name in CANONICAL_ENDPOINTS:
            links.append({
                "rel": name,
                "type": "application/json",
                "href": build_csapi_url(name, api_root),
                "title": f"{RESOURCE_KINDS[ResourceType(name)].item_type} collection"
            })

        return {
            "title": self.config.title,
            "description": self.config.description,
            "links": links
        }

    def get_conformance(self) -> CSAPIConformance:
        """Conformance object with conformsTo array."""
        return CSAPIConformance(conformsTo=list(CONFORMANCE_CLASSES))

    def get_collection(
        self,
        collection: str,
        api_root: str,
        params: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Collection document, filtered for filterable resource kinds.

        Args:
            collection: Canonical collection name
            api_root: Root for link generation
            params: Query parameters

        Returns:
            FeatureCollection, or Collection with members for non-feature resources

        Raises:
            ResourceNotFoundError: Unknown collection
            FixtureNotFoundError: No fixture for the collection
            pydantic.ValidationError: Malformed filter parameters
        """
        params = params or {}
        resource_type = self._resource_type(collection)
        kind = RESOURCE_KINDS[resource_type]
        raw = self.resolver.resolve(kind.fixture_key)
        items = normalize(raw, kind.plural_key)

        if resource_type in FILTERS:
            _, params_model = FILTERS[resource_type]
            filter_params = params_model.from_query_params(params)
            records = normalize_records(raw, resource_type)
            matched_ids = {r.id for r in apply_filter(resource_type, records, filter_params)}
            items = [item for item in items if isinstance(item, dict) and str(item.get("id")) in matched_ids]
            logger.info(
                f"Filtered {collection}: {len(matched_ids)}/{len(records)} records match"
            )

        items = geometry_filter_placeholder(items, params.get("geom"))
        self_link = {
            "rel": "self",
            "type": "application/json",
            "href": build_csapi_url(resource_type, api_root)
        }

        if is_resource_collection(raw):
            return {
                "type": "Collection",
                "itemType": raw.get("itemType", kind.item_type),
                "members": items,
                "links": [self_link]
            }

        return {
            "type": "FeatureCollection",
            "itemType": raw.get("itemType", kind.item_type) if isinstance(raw, dict) else kind.item_type,
            "features": items,
            "numberMatched": len(items),
            "numberReturned": len(items),
            "links": [self_link]
        }

    def get_item(self, collection: str, item_id: str, api_root: str) -> Dict[str, Any]:
        """
        Single item: its own fixture if present, else looked up in the collection.

        Raises:
            ResourceNotFoundError: Unknown collection or item
        """
        resource_type = self._resource_type(collection)
        kind = RESOURCE_KINDS[resource_type]

        item_fixture = kind.item_fixture_key(item_id)
        if self.resolver.loader.exists(item_fixture):
            item = self.resolver.resolve(item_fixture)
        else:
            item = self._find_item(resource_type, item_id)

        if item is None:
            raise ResourceNotFoundError(f"{kind.item_type} not found: {item_id}")

        item = dict(item)
        if not item.get("links"):
            item["links"] = [{
                "rel": "self",
                "type": "application/json",
                "href": build_csapi_url(resource_type, api_root, item_id)
            }]
        return item

    def _find_item(self, resource_type: ResourceType, item_id: str) -> Optional[Dict[str, Any]]:
        kind = RESOURCE_KINDS[resource_type]
        for item in normalize(self.resolver.resolve(kind.fixture_key), kind.plural_key):
            if isinstance(item, dict) and str(item.get("id")) == item_id:
                return item
        return None

    def get_system_events(self, system_id: str, api_root: str) -> Dict[str, Any]:
        """
        Events of one system (/systems/{id}/events).

        Uses the nested fixture when present, otherwise selects events from
        the systemEvents collection whose relatedSystem is the system.

        Raises:
            ResourceNotFoundError: Unknown system
        """
        # 404 for unknown systems before looking at events
        self.get_item(ResourceType.SYSTEMS.value, system_id, api_root)

        systems_kind = RESOURCE_KINDS[ResourceType.SYSTEMS]
        nested_fixture = f"{systems_kind.item_fixture_key(system_id)}_events"
        if self.resolver.loader.exists(nested_fixture):
            events = normalize(self.resolver.resolve(nested_fixture), "events")
        else:
            events = self._events_for_system(system_id)

        return {
            "type": "FeatureCollection",
            "itemType": RESOURCE_KINDS[ResourceType.SYSTEM_EVENTS].item_type,
            "features": events,
            "links": [{
                "rel": "self",
                "type": "application/json",
                "href": build_nested_url(ResourceType.SYSTEMS, system_id, "events", api_root)
            }]
        }

    def _events_for_system(self, system_id: str) -> List[Dict[str, Any]]:
        kind = RESOURCE_KINDS[ResourceType.SYSTEM_EVENTS]
        events = []
        for event in normalize(self.resolver.resolve(kind.fixture_key), kind.plural_key):
            if not isinstance(event, dict):
                continue
            related = (event.get("properties") or {}).get("relatedSystem") or {}
            if isinstance(related, dict) and related.get("id") == system_id:
                events.append(event)
        return events
