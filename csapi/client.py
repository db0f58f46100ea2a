# ============================================================================
# MODULE CONTEXT - CSAPI RESOURCE CLIENTS
# ============================================================================
# STATUS: Client Layer - Read-only access to CSAPI collections and items
# PURPOSE: One generic client parametrized by a resource-kind descriptor
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ResourceKind, RESOURCE_KINDS, ResourceClient, SystemsClient,
#          create_client, CSAPIClients, fetch_json
# DEPENDENCIES: httpx (sync)
# PORTABLE: Yes - api_root from constructor param or CSAPI_API_ROOT
# ============================================================================
"""
CSAPI Resource Clients (SYNC VERSION).

Every CSAPI collection exposes the same read-only pair:

    GET {apiRoot}/{collection}        -> list()
    GET {apiRoot}/{collection}/{id}   -> get(id)

so a single ResourceClient, configured with a ResourceKind descriptor, serves
all of them. SystemsClient adds the nested /systems/{id}/... resources.

When a DataResolver is attached, data comes from whichever mode it is in
(fixture, live, client). Without one, the client fetches over HTTP.

Usage:
    client = create_client(ResourceType.SYSTEMS, api_root="https://h")
    collection = client.list()            # CSAPIFeatureCollection
    system = client.get("sys-001")        # CSAPIResource
    records = client.list_records()       # List[SystemRecord]
    client.close()
"""

from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

import httpx

from .config import get_csapi_config
from .util_logger import LoggerFactory, ComponentType

from .endpoints import ResourceType, build_csapi_url, build_nested_url
from .exceptions import CSAPIRequestError, CSAPITimeoutError, CSAPIResponseError
from .models import CSAPIRecord, CSAPIFeatureCollection, CSAPIResourceCollection, CSAPIResource, SystemRecord
from .normalizer import RECORD_MAPPERS, normalize_records
from .validation import parse_collection, parse_resource

logger = LoggerFactory.create_logger(ComponentType.CLIENT, "ResourceClient")

R = TypeVar("R", bound=CSAPIRecord)

CollectionResponse = Union[CSAPIFeatureCollection, CSAPIResourceCollection]


# ============================================================================
# RESOURCE KIND DESCRIPTORS
# ============================================================================

@dataclass(frozen=True)
class ResourceKind:
    """Static description of one CSAPI collection."""
    resource_type: ResourceType
    item_type: str
    item_fixture_prefix: str

    @property
    def collection(self) -> str:
        return self.resource_type.value

    @property
    def fixture_key(self) -> str:
        """Fixture name of the collection document."""
        return self.resource_type.value

    @property
    def plural_key(self) -> str:
        """Key normalize() looks for in keyed payloads (propertyDefs for /properties)."""
        if self.resource_type in RECORD_MAPPERS:
            return RECORD_MAPPERS[self.resource_type][0]
        return self.collection

    @property
    def filterable(self) -> bool:
        return self.resource_type in RECORD_MAPPERS

    def item_fixture_key(self, resource_id: str) -> str:
        return f"{self.item_fixture_prefix}_{resource_id}"


RESOURCE_KINDS: Dict[ResourceType, ResourceKind] = {
    kind.resource_type: kind for kind in (
        ResourceKind(ResourceType.SYSTEMS, "System", "system"),
        ResourceKind(ResourceType.DEPLOYMENTS, "Deployment", "deployment"),
        ResourceKind(ResourceType.PROCEDURES, "Procedure", "procedure"),
        ResourceKind(ResourceType.SAMPLING_FEATURES, "SamplingFeature", "samplingFeature"),
        ResourceKind(ResourceType.PROPERTIES, "Property", "property"),
        ResourceKind(ResourceType.DATASTREAMS, "Datastream", "datastream"),
        ResourceKind(ResourceType.OBSERVATIONS, "Observation", "observation"),
        ResourceKind(ResourceType.CONTROL_STREAMS, "ControlStream", "controlStream"),
        ResourceKind(ResourceType.COMMANDS, "Command", "command"),
        ResourceKind(ResourceType.FEASIBILITY, "Feasibility", "feasibility"),
        ResourceKind(ResourceType.SYSTEM_EVENTS, "SystemEvent", "systemEvent"),
        ResourceKind(ResourceType.SYSTEM_HISTORY, "SystemHistory", "systemHistory"),
    )
}


# ============================================================================
# HTTP
# ============================================================================

def fetch_json(
    client: httpx.Client,
    url: str,
    params: Optional[Mapping[str, Any]] = None
) -> Any:
    """
    GET a URL and return its parsed JSON body.

    Raises:
        CSAPITimeoutError: Request timed out
        CSAPIRequestError: Transport failure or status >= 400
        CSAPIResponseError: Body is not JSON
    """
    try:
        response = client.get(url, params=params)
    except httpx.TimeoutException as e:
        raise CSAPITimeoutError(f"CSAPI request timed out: {url}", url=url) from e
    except httpx.RequestError as e:
        raise CSAPIRequestError(f"CSAPI request error: {e}", url=url) from e

    if response.status_code >= 400:
        raise CSAPIRequestError(
            f"Fetch failed: {response.status_code} {response.reason_phrase} ({response.text[:200]})",
            url=url,
            status_code=response.status_code
        )

    try:
        return response.json()
    except ValueError as e:
        raise CSAPIResponseError(f"Response from {url} is not JSON") from e


class HTTPClientMixin:
    """Lazily created httpx.Client, closed only when owned."""

    timeout: float
    _client: Optional[httpx.Client]
    _owns_client: bool

    def _init_http(self, http_client: Optional[httpx.Client], timeout: Optional[float]) -> None:
        self.timeout = timeout if timeout is not None else get_csapi_config().timeout_seconds
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"Accept": "application/geo+json, application/json"}
            )
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


# ============================================================================
# GENERIC CLIENT
# ============================================================================

class ResourceClient(HTTPClientMixin, Generic[R]):
    """
    Read-only client for one CSAPI collection.
    """

    def __init__(
        self,
        kind: ResourceKind,
        api_root: Optional[str] = None,
        resolver=None,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            kind: Resource-kind descriptor
            api_root: API root; CSAPI_API_ROOT when omitted
            resolver: Optional DataResolver; direct HTTP when omitted
            http_client: Optional httpx.Client to reuse (not closed by this client)
            timeout: Request timeout in seconds
        """
        self.kind = kind
        self.api_root = (api_root or get_csapi_config().api_root).rstrip("/")
        self.resolver = resolver
        self._init_http(http_client, timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.collection!r}, api_root={self.api_root!r})"

    def collection_url(self) -> str:
        return build_csapi_url(self.kind.resource_type, self.api_root)

    def item_url(self, resource_id: str) -> str:
        return build_csapi_url(self.kind.resource_type, self.api_root, resource_id)

    def fetch(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Direct HTTP GET, bypassing any resolver."""
        logger.debug(f"GET {url}")
        return fetch_json(self._get_client(), url, params)

    def _resolve(self, fixture_name: str, url: str) -> Any:
        if self.resolver is not None:
            return self.resolver.resolve(fixture_name, url)
        return self.fetch(url)

    def list_raw(self) -> Any:
        """Collection document as parsed JSON."""
        return self._resolve(self.kind.fixture_key, self.collection_url())

    def list(self) -> CollectionResponse:
        """
        Retrieve the collection.

        Returns:
            CSAPIFeatureCollection, or CSAPIResourceCollection for
            non-feature resources such as property definitions
        """
        return parse_collection(self.list_raw())

    def get(self, resource_id: str) -> CSAPIResource:
        """
        Retrieve a single item by id (canonical path /{collection}/{id}).

        Raises:
            ValueError: If resource_id is empty
        """
        if not resource_id:
            raise ValueError("resource_id is required")
        data = self._resolve(self.kind.item_fixture_key(resource_id), self.item_url(resource_id))
        return parse_resource(data)

    def list_records(self) -> List[R]:
        """
        Collection normalized into typed records.

        Raises:
            ValueError: If this collection has no record shape
        """
        return normalize_records(self.list_raw(), self.kind.resource_type)


class SystemsClient(ResourceClient[SystemRecord]):
    """
    Client for /systems with the nested system resources.
    """

    def __init__(self, api_root: Optional[str] = None, resolver=None,
                 http_client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        super().__init__(RESOURCE_KINDS[ResourceType.SYSTEMS], api_root, resolver, http_client, timeout)

    def _list_nested(self, system_id: str, sub_path: str) -> CollectionResponse:
        url = build_nested_url(ResourceType.SYSTEMS, system_id, sub_path, self.api_root)
        fixture_name = f"{self.kind.item_fixture_key(system_id)}_{sub_path}"
        return parse_collection(self._resolve(fixture_name, url))

    def list_events(self, system_id: str) -> CollectionResponse:
        """GET /systems/{id}/events"""
        return self._list_nested(system_id, "events")

    def list_datastreams(self, system_id: str) -> CollectionResponse:
        """GET /systems/{id}/datastreams"""
        return self._list_nested(system_id, "datastreams")

    def list_sampling_features(self, system_id: str) -> CollectionResponse:
        """GET /systems/{id}/samplingFeatures"""
        return self._list_nested(system_id, "samplingFeatures")

    def list_history(self, system_id: str) -> CollectionResponse:
        """GET /systems/{id}/history"""
        return self._list_nested(system_id, "history")

    def get_linked_resources(self, system_id: str) -> Dict[str, str]:
        """
        rel -> href for the links of a system.

        Example:
            client.get_linked_resources("sys-001")["events"]
            # "https://h/systems/sys-001/events"
        """
        return self.get(system_id).link_map()


def create_client(
    resource_type: Union[ResourceType, str],
    api_root: Optional[str] = None,
    resolver=None,
    http_client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None
) -> ResourceClient:
    """
    Client factory for any CSAPI collection.

    Raises:
        ValueError: If the resource type is unknown
    """
    resource_type = ResourceType(resource_type)
    if resource_type == ResourceType.SYSTEMS:
        return SystemsClient(api_root, resolver, http_client, timeout)
    return ResourceClient(RESOURCE_KINDS[resource_type], api_root, resolver, http_client, timeout)


# Client factory per resource type
CSAPIClients = {
    resource_type: partial(create_client, resource_type)
    for resource_type in ResourceType
}
