# ============================================================================
# MODULE CONTEXT - CANONICAL ENDPOINT REGISTRY
# ============================================================================
# STATUS: Core - URL construction for every CSAPI collection
# PURPOSE: Single source of truth for canonical collection names and URL shapes
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ResourceType, CANONICAL_ENDPOINTS, EXTENDED_ENDPOINTS, NESTED_PATHS,
#          build_csapi_url, build_nested_url, get_*_url, all_csapi_collections,
#          all_csapi_urls, find_missing_endpoints
# DEPENDENCIES: urllib.parse, config
# SOURCE: OGC 23-002 §7.4 canonical endpoints
# PATTERNS: Pure string construction, no I/O
# ============================================================================

"""
Canonical Endpoint Registry

Every CSAPI collection has exactly one canonical URL shape:

    {apiRoot}/{collection}
    {apiRoot}/{collection}/{id}
    {apiRoot}/{collection}/{id}/{subPath}     (nested, e.g. /systems/{id}/events)

The same list is used to build request URLs and to check that a landing page
advertises every canonical endpoint.

Usage:
    from csapi.endpoints import get_systems_url, build_nested_url

    get_systems_url("https://h")                 # https://h/systems
    get_systems_url("https://h", "sys-1")        # https://h/systems/sys-1
    build_nested_url("systems", "sys-1", "events", "https://h")
"""

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from .config import get_csapi_config


class ResourceType(str, Enum):
    """CSAPI collections; values are the canonical path segments."""
    SYSTEMS = "systems"
    DEPLOYMENTS = "deployments"
    PROCEDURES = "procedures"
    SAMPLING_FEATURES = "samplingFeatures"
    PROPERTIES = "properties"
    DATASTREAMS = "datastreams"
    OBSERVATIONS = "observations"
    CONTROL_STREAMS = "controlStreams"
    COMMANDS = "commands"
    FEASIBILITY = "feasibility"
    SYSTEM_EVENTS = "systemEvents"
    SYSTEM_HISTORY = "systemHistory"


# Part 1 + Part 2 canonical endpoints advertised by a conformant landing page
CANONICAL_ENDPOINTS: Tuple[str, ...] = (
    "systems",
    "deployments",
    "procedures",
    "samplingFeatures",
    "properties",
    "datastreams",
    "observations",
    "controlStreams",
    "commands",
    "feasibility",
    "systemEvents",
)

EXTENDED_ENDPOINTS: Tuple[str, ...] = CANONICAL_ENDPOINTS + ("systemHistory",)

NESTED_PATHS: Tuple[str, ...] = (
    "events",
    "datastreams",
    "observations",
    "samplingFeatures",
    "history",
    "status",
    "result",
    "schema",
)


# ============================================================================
# CORE BUILDERS
# ============================================================================

def _api_root(api_root: Optional[str]) -> str:
    root = api_root if api_root else get_csapi_config().api_root
    return root.rstrip("/")


def build_csapi_url(
    collection: Union[str, ResourceType],
    api_root: Optional[str] = None,
    resource_id: Optional[str] = None
) -> str:
    """
    Build a canonical collection or item URL.

    Args:
        collection: Canonical collection name
        api_root: API root; configured CSAPI_API_ROOT when omitted
        resource_id: Optional item id (URL-encoded into one path segment)

    Returns:
        Canonical URL

    Raises:
        ValueError: If the collection is not a canonical endpoint
    """
    name = collection.value if isinstance(collection, ResourceType) else collection
    if name not in EXTENDED_ENDPOINTS:
        raise ValueError(f"Unknown CSAPI collection: {name}")

    url = f"{_api_root(api_root)}/{name}"
    if resource_id:
        url = f"{url}/{quote(str(resource_id), safe='')}"
    return url


def build_nested_url(
    parent_collection: Union[str, ResourceType],
    parent_id: str,
    sub_path: str,
    api_root: Optional[str] = None
) -> str:
    """
    Build a URL nested under a parent resource, e.g. /systems/{id}/events.

    Raises:
        ValueError: If the parent collection or sub-path is unknown, or
            parent_id is empty
    """
    if sub_path not in NESTED_PATHS:
        raise ValueError(f"Unknown nested path: {sub_path}")
    if not parent_id:
        raise ValueError("parent_id is required for nested URLs")
    return f"{build_csapi_url(parent_collection, api_root, parent_id)}/{sub_path}"


# ============================================================================
# PER-COLLECTION BUILDERS
# ============================================================================

def get_systems_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.SYSTEMS, api_root, resource_id)


def get_deployments_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.DEPLOYMENTS, api_root, resource_id)


def get_procedures_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.PROCEDURES, api_root, resource_id)


def get_sampling_features_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.SAMPLING_FEATURES, api_root, resource_id)


def get_properties_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.PROPERTIES, api_root, resource_id)


def get_datastreams_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.DATASTREAMS, api_root, resource_id)


def get_datastream_by_id_url(api_root: Optional[str], datastream_id: str) -> str:
    if not datastream_id:
        raise ValueError("datastream_id is required")
    return build_csapi_url(ResourceType.DATASTREAMS, api_root, datastream_id)


def get_observations_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.OBSERVATIONS, api_root, resource_id)


def get_control_streams_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.CONTROL_STREAMS, api_root, resource_id)


def get_commands_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.COMMANDS, api_root, resource_id)


def get_feasibility_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.FEASIBILITY, api_root, resource_id)


def get_system_events_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.SYSTEM_EVENTS, api_root, resource_id)


def get_system_history_url(api_root: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    return build_csapi_url(ResourceType.SYSTEM_HISTORY, api_root, resource_id)


def get_system_events_for_system_url(api_root: Optional[str], system_id: str) -> str:
    return build_nested_url(ResourceType.SYSTEMS, system_id, "events", api_root)


# ============================================================================
# AGGREGATE HELPERS
# ============================================================================

def all_csapi_collections() -> List[str]:
    """Canonical collection names (copy)."""
    return list(CANONICAL_ENDPOINTS)


def all_csapi_urls(api_root: Optional[str] = None) -> List[str]:
    """Canonical collection URLs under one API root."""
    return [build_csapi_url(name, api_root) for name in CANONICAL_ENDPOINTS]


def _link_field(link: Any, field: str) -> str:
    if isinstance(link, Mapping):
        value = link.get(field)
    else:
        value = getattr(link, field, None)
    return value or ""


def find_missing_endpoints(
    links: Iterable[Any],
    endpoints: Sequence[str] = CANONICAL_ENDPOINTS
) -> List[str]:
    """
    Canonical endpoints a landing page fails to advertise.

    An endpoint counts as advertised when a link href contains '/{name}'
    or a link rel contains the name (case-insensitive).

    Args:
        links: Landing page links (dicts or CSAPILink models)
        endpoints: Names to check

    Returns:
        Missing names in registry order (empty when conformant)
    """
    links = list(links)
    hrefs = [_link_field(link, "href") for link in links]
    rels = [_link_field(link, "rel").lower() for link in links]

    missing = []
    for name in endpoints:
        in_href = any(f"/{name}" in href for href in hrefs)
        in_rel = any(name.lower() in rel for rel in rels)
        if not (in_href or in_rel):
            missing.append(name)
    return missing
