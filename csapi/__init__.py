# ============================================================================
# MODULE CONTEXT - CSAPI CLIENT PACKAGE
# ============================================================================
# STATUS: Standalone Module - OGC API Connected Systems client
# PURPOSE: Canonical URLs, hybrid data resolution, normalization and filtering
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: see __all__
# DEPENDENCIES: httpx, pydantic, pydantic-settings
# ENTRY_POINTS: from csapi import create_client, DataResolver, filter_systems
# ============================================================================

"""
OGC API - Connected Systems client.

Architecture:
    csapi/
    ├── endpoints.py    # Canonical endpoint registry and URL builders
    ├── models.py       # Records, filter parameters, response models
    ├── normalizer.py   # Raw JSON -> typed records
    ├── matchers.py     # Predicate primitives
    ├── filtering.py    # Per-resource AND filters, intersection, FilterDataset
    ├── fixtures.py     # Fixture loader with explicit cache
    ├── resolver.py     # Fixture / live / client resolution
    ├── client.py       # Generic resource client, SystemsClient
    ├── validation.py   # Response shape checks
    └── exceptions.py   # Error taxonomy
"""

from .endpoints import (
    ResourceType,
    CANONICAL_ENDPOINTS,
    EXTENDED_ENDPOINTS,
    NESTED_PATHS,
    build_csapi_url,
    build_nested_url,
    all_csapi_collections,
    all_csapi_urls,
    find_missing_endpoints,
)
from .exceptions import (
    CSAPIError,
    FixtureNotFoundError,
    ResourceNotFoundError,
    CSAPIRequestError,
    CSAPITimeoutError,
    CSAPIResponseError,
)
from .models import (
    SystemRecord,
    DeploymentRecord,
    ProcedureRecord,
    SamplingFeatureRecord,
    PropertyDefRecord,
    SystemFilterParams,
    DeploymentFilterParams,
    ProcedureFilterParams,
    SamplingFeatureFilterParams,
    PropertyDefFilterParams,
    CSAPIFeatureCollection,
    CSAPIResourceCollection,
    CSAPIResource,
    CSAPILandingPage,
    CSAPIConformance,
)
from .normalizer import normalize, normalize_records
from .matchers import match_id, match_list, match_single, match_keyword, geometry_filter_placeholder
from .filtering import (
    filter_systems,
    filter_deployments,
    filter_procedures,
    filter_sampling_features,
    filter_property_defs,
    intersection,
    apply_filter,
    FilterDataset,
)
from .fixtures import FixtureCache, FixtureLoader
from .client import ResourceKind, RESOURCE_KINDS, ResourceClient, SystemsClient, create_client, CSAPIClients
from .resolver import ResolutionMode, DataResolver

__version__ = "1.0.0"
__all__ = [
    "ResourceType",
    "CANONICAL_ENDPOINTS",
    "EXTENDED_ENDPOINTS",
    "NESTED_PATHS",
    "build_csapi_url",
    "build_nested_url",
    "all_csapi_collections",
    "all_csapi_urls",
    "find_missing_endpoints",
    "CSAPIError",
    "FixtureNotFoundError",
    "ResourceNotFoundError",
    "CSAPIRequestError",
    "CSAPITimeoutError",
    "CSAPIResponseError",
    "SystemRecord",
    "DeploymentRecord",
    "ProcedureRecord",
    "SamplingFeatureRecord",
    "PropertyDefRecord",
    "SystemFilterParams",
    "DeploymentFilterParams",
    "ProcedureFilterParams",
    "SamplingFeatureFilterParams",
    "PropertyDefFilterParams",
    "CSAPIFeatureCollection",
    "CSAPIResourceCollection",
    "CSAPIResource",
    "CSAPILandingPage",
    "CSAPIConformance",
    "normalize",
    "normalize_records",
    "match_id",
    "match_list",
    "match_single",
    "match_keyword",
    "geometry_filter_placeholder",
    "filter_systems",
    "filter_deployments",
    "filter_procedures",
    "filter_sampling_features",
    "filter_property_defs",
    "intersection",
    "apply_filter",
    "FilterDataset",
    "FixtureCache",
    "FixtureLoader",
    "ResourceKind",
    "RESOURCE_KINDS",
    "ResourceClient",
    "SystemsClient",
    "create_client",
    "CSAPIClients",
    "ResolutionMode",
    "DataResolver",
]
