# ============================================================================
# MODULE CONTEXT - CSAPI MODELS
# ============================================================================
# STATUS: Standalone Models - Connected Systems records, filters, responses
# PURPOSE: Normalized records, filter parameter objects and wire response models
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SystemRecord, DeploymentRecord, ProcedureRecord, SamplingFeatureRecord,
#          PropertyDefRecord, SystemFilterParams, DeploymentFilterParams,
#          ProcedureFilterParams, SamplingFeatureFilterParams, PropertyDefFilterParams,
#          CSAPILink, CSAPIResource, CSAPIFeatureCollection, CSAPIResourceCollection,
#          CSAPILandingPage
# PYDANTIC_MODELS: All classes in this file
# DEPENDENCIES: pydantic, typing
# SOURCE: OGC API - Connected Systems Part 1 (23-001) and Part 2 (23-002)
# VALIDATION: Pydantic v2 validation
# PATTERNS: Data Transfer Objects (DTOs), immutable value records
# ============================================================================

"""
OGC API - Connected Systems Pydantic Models

Three groups of models:

Records:
    Flat, immutable snapshots of a resource's id and relationship fields,
    produced by the normalizer and consumed by the filter functions.

Filter parameters:
    One model per filterable resource kind. Field aliases follow the wire
    query parameter names (observedProperty, baseProperty, ...). Empty or
    missing fields mean "no constraint".

Wire models:
    Minimal-validation shapes of CSAPI responses. Extra fields are kept.

References:
- OGC API - Connected Systems Part 1: https://docs.ogc.org/is/23-001/23-001.html
- OGC API - Connected Systems Part 2: https://docs.ogc.org/is/23-002/23-002.html
"""

from typing import List, Dict, Any, Optional, Literal, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# NORMALIZED RECORDS
# ============================================================================

class CSAPIRecord(BaseModel):
    """Base for normalized records. Every record has an id."""
    model_config = ConfigDict(frozen=True)

    id: str


class SystemRecord(CSAPIRecord):
    """System with its parent, procedure, FOI and property references."""
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    procedure_ids: Optional[Tuple[str, ...]] = None
    foi_ids: Optional[Tuple[str, ...]] = None
    observed_properties: Optional[Tuple[str, ...]] = None
    controlled_properties: Optional[Tuple[str, ...]] = None


class DeploymentRecord(CSAPIRecord):
    """Deployment of one or more systems."""
    parent_id: Optional[str] = None
    system_ids: Optional[Tuple[str, ...]] = None
    foi_ids: Optional[Tuple[str, ...]] = None
    observed_properties: Optional[Tuple[str, ...]] = None
    controlled_properties: Optional[Tuple[str, ...]] = None


class ProcedureRecord(CSAPIRecord):
    """Procedure (datasheet / method) definition."""
    observed_properties: Optional[Tuple[str, ...]] = None
    controlled_properties: Optional[Tuple[str, ...]] = None


class SamplingFeatureRecord(CSAPIRecord):
    """Sampling feature attached to a feature of interest."""
    foi_ids: Optional[Tuple[str, ...]] = None
    observed_properties: Optional[Tuple[str, ...]] = None
    controlled_properties: Optional[Tuple[str, ...]] = None


class PropertyDefRecord(CSAPIRecord):
    """Property definition, optionally derived from a base property."""
    base_property: Optional[str] = None
    object_types: Optional[Tuple[str, ...]] = None


# ============================================================================
# FILTER PARAMETERS
# ============================================================================

class FilterParams(BaseModel):
    """
    Base filter parameter object.

    List fields accept either a list or a comma-separated string, so wire
    query strings (?id=sys-*,dep-1) and Python callers share one model.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[List[str]] = Field(
        default=None,
        description="Resource ids; a trailing '*' makes a prefix pattern"
    )

    @field_validator("*", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Any, info) -> Any:
        """Split comma-separated strings for list-valued fields."""
        if info.field_name == "q" or not isinstance(v, str):
            return v
        return [part.strip() for part in v.split(",") if part.strip()]

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "FilterParams":
        """
        Build parameters from an HTTP query string mapping.

        Only known parameter names (wire aliases or field names) are picked up;
        paging or format parameters are ignored.

        Args:
            params: Query parameters (e.g. func.HttpRequest.params)

        Returns:
            Parameter model of the calling class
        """
        values: Dict[str, Any] = {}
        for field_name, field_info in cls.model_fields.items():
            for key in (field_info.alias, field_name):
                if key and key in params and params[key] not in (None, ""):
                    values[field_name] = params[key]
                    break
        return cls.model_validate(values)

    def is_empty(self) -> bool:
        """True when no field constrains the result."""
        return not any(self.model_dump().values())


class SystemFilterParams(FilterParams):
    """Query parameters for /systems."""
    parent: Optional[List[str]] = None
    procedure: Optional[List[str]] = None
    foi: Optional[List[str]] = None
    observed_property: Optional[List[str]] = Field(default=None, alias="observedProperty")
    controlled_property: Optional[List[str]] = Field(default=None, alias="controlledProperty")
    q: Optional[str] = Field(default=None, description="Keyword matched against name/description")


class DeploymentFilterParams(FilterParams):
    """Query parameters for /deployments."""
    parent: Optional[List[str]] = None
    system: Optional[List[str]] = None
    foi: Optional[List[str]] = None
    observed_property: Optional[List[str]] = Field(default=None, alias="observedProperty")
    controlled_property: Optional[List[str]] = Field(default=None, alias="controlledProperty")


class ProcedureFilterParams(FilterParams):
    """Query parameters for /procedures."""
    observed_property: Optional[List[str]] = Field(default=None, alias="observedProperty")
    controlled_property: Optional[List[str]] = Field(default=None, alias="controlledProperty")


class SamplingFeatureFilterParams(FilterParams):
    """Query parameters for /samplingFeatures."""
    foi: Optional[List[str]] = None
    observed_property: Optional[List[str]] = Field(default=None, alias="observedProperty")
    controlled_property: Optional[List[str]] = Field(default=None, alias="controlledProperty")


class PropertyDefFilterParams(FilterParams):
    """Query parameters for /properties."""
    base_property: Optional[List[str]] = Field(default=None, alias="baseProperty")
    object_type: Optional[List[str]] = Field(default=None, alias="objectType")


# ============================================================================
# WIRE MODELS
# ============================================================================

class CSAPILink(BaseModel):
    """
    Link object (RFC 8288 Web Linking).
    """
    model_config = ConfigDict(extra="allow")

    href: str = Field(description="URL of the linked resource")
    rel: Optional[str] = Field(default=None, description="Link relation type")
    type: Optional[str] = Field(default=None, description="Media type")
    title: Optional[str] = Field(default=None, description="Human-readable title")


class CSAPIResource(BaseModel):
    """
    Single CSAPI item: a GeoJSON Feature (systems, deployments, ...) or a
    plain resource (property definitions, observations, commands).
    """
    model_config = ConfigDict(extra="allow")

    id: str
    type: Optional[str] = None
    geometry: Optional[Dict[str, Any]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    links: List[CSAPILink] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Numeric ids are served by some implementations."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    def link_map(self) -> Dict[str, str]:
        """rel -> href for links that carry a rel (first occurrence wins)."""
        result: Dict[str, str] = {}
        for link in self.links:
            if link.rel and link.rel not in result:
                result[link.rel] = link.href
        return result


class CSAPIFeatureCollection(BaseModel):
    """
    GeoJSON FeatureCollection response.
    """
    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"] = "FeatureCollection"
    itemType: Optional[str] = Field(default=None, description="Item type (System, Deployment, ...)")
    features: List[Dict[str, Any]] = Field(default_factory=list)
    links: List[CSAPILink] = Field(default_factory=list)
    numberMatched: Optional[int] = None
    numberReturned: Optional[int] = None

    @property
    def items(self) -> List[Dict[str, Any]]:
        """Features of the collection."""
        return self.features


class CSAPIResourceCollection(BaseModel):
    """
    Non-feature resource collection (e.g. property definitions).

    Features semantics apply with 'features' replaced by 'members'.
    """
    model_config = ConfigDict(extra="allow")

    type: Literal["Collection"] = "Collection"
    itemType: Optional[str] = None
    members: List[Dict[str, Any]] = Field(default_factory=list)
    links: List[CSAPILink] = Field(default_factory=list)

    @property
    def items(self) -> List[Dict[str, Any]]:
        """Members of the collection."""
        return self.members


class CSAPILandingPage(BaseModel):
    """
    API landing page; links advertise the canonical endpoints.
    """
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    description: Optional[str] = None
    links: List[CSAPILink] = Field(default_factory=list)


class CSAPIConformance(BaseModel):
    """Conformance declaration."""
    conformsTo: List[str] = Field(default_factory=list)
