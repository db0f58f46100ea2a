# ============================================================================
# MODULE CONTEXT - ADVANCED FILTERING
# ============================================================================
# STATUS: Core - AND-combined filters over normalized records
# PURPOSE: Per-resource filter functions mirroring the CSAPI query parameters
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: filter_systems, filter_deployments, filter_procedures,
#          filter_sampling_features, filter_property_defs, intersection, FilterDataset
# DEPENDENCIES: pydantic (parameter models), util_logger
# PATTERNS: Pure functions; FilterDataset binds them to resolved snapshots
# ============================================================================

"""
Advanced filtering.

Each filter function takes a sequence of normalized records and a parameter
object, and returns a new list holding the records that satisfy every
supplied parameter. Unsupplied parameters match everything, so an empty
parameter object returns the input unchanged (same order, same records).

Parameter objects may be the pydantic models from csapi.models or plain
dicts using either field names or wire names:

    filter_systems(systems, {"procedure": ["proc-001"], "observedProperty": ["prop-001"]})

Relationship semantics:
    parent, baseProperty          single-valued: record value must be one of the given ids
    procedure, foi, system,
    observedProperty,
    controlledProperty, objectType  list-valued: record must contain ALL given ids
    id                              any pattern matches; trailing '*' is a prefix
    q                               case-insensitive substring of name or description
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from .util_logger import LoggerFactory, ComponentType

from .endpoints import ResourceType
from .matchers import match_id, match_list, match_single, match_keyword
from .models import (
    CSAPIRecord,
    FilterParams,
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
)

logger = LoggerFactory.create_logger(ComponentType.FILTER, "AdvancedFiltering")

P = TypeVar("P", bound=FilterParams)
R = TypeVar("R", bound=CSAPIRecord)

ParamsLike = Union[FilterParams, Mapping[str, Any], None]


def _coerce_params(params: ParamsLike, model: Type[P]) -> P:
    if params is None:
        return model()
    if isinstance(params, model):
        return params
    if isinstance(params, FilterParams):
        return model.model_validate(params.model_dump())
    return model.model_validate(dict(params))


# ============================================================================
# FILTER FUNCTIONS
# ============================================================================

def filter_systems(
    systems: Sequence[SystemRecord],
    params: Union[SystemFilterParams, Mapping[str, Any], None] = None
) -> List[SystemRecord]:
    p = _coerce_params(params, SystemFilterParams)
    return [
        s for s in systems
        if match_id(s.id, p.id)
        and match_single(s.parent_id, p.parent)
        and match_list(s.procedure_ids, p.procedure)
        and match_list(s.foi_ids, p.foi)
        and match_list(s.observed_properties, p.observed_property)
        and match_list(s.controlled_properties, p.controlled_property)
        and (match_keyword(s.name, p.q) or match_keyword(s.description, p.q))
    ]


def filter_deployments(
    deployments: Sequence[DeploymentRecord],
    params: Union[DeploymentFilterParams, Mapping[str, Any], None] = None
) -> List[DeploymentRecord]:
    p = _coerce_params(params, DeploymentFilterParams)
    return [
        d for d in deployments
        if match_id(d.id, p.id)
        and match_single(d.parent_id, p.parent)
        and match_list(d.system_ids, p.system)
        and match_list(d.foi_ids, p.foi)
        and match_list(d.observed_properties, p.observed_property)
        and match_list(d.controlled_properties, p.controlled_property)
    ]


def filter_procedures(
    procedures: Sequence[ProcedureRecord],
    params: Union[ProcedureFilterParams, Mapping[str, Any], None] = None
) -> List[ProcedureRecord]:
    p = _coerce_params(params, ProcedureFilterParams)
    return [
        pr for pr in procedures
        if match_id(pr.id, p.id)
        and match_list(pr.observed_properties, p.observed_property)
        and match_list(pr.controlled_properties, p.controlled_property)
    ]


def filter_sampling_features(
    sampling_features: Sequence[SamplingFeatureRecord],
    params: Union[SamplingFeatureFilterParams, Mapping[str, Any], None] = None
) -> List[SamplingFeatureRecord]:
    p = _coerce_params(params, SamplingFeatureFilterParams)
    return [
        sf for sf in sampling_features
        if match_id(sf.id, p.id)
        and match_list(sf.foi_ids, p.foi)
        and match_list(sf.observed_properties, p.observed_property)
        and match_list(sf.controlled_properties, p.controlled_property)
    ]


def filter_property_defs(
    property_defs: Sequence[PropertyDefRecord],
    params: Union[PropertyDefFilterParams, Mapping[str, Any], None] = None
) -> List[PropertyDefRecord]:
    p = _coerce_params(params, PropertyDefFilterParams)
    return [
        pd for pd in property_defs
        if match_id(pd.id, p.id)
        and match_single(pd.base_property, p.base_property)
        and match_list(pd.object_types, p.object_type)
    ]


def intersection(a: Sequence[R], b: Sequence[CSAPIRecord]) -> List[R]:
    """Records of a whose id also appears in b (order of a)."""
    ids = {x.id for x in b}
    return [x for x in a if x.id in ids]


# Filter function and parameter model per filterable resource type
FILTERS: Dict[ResourceType, tuple] = {
    ResourceType.SYSTEMS: (filter_systems, SystemFilterParams),
    ResourceType.DEPLOYMENTS: (filter_deployments, DeploymentFilterParams),
    ResourceType.PROCEDURES: (filter_procedures, ProcedureFilterParams),
    ResourceType.SAMPLING_FEATURES: (filter_sampling_features, SamplingFeatureFilterParams),
    ResourceType.PROPERTIES: (filter_property_defs, PropertyDefFilterParams),
}


def apply_filter(
    resource_type: ResourceType,
    records: Sequence[CSAPIRecord],
    params: ParamsLike = None
) -> List[CSAPIRecord]:
    """
    Dispatch to the filter function of a resource type.

    Raises:
        ValueError: If the resource type is not filterable
    """
    if resource_type not in FILTERS:
        raise ValueError(f"Resource type is not filterable: {resource_type.value}")
    filter_fn, _ = FILTERS[resource_type]
    return filter_fn(records, params)


# ============================================================================
# DATASET - filter functions bound to resolved snapshots
# ============================================================================

class FilterDataset:
    """
    Normalized snapshots of the five filterable collections.

    Snapshots are resolved lazily through a DataResolver (fixture, live or
    client mode) and kept until refresh() is called.

    Usage:
        dataset = FilterDataset(DataResolver())
        dataset.filter_systems({"q": "weather"})
    """

    def __init__(self, resolver):
        """
        Args:
            resolver: csapi.resolver.DataResolver (or anything with resolve_records)
        """
        self.resolver = resolver
        self._snapshots: Dict[ResourceType, List[CSAPIRecord]] = {}

    def records(self, resource_type: ResourceType) -> List[CSAPIRecord]:
        """Snapshot for a resource type, resolving it on first use."""
        if resource_type not in self._snapshots:
            self._snapshots[resource_type] = self.resolver.resolve_records(resource_type)
            logger.debug(
                f"Loaded {len(self._snapshots[resource_type])} {resource_type.value} records"
            )
        return list(self._snapshots[resource_type])

    def refresh(self, resource_type: Optional[ResourceType] = None) -> None:
        """Drop one snapshot (or all) so the next access resolves again."""
        if resource_type is None:
            self._snapshots.clear()
        else:
            self._snapshots.pop(resource_type, None)

    @property
    def systems(self) -> List[SystemRecord]:
        return self.records(ResourceType.SYSTEMS)

    @property
    def deployments(self) -> List[DeploymentRecord]:
        return self.records(ResourceType.DEPLOYMENTS)

    @property
    def procedures(self) -> List[ProcedureRecord]:
        return self.records(ResourceType.PROCEDURES)

    @property
    def sampling_features(self) -> List[SamplingFeatureRecord]:
        return self.records(ResourceType.SAMPLING_FEATURES)

    @property
    def property_defs(self) -> List[PropertyDefRecord]:
        return self.records(ResourceType.PROPERTIES)

    def filter_systems(self, params: ParamsLike = None) -> List[SystemRecord]:
        return filter_systems(self.systems, params)

    def filter_deployments(self, params: ParamsLike = None) -> List[DeploymentRecord]:
        return filter_deployments(self.deployments, params)

    def filter_procedures(self, params: ParamsLike = None) -> List[ProcedureRecord]:
        return filter_procedures(self.procedures, params)

    def filter_sampling_features(self, params: ParamsLike = None) -> List[SamplingFeatureRecord]:
        return filter_sampling_features(self.sampling_features, params)

    def filter_property_defs(self, params: ParamsLike = None) -> List[PropertyDefRecord]:
        return filter_property_defs(self.property_defs, params)
