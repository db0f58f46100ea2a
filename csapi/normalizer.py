"""
Record normalizer.

Turns the heterogeneous JSON shapes CSAPI servers and fixtures produce into
flat lists of typed records:

    [ ... ]                              bare list
    {"default": [ ... ]}                 module-style wrapper
    {"systems": [ ... ]}                 keyed by plural name
    {"type": "FeatureCollection", "features": [ ... ]}
    {"type": "Collection", "members": [ ... ]}
    {"anything": [ ... ]}                first list-valued property

Degraded input yields an empty list. Nothing here raises; the data
resolution layer is responsible for noticing and logging empty results.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from .endpoints import ResourceType
from .models import (
    CSAPIRecord,
    SystemRecord,
    DeploymentRecord,
    ProcedureRecord,
    SamplingFeatureRecord,
    PropertyDefRecord,
)

ENVELOPE_KEYS = ("features", "members")


def normalize(raw: Any, plural_key: str) -> List[Any]:
    """
    Extract the item list from a raw JSON value.

    Args:
        raw: Parsed JSON (list, dict or anything else)
        plural_key: Collection name to look for (e.g. "systems")

    Returns:
        The item list (same object when raw already holds one), or []
    """
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, dict):
        return []

    if isinstance(raw.get("default"), list):
        return raw["default"]
    if isinstance(raw.get(plural_key), list):
        return raw[plural_key]
    for key in ENVELOPE_KEYS:
        if isinstance(raw.get(key), list):
            return raw[key]
    for value in raw.values():
        if isinstance(value, list):
            return value
    return []


# ============================================================================
# FIELD COERCION
# ============================================================================

def _as_id(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _as_id_list(value: Any) -> Optional[Tuple[str, ...]]:
    """Tuple of id strings; a bare string becomes a one-element tuple."""
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(v for v in (_as_id(item) for item in value) if v is not None)
    return None


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _properties(feature: Dict[str, Any]) -> Dict[str, Any]:
    props = feature.get("properties")
    return props if isinstance(props, dict) else {}


def _features(items: List[Any]) -> List[Dict[str, Any]]:
    """Dict elements that carry an id."""
    return [f for f in items if isinstance(f, dict) and _as_id(f.get("id")) is not None]


# ============================================================================
# PER-KIND MAPPERS
# ============================================================================

def map_systems(items: List[Any]) -> List[SystemRecord]:
    records = []
    for f in _features(items):
        props = _properties(f)
        records.append(SystemRecord(
            id=_as_id(f["id"]),
            name=_as_text(props.get("name")),
            description=_as_text(props.get("description")),
            parent_id=_as_id(props.get("parentId")),
            procedure_ids=_as_id_list(props.get("procedureIds")),
            foi_ids=_as_id_list(props.get("foiIds")),
            observed_properties=_as_id_list(props.get("observedProperties")),
            controlled_properties=_as_id_list(props.get("controlledProperties")),
        ))
    return records


def map_deployments(items: List[Any]) -> List[DeploymentRecord]:
    records = []
    for f in _features(items):
        props = _properties(f)
        records.append(DeploymentRecord(
            id=_as_id(f["id"]),
            parent_id=_as_id(props.get("parentId")),
            system_ids=_as_id_list(props.get("systemIds")),
            foi_ids=_as_id_list(props.get("foiIds")),
            observed_properties=_as_id_list(props.get("observedProperties")),
            controlled_properties=_as_id_list(props.get("controlledProperties")),
        ))
    return records


def map_procedures(items: List[Any]) -> List[ProcedureRecord]:
    records = []
    for f in _features(items):
        props = _properties(f)
        records.append(ProcedureRecord(
            id=_as_id(f["id"]),
            observed_properties=_as_id_list(props.get("observedProperties")),
            controlled_properties=_as_id_list(props.get("controlledProperties")),
        ))
    return records


def map_sampling_features(items: List[Any]) -> List[SamplingFeatureRecord]:
    records = []
    for f in _features(items):
        props = _properties(f)
        records.append(SamplingFeatureRecord(
            id=_as_id(f["id"]),
            foi_ids=_as_id_list(props.get("foiIds")),
            observed_properties=_as_id_list(props.get("observedProperties")),
            controlled_properties=_as_id_list(props.get("controlledProperties")),
        ))
    return records


def map_property_defs(items: List[Any]) -> List[PropertyDefRecord]:
    """Property definitions are plain resources; fields may sit at the top level."""
    records = []
    for f in _features(items):
        props = _properties(f)
        records.append(PropertyDefRecord(
            id=_as_id(f["id"]),
            base_property=_as_id(f.get("baseProperty") or props.get("baseProperty")),
            object_types=_as_id_list(f.get("objectTypes") or props.get("objectTypes")),
        ))
    return records


RecordMapper = Callable[[List[Any]], List[CSAPIRecord]]

# plural key used by normalize() and mapper, per filterable resource type
RECORD_MAPPERS: Dict[ResourceType, tuple] = {
    ResourceType.SYSTEMS: ("systems", map_systems),
    ResourceType.DEPLOYMENTS: ("deployments", map_deployments),
    ResourceType.PROCEDURES: ("procedures", map_procedures),
    ResourceType.SAMPLING_FEATURES: ("samplingFeatures", map_sampling_features),
    ResourceType.PROPERTIES: ("propertyDefs", map_property_defs),
}


def normalize_records(raw: Any, resource_type: ResourceType) -> List[CSAPIRecord]:
    """
    Normalize raw JSON and map it to typed records.

    Raises:
        ValueError: If the resource type has no record shape
    """
    if resource_type not in RECORD_MAPPERS:
        raise ValueError(f"No record mapping for resource type: {resource_type.value}")
    plural_key, mapper = RECORD_MAPPERS[resource_type]
    return mapper(normalize(raw, plural_key))
