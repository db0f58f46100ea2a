"""
Response shape checks.

Minimal validation of CSAPI responses: is this a FeatureCollection, a
non-feature resource Collection, a single item, a canonical URL? Used by the
clients to turn raw JSON into typed models, and by conformance checks.
"""

import re
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from .endpoints import EXTENDED_ENDPOINTS
from .exceptions import CSAPIResponseError
from .models import CSAPIFeatureCollection, CSAPIResourceCollection, CSAPIResource


def is_feature_collection(data: Any, item_type: Optional[str] = None) -> bool:
    """True for {"type": "FeatureCollection", "features": [...]} (and matching itemType)."""
    if not isinstance(data, Mapping):
        return False
    if data.get("type") != "FeatureCollection" or not isinstance(data.get("features"), list):
        return False
    if item_type is not None and data.get("itemType") != item_type:
        return False
    return True


def is_resource_collection(data: Any) -> bool:
    """True for {"type": "Collection", "members": [...]}."""
    if not isinstance(data, Mapping):
        return False
    return data.get("type") == "Collection" and isinstance(data.get("members"), list)


def validate_collection(data: Any, item_type: Optional[str] = None) -> None:
    """
    Raise unless data is a feature or resource collection.

    Raises:
        CSAPIResponseError: With the reason the shape was rejected
    """
    if is_resource_collection(data):
        if item_type is not None and data.get("itemType") not in (None, item_type):
            raise CSAPIResponseError(
                f"Expected itemType {item_type!r}, got {data.get('itemType')!r}"
            )
        return
    if not isinstance(data, Mapping):
        raise CSAPIResponseError(f"Expected a JSON object, got {type(data).__name__}")
    if data.get("type") != "FeatureCollection":
        raise CSAPIResponseError(f"Expected type 'FeatureCollection', got {data.get('type')!r}")
    if not isinstance(data.get("features"), list):
        raise CSAPIResponseError("FeatureCollection has no 'features' array")
    if item_type is not None and data.get("itemType") != item_type:
        raise CSAPIResponseError(
            f"Expected itemType {item_type!r}, got {data.get('itemType')!r}"
        )


def parse_collection(data: Any) -> Union[CSAPIFeatureCollection, CSAPIResourceCollection]:
    """
    Parse a collection response into its model.

    A response with a 'members' array is a resource collection even when the
    server leaves out "type": "Collection".

    Raises:
        CSAPIResponseError: If the shape is not a collection
    """
    try:
        if isinstance(data, Mapping) and (
            data.get("type") == "Collection" or isinstance(data.get("members"), list)
        ):
            return CSAPIResourceCollection.model_validate(dict(data, type="Collection"))
        validate_collection(data)
        return CSAPIFeatureCollection.model_validate(data)
    except ValidationError as e:
        raise CSAPIResponseError(f"Invalid collection response: {e}") from e


def parse_resource(data: Any) -> CSAPIResource:
    """
    Parse a single item response.

    Raises:
        CSAPIResponseError: If the body is not an object with an id
    """
    if not isinstance(data, Mapping):
        raise CSAPIResponseError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        return CSAPIResource.model_validate(data)
    except ValidationError as e:
        raise CSAPIResponseError(f"Invalid resource response: {e}") from e


def matches_canonical_url(url: str, collection: str, with_id: bool = True) -> bool:
    """
    True if url has the canonical shape {root}/{collection}[/{id}].

    Example:
        matches_canonical_url("https://h/systems/sys-1", "systems")  # True
    """
    if collection not in EXTENDED_ENDPOINTS:
        return False
    tail = r"/[^/]+" if with_id else ""
    pattern = rf"^https?://.+/{re.escape(collection)}{tail}$"
    return re.match(pattern, url) is not None


def extract_parameters(parameter_block: Optional[Mapping[str, Any]]) -> List[Any]:
    """
    Parameter definitions of a parameter block (its values, in order).

    None or an empty block gives [].
    """
    if not parameter_block:
        return []
    return list(parameter_block.values())
