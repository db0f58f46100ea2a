"""
Response shape validation tests.
"""

import pytest

from csapi.exceptions import CSAPIResponseError
from csapi.models import CSAPIFeatureCollection, CSAPIResourceCollection
from csapi.validation import (
    is_feature_collection,
    is_resource_collection,
    validate_collection,
    parse_collection,
    parse_resource,
    matches_canonical_url,
    extract_parameters,
)


class TestCollectionShapes:
    def test_feature_collection(self):
        assert is_feature_collection({"type": "FeatureCollection", "features": []})

    def test_feature_collection_item_type(self):
        data = {"type": "FeatureCollection", "itemType": "System", "features": []}
        assert is_feature_collection(data, "System")
        assert not is_feature_collection(data, "Deployment")

    def test_not_feature_collection(self):
        assert not is_feature_collection({"type": "Collection", "members": []})
        assert not is_feature_collection([])

    def test_resource_collection(self):
        assert is_resource_collection({"type": "Collection", "members": []})
        assert not is_resource_collection({"members": []})


class TestValidateCollection:
    def test_accepts_feature_collection(self):
        validate_collection({"type": "FeatureCollection", "features": []})

    @pytest.mark.parametrize("data", [
        [],
        {"type": "Feature"},
        {"type": "FeatureCollection"},
        {"type": "FeatureCollection", "features": {}},
    ])
    def test_rejects(self, data):
        with pytest.raises(CSAPIResponseError):
            validate_collection(data)

    def test_item_type_mismatch(self):
        with pytest.raises(CSAPIResponseError):
            validate_collection({"type": "FeatureCollection", "itemType": "System", "features": []}, "Procedure")


class TestParse:
    def test_feature_collection(self):
        parsed = parse_collection({"type": "FeatureCollection", "features": [{"id": "a"}], "numberMatched": 1})
        assert isinstance(parsed, CSAPIFeatureCollection)
        assert parsed.numberMatched == 1

    def test_members_without_type(self):
        parsed = parse_collection({"members": [{"id": "p"}]})
        assert isinstance(parsed, CSAPIResourceCollection)
        assert parsed.items == [{"id": "p"}]

    def test_extra_fields_kept(self):
        parsed = parse_collection({"type": "FeatureCollection", "features": [], "timeStamp": "now"})
        assert parsed.model_dump()["timeStamp"] == "now"

    def test_resource_numeric_id(self):
        assert parse_resource({"id": 12}).id == "12"

    def test_resource_link_map(self):
        resource = parse_resource({
            "id": "s",
            "links": [
                {"rel": "self", "href": "https://h/systems/s"},
                {"rel": "self", "href": "https://h/other"},
                {"href": "https://h/no-rel"},
            ]
        })
        assert resource.link_map() == {"self": "https://h/systems/s"}

    def test_resource_without_id(self):
        with pytest.raises(CSAPIResponseError):
            parse_resource({"type": "Feature"})

    def test_resource_not_object(self):
        with pytest.raises(CSAPIResponseError):
            parse_resource([{"id": "a"}])


class TestCanonicalUrl:
    def test_item_url(self):
        assert matches_canonical_url("https://h/systems/sys-1", "systems")

    def test_collection_url(self):
        assert matches_canonical_url("https://h/systems", "systems", with_id=False)
        assert not matches_canonical_url("https://h/systems", "systems")

    def test_nested_url_is_not_canonical_item(self):
        assert not matches_canonical_url("https://h/systems/sys-1/events", "systems")

    def test_unknown_collection(self):
        assert not matches_canonical_url("https://h/widgets/1", "widgets")


class TestHelpers:
    def test_extract_parameters(self):
        block = {"heading": {"type": "Quantity"}, "speed": {"type": "Quantity"}}
        assert extract_parameters(block) == [{"type": "Quantity"}, {"type": "Quantity"}]

    @pytest.mark.parametrize("block", [None, {}])
    def test_extract_parameters_empty(self, block):
        assert extract_parameters(block) == []
