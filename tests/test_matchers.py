"""
Predicate matcher tests.

Empty constraints match everything; missing record values never match a
non-empty constraint.
"""

import pytest

from csapi.matchers import (
    match_id,
    match_list,
    match_single,
    match_keyword,
    geometry_filter_placeholder,
)


class TestMatchId:
    def test_exact_id_matches(self):
        assert match_id("sys-001", ["sys-001"]) is True

    def test_other_id_does_not_match(self):
        assert match_id("sys-001", ["sys-002"]) is False

    def test_wildcard_prefix(self):
        assert match_id("sys-002", ["sys-*"]) is True

    def test_wildcard_prefix_miss(self):
        assert match_id("abc", ["sys-*"]) is False

    def test_any_pattern_matches(self):
        assert match_id("dep-3", ["sys-*", "dep-3"]) is True

    @pytest.mark.parametrize("patterns", [None, []])
    def test_empty_patterns_match_all(self, patterns):
        assert match_id("anything", patterns) is True

    def test_lone_star_matches_everything(self):
        assert match_id("x", ["*"]) is True

    def test_star_only_at_end_is_wildcard(self):
        assert match_id("sys-001", ["*-001"]) is False


class TestMatchList:
    def test_subset_matches(self):
        assert match_list(["a", "b"], ["a"]) is True

    def test_missing_required_value(self):
        assert match_list(["a"], ["a", "b"]) is False

    def test_missing_values(self):
        assert match_list(None, ["a"]) is False

    def test_empty_required_matches(self):
        assert match_list(["a"], []) is True

    def test_none_required_matches_missing_values(self):
        assert match_list(None, None) is True

    def test_empty_values_with_requirement(self):
        assert match_list([], ["a"]) is False


class TestMatchSingle:
    def test_member_of_required(self):
        assert match_single("x", ["x", "y"]) is True

    def test_missing_value(self):
        assert match_single(None, ["x"]) is False

    def test_empty_required_matches(self):
        assert match_single("x", []) is True

    def test_not_member(self):
        assert match_single("z", ["x", "y"]) is False


class TestMatchKeyword:
    def test_case_insensitive_substring(self):
        assert match_keyword("Weather Station", "weather") is True

    def test_missing_text(self):
        assert match_keyword(None, "weather") is False

    def test_missing_query_matches(self):
        assert match_keyword("x", None) is True

    def test_no_substring(self):
        assert match_keyword("River Gauge", "wind") is False


class TestGeometryPlaceholder:
    def test_returns_items_unchanged(self):
        items = [{"id": "a"}, {"id": "b"}]
        assert geometry_filter_placeholder(items, "POLYGON((0 0,1 0,1 1,0 0))") == items

    def test_returns_new_list(self):
        items = [{"id": "a"}]
        result = geometry_filter_placeholder(items)
        assert result is not items
