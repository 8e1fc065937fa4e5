"""
Tests for filter and sort normalization against entity allow-lists.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from rest_api.repositories import COURSE_FIELDS
from rest_api.repositories.music import SONG_FIELDS
from rest_api.repositories.venue import VENUE_FIELDS
from shared.query.filters import (
    FilterOperator,
    LocalField,
    LogicalOperator,
    NullsPosition,
    RelationField,
    ResolvedCondition,
    ResolvedGroup,
    SortOrder,
    decode_query_value,
    iter_conditions,
    normalize_filter,
    normalize_sort,
    to_snake_case,
)
from shared.utils.exceptions import (
    InvalidFilterValueError,
    InvalidOperatorError,
    UnknownFieldError,
    ValidationError,
)


class TestDecodeQueryValue:

    def test_invalid_json_returned_unchanged(self):
        assert decode_query_value("not json") == "not json"

    def test_valid_json_decoded(self):
        assert decode_query_value('{"field": "level"}') == {"field": "level"}

    def test_non_string_passthrough(self):
        value = {"field": "level"}
        assert decode_query_value(value) is value

    @pytest.mark.parametrize("raw", ["2024", "true", "null", "3.5"])
    def test_json_scalars_stay_literal(self, raw):
        assert decode_query_value(raw) == raw

    def test_quoted_json_string_decoded(self):
        assert decode_query_value('"salsa"') == "salsa"

    def test_json_list_decoded(self):
        assert decode_query_value('["albums", "songs"]') == ["albums", "songs"]


def test_to_snake_case():
    assert to_snake_case("createdAt") == "created_at"
    assert to_snake_case("danceStyleId") == "dance_style_id"
    assert to_snake_case("release_year") == "release_year"


class TestNormalizeFilter:

    def test_none_means_no_filter(self):
        assert normalize_filter(None, COURSE_FIELDS) is None

    def test_unknown_field_is_named(self):
        with pytest.raises(UnknownFieldError) as exc_info:
            normalize_filter({"field": "nonexistentField", "value": 1}, COURSE_FIELDS)
        assert exc_info.value.field == "nonexistentField"
        assert "nonexistentField" in exc_info.value.detail

    def test_camel_case_field_resolves_to_column(self):
        result = normalize_filter({"field": "danceStyleId", "value": "3"}, COURSE_FIELDS)
        assert result == ResolvedCondition(
            LocalField("dance_style_id", result.field.field_type), FilterOperator.EQ, 3
        )

    def test_alias_resolves_to_translation(self):
        result = normalize_filter({"field": "name", "operator": "ilike", "value": "%salsa%"}, COURSE_FIELDS)
        assert isinstance(result.field, RelationField)
        assert result.field.path == "translation.name"
        assert result.field.locale_aware
        assert result.field.model_attribute == "translations"

    def test_relation_field(self):
        result = normalize_filter({"field": "instructor.name", "value": "Maria"}, COURSE_FIELDS)
        assert result.field.relation == "instructor"
        assert result.field.column == "name"
        assert not result.field.locale_aware

    def test_relation_column_outside_allow_list(self):
        with pytest.raises(UnknownFieldError):
            normalize_filter({"field": "instructor.status", "value": "active"}, COURSE_FIELDS)

    def test_operator_not_allowed_for_type(self):
        with pytest.raises(InvalidOperatorError) as exc_info:
            normalize_filter({"field": "slug", "operator": "gt", "value": "a"}, COURSE_FIELDS)
        assert exc_info.value.field == "slug"

    def test_unknown_operator(self):
        with pytest.raises(InvalidOperatorError):
            normalize_filter({"field": "slug", "operator": "contains", "value": "a"}, COURSE_FIELDS)

    def test_integer_coercion_failure(self):
        with pytest.raises(InvalidFilterValueError) as exc_info:
            normalize_filter({"field": "duration", "value": "ninety"}, COURSE_FIELDS)
        assert exc_info.value.field == "duration"

    def test_number_coerced_to_decimal(self):
        result = normalize_filter({"field": "price", "operator": "lte", "value": 49.9}, COURSE_FIELDS)
        assert result.value == Decimal("49.9")

    def test_boolean_strings(self):
        result = normalize_filter({"field": "hasParking", "value": "yes"}, VENUE_FIELDS)
        assert result.value is True
        with pytest.raises(InvalidFilterValueError):
            normalize_filter({"field": "hasParking", "value": "maybe"}, VENUE_FIELDS)

    def test_datetime_with_z_suffix(self):
        result = normalize_filter(
            {"field": "createdAt", "operator": "gte", "value": "2024-01-01T00:00:00Z"},
            COURSE_FIELDS,
        )
        assert isinstance(result.value, datetime)
        assert result.value.tzinfo is not None

    def test_in_requires_non_empty_list(self):
        result = normalize_filter({"field": "level", "operator": "in", "value": ["beginner"]}, COURSE_FIELDS)
        assert result.value == ("beginner",)
        with pytest.raises(InvalidFilterValueError):
            normalize_filter({"field": "level", "operator": "in", "value": []}, COURSE_FIELDS)

    def test_between_requires_two_values(self):
        result = normalize_filter(
            {"field": "duration", "operator": "between", "value": ["60", 120]}, COURSE_FIELDS
        )
        assert result.value == (60, 120)
        with pytest.raises(InvalidFilterValueError):
            normalize_filter({"field": "duration", "operator": "between", "value": [60]}, COURSE_FIELDS)

    def test_null_checks_ignore_value(self):
        result = normalize_filter({"field": "instructorId", "operator": "is_null"}, COURSE_FIELDS)
        assert result.operator is FilterOperator.IS_NULL
        assert result.value is None

    def test_missing_value_rejected(self):
        with pytest.raises(InvalidFilterValueError):
            normalize_filter({"field": "level"}, COURSE_FIELDS)

    def test_list_is_and_group(self):
        result = normalize_filter(
            [{"field": "level", "value": "beginner"}, {"field": "duration", "operator": "gt", "value": 30}],
            COURSE_FIELDS,
        )
        assert isinstance(result, ResolvedGroup)
        assert result.operator is LogicalOperator.AND
        assert len(result.conditions) == 2

    def test_nested_or_group(self):
        result = normalize_filter(
            {
                "operator": "or",
                "conditions": [
                    {"field": "level", "value": "beginner"},
                    {"conditions": [{"field": "duration", "operator": "gte", "value": 90}]},
                ],
            },
            COURSE_FIELDS,
        )
        assert result.operator is LogicalOperator.OR
        assert [c.field.path for c in iter_conditions(result)] == ["level", "duration"]

    def test_single_condition_group_collapses(self):
        result = normalize_filter({"conditions": [{"field": "level", "value": "advanced"}]}, COURSE_FIELDS)
        assert isinstance(result, ResolvedCondition)

    def test_invalid_logical_operator(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_filter({"operator": "xor", "conditions": []}, COURSE_FIELDS)
        assert exc_info.value.field == "operator"

    def test_search_string_spans_search_fields(self):
        result = normalize_filter("100%_salsa", COURSE_FIELDS)
        assert result.operator is LogicalOperator.OR
        assert [c.field.path for c in result.conditions] == ["translation.name", "translation.description"]
        assert all(c.operator is FilterOperator.ILIKE for c in result.conditions)
        assert result.conditions[0].value == "%100\\%\\_salsa%"

    def test_blank_search_is_no_filter(self):
        assert normalize_filter("   ", SONG_FIELDS) is None

    def test_scalar_filter_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_filter(123, COURSE_FIELDS)
        assert exc_info.value.field == "filter"


class TestNormalizeSort:

    def test_none_means_no_sort(self):
        assert normalize_sort(None, COURSE_FIELDS) == ()

    def test_string_forms(self):
        result = normalize_sort("-createdAt, slug:asc, duration", COURSE_FIELDS)
        assert [(s.field.path, s.order) for s in result] == [
            ("created_at", SortOrder.DESC),
            ("slug", SortOrder.ASC),
            ("duration", SortOrder.ASC),
        ]

    def test_object_with_nulls(self):
        (sort,) = normalize_sort({"field": "price", "order": "DESC", "nulls": "last"}, COURSE_FIELDS)
        assert sort.order is SortOrder.DESC
        assert sort.nulls is NullsPosition.LAST

    def test_list_of_mixed_entries(self):
        result = normalize_sort(["-duration", {"field": "name"}], COURSE_FIELDS)
        assert [s.field.path for s in result] == ["duration", "translation.name"]

    def test_invalid_order(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_sort({"field": "slug", "order": "up"}, COURSE_FIELDS)
        assert exc_info.value.field == "order"

    def test_invalid_nulls(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_sort({"field": "slug", "nulls": "middle"}, COURSE_FIELDS)
        assert exc_info.value.field == "nulls"

    def test_unknown_sort_field(self):
        with pytest.raises(UnknownFieldError):
            normalize_sort("-popularity", COURSE_FIELDS)
