"""
Tests for the list pipeline helpers in src.repositories.query.

Covers:
- filters JSON parsing
- property name resolution and the static field map
- operator/kind compatibility and value parsing
- sort order validation and page bounds
"""

from datetime import date

import pytest
from sqlalchemy import JSON, BigInteger, Integer, Text, Uuid, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.errors import BadRequestError, ConfigurationError
from src.db.models import Course
from src.repositories.query import (
    INT64_MAX,
    EntityFields,
    FieldKind,
    FilterOperator,
    apply_sort,
    build_predicate,
    page_offset,
    paginate,
    parse_filters,
    resolve_operator,
    to_snake_case,
    validate_page_bounds,
)


class _ScratchBase(DeclarativeBase):
    pass


class Gadget(_ScratchBase):
    __tablename__ = "gadgets"

    id: Mapped[str] = mapped_column(Uuid, primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=True)
    serial: Mapped[int] = mapped_column(BigInteger, nullable=True)


class Blob(_ScratchBase):
    __tablename__ = "blobs"

    id: Mapped[str] = mapped_column(Uuid, primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=True)


@pytest.fixture
def course_fields():
    return EntityFields(Course, searchable=("name", "code"))


class TestParseFilters:
    def test_blank_values_mean_no_filters(self):
        assert parse_filters(None) == []
        assert parse_filters("   ") == []

    def test_parses_criteria_with_wire_aliases(self):
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "Equal", "Value": "Algebra"}]')
        assert len(criteria) == 1
        assert criteria[0].property_name == "Name"
        assert criteria[0].operator == "Equal"
        assert criteria[0].value == "Algebra"

    def test_non_string_values_are_stringified(self):
        criteria = parse_filters(
            '[{"PropertyName": "Credits", "Operator": "GreaterThan", "Value": 3},'
            ' {"PropertyName": "IsActive", "Operator": "Equal", "Value": true}]'
        )
        assert [c.value for c in criteria] == ["3", "true"]

    def test_missing_value_is_none(self):
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "Equal"}]')
        assert criteria[0].value is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"PropertyName": "Name", "Operator": "Equal", "Value": "x"}',
            '[{"Operator": "Equal", "Value": "x"}]',
        ],
    )
    def test_malformed_filters_are_rejected(self, raw):
        with pytest.raises(BadRequestError):
            parse_filters(raw)


class TestFieldMap:
    def test_snake_case_normalization(self):
        assert to_snake_case("StartDate") == "start_date"
        assert to_snake_case("startDate") == "start_date"
        assert to_snake_case("name") == "name"
        assert to_snake_case("InstructorId") == "instructor_id"

    def test_columns_are_mapped_with_kinds(self, course_fields):
        kinds = {name: spec.kind for name, spec in course_fields.fields.items()}
        assert kinds["name"] is FieldKind.STRING
        assert kinds["credits"] is FieldKind.INTEGER
        assert kinds["start_date"] is FieldKind.DATE
        assert kinds["created_on"] is FieldKind.DATETIME
        assert kinds["id"] is FieldKind.UUID
        assert course_fields.primary_key.name == "id"

    def test_resolve_accepts_pascal_and_snake_case(self, course_fields):
        assert course_fields.resolve("StartDate").name == "start_date"
        assert course_fields.resolve("start_date").name == "start_date"

    def test_resolve_rejects_unknown_property(self, course_fields):
        with pytest.raises(BadRequestError) as exc:
            course_fields.resolve("Salary")
        assert "name" in exc.value.details["allowed"]

    def test_resolve_rejects_blank_property(self, course_fields):
        with pytest.raises(BadRequestError):
            course_fields.resolve("  ")

    def test_unsupported_column_type_fails_at_construction(self):
        with pytest.raises(ConfigurationError):
            EntityFields(Blob)

    def test_searchable_field_must_exist_and_be_text(self):
        assert [s.name for s in EntityFields(Gadget, searchable=("label",)).searchable] == ["label"]
        with pytest.raises(ConfigurationError):
            EntityFields(Gadget, searchable=("missing",))
        with pytest.raises(ConfigurationError):
            EntityFields(Gadget, searchable=("size",))


class TestPredicates:
    def test_operator_lookup_is_case_insensitive(self):
        assert resolve_operator("contains") is FilterOperator.CONTAINS
        assert resolve_operator("GREATERTHANOREQUAL") is FilterOperator.GREATER_THAN_OR_EQUAL

    def test_unknown_operator_is_rejected(self):
        with pytest.raises(BadRequestError):
            resolve_operator("Like")

    def test_text_operator_on_integer_field_is_rejected(self, course_fields):
        with pytest.raises(BadRequestError):
            build_predicate(course_fields.resolve("credits"), "Contains", "3")

    def test_unparseable_value_is_rejected(self, course_fields):
        with pytest.raises(BadRequestError):
            build_predicate(course_fields.resolve("credits"), "Equal", "three")
        with pytest.raises(BadRequestError):
            build_predicate(course_fields.resolve("start_date"), "GreaterThan", "yesterday")

    def test_integer_values_are_range_checked(self, course_fields):
        credits = course_fields.resolve("credits")
        assert credits.parse("2147483647") == 2**31 - 1
        assert credits.parse("-2147483648") == -(2**31)
        for raw in ("2147483648", "-2147483649", "99999999999999999999"):
            with pytest.raises(BadRequestError, match="out of range"):
                build_predicate(credits, "GreaterThan", raw)

    def test_big_integer_columns_use_64_bit_range(self):
        serial = EntityFields(Gadget).resolve("serial")
        assert serial.parse(str(INT64_MAX)) == INT64_MAX
        with pytest.raises(BadRequestError, match="out of range"):
            serial.parse(str(INT64_MAX + 1))

    def test_value_is_parsed_to_column_type(self, course_fields):
        spec = course_fields.resolve("StartDate")
        assert spec.parse("2026-09-01") == date(2026, 9, 1)
        predicate = build_predicate(spec, "GreaterThan", "2026-09-01")
        assert predicate.right.value == date(2026, 9, 1)

    def test_null_value_only_allowed_for_equality(self, course_fields):
        spec = course_fields.resolve("name")
        assert "IS NULL" in str(build_predicate(spec, "Equal", None))
        assert "IS NOT NULL" in str(build_predicate(spec, "NotEqual", None))
        with pytest.raises(BadRequestError):
            build_predicate(spec, "Contains", None)


class TestSortAndPaging:
    def test_invalid_sort_order_is_rejected(self, course_fields):
        with pytest.raises(BadRequestError, match="Invalid sort order"):
            apply_sort(select(Course), course_fields, "name", "sideways")

    def test_sort_order_is_validated_without_sort_field(self, course_fields):
        with pytest.raises(BadRequestError):
            apply_sort(select(Course), course_fields, None, "up")

    def test_primary_key_is_tie_breaker(self, course_fields):
        sql = str(apply_sort(select(Course), course_fields, "Name", "DESC"))
        order_by = sql.split("ORDER BY", 1)[1]
        assert order_by.strip().startswith("courses.name DESC")
        assert "courses.id ASC" in order_by

    def test_default_order_is_primary_key(self, course_fields):
        sql = str(apply_sort(select(Course), course_fields))
        assert sql.split("ORDER BY", 1)[1].strip() == "courses.id ASC"

    def test_unknown_sort_field_is_rejected(self, course_fields):
        with pytest.raises(BadRequestError):
            apply_sort(select(Course), course_fields, "Salary", "asc")

    @pytest.mark.parametrize("page_number,page_size", [(0, 10), (-1, 10), (1, 0), (1, -5)])
    def test_page_bounds_must_be_positive(self, page_number, page_size):
        with pytest.raises(BadRequestError):
            validate_page_bounds(page_number, page_size)

    def test_page_size_cap(self):
        validate_page_bounds(1, 1000, 1000)
        with pytest.raises(BadRequestError, match="must not exceed 1000"):
            validate_page_bounds(1, 1001, 1000)

    def test_paginate_offsets(self):
        stmt = paginate(select(Course), page_number=3, page_size=20)
        assert stmt._offset_clause.value == 40
        assert stmt._limit_clause.value == 20

    def test_offset_past_64_bit_range_has_no_page(self):
        assert page_offset(3, 20) == 40
        assert page_offset(1, 10) == 0
        assert page_offset(10**19, 10) is None
        with pytest.raises(BadRequestError):
            paginate(select(Course), page_number=10**19, page_size=10)
