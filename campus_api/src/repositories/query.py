"""
Generic list pipeline shared by every entity: filter -> search -> sort -> paginate.

Property names are never resolved by reflection at request time. Each entity
gets an EntityFields map, built once at startup from its mapped columns, that
ties every allowed name to its column and a typed value parser. Operators are
looked up in an explicit comparator table and checked against the field kind.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Integer,
    Numeric,
    Select,
    SmallInteger,
    String,
    Time,
    Uuid,
    and_,
    inspect,
    or_,
)
from sqlalchemy.orm import InstrumentedAttribute

from src.core.errors import BadRequestError, ConfigurationError
from src.schemas.common import FilterCriterion


class FieldKind(str, enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    UUID = "uuid"


class FilterOperator(str, enum.Enum):
    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"


_EQUALITY = frozenset({FilterOperator.EQUAL, FilterOperator.NOT_EQUAL})
_ORDERING = _EQUALITY | {
    FilterOperator.GREATER_THAN,
    FilterOperator.GREATER_THAN_OR_EQUAL,
    FilterOperator.LESS_THAN,
    FilterOperator.LESS_THAN_OR_EQUAL,
}
_TEXT = _EQUALITY | {FilterOperator.CONTAINS, FilterOperator.STARTS_WITH, FilterOperator.ENDS_WITH}

OPERATORS_BY_KIND: Dict[FieldKind, frozenset] = {
    FieldKind.STRING: _TEXT,
    FieldKind.INTEGER: _ORDERING,
    FieldKind.DECIMAL: _ORDERING,
    FieldKind.DATE: _ORDERING,
    FieldKind.DATETIME: _ORDERING,
    FieldKind.TIME: _ORDERING,
    FieldKind.BOOLEAN: _EQUALITY,
    FieldKind.UUID: _EQUALITY,
}

# NotEqual keeps NULL rows, matching "value is not X" rather than SQL three-valued logic.
_COMPARATORS: Dict[FilterOperator, Callable[[Any, Any], Any]] = {
    FilterOperator.EQUAL: lambda col, v: col == v,
    FilterOperator.NOT_EQUAL: lambda col, v: or_(col != v, col.is_(None)),
    FilterOperator.GREATER_THAN: lambda col, v: col > v,
    FilterOperator.GREATER_THAN_OR_EQUAL: lambda col, v: col >= v,
    FilterOperator.LESS_THAN: lambda col, v: col < v,
    FilterOperator.LESS_THAN_OR_EQUAL: lambda col, v: col <= v,
    FilterOperator.CONTAINS: lambda col, v: col.icontains(v, autoescape=True),
    FilterOperator.STARTS_WITH: lambda col, v: col.istartswith(v, autoescape=True),
    FilterOperator.ENDS_WITH: lambda col, v: col.iendswith(v, autoescape=True),
}

_OPERATORS_BY_NAME = {op.value.lower(): op for op in FilterOperator}

# Checked in order; DateTime is not a Date subclass, Boolean is not an Integer.
_KIND_BY_TYPE: Tuple[Tuple[type, FieldKind], ...] = (
    (Boolean, FieldKind.BOOLEAN),
    (DateTime, FieldKind.DATETIME),
    (Date, FieldKind.DATE),
    (Time, FieldKind.TIME),
    (Integer, FieldKind.INTEGER),
    (Numeric, FieldKind.DECIMAL),
    (Uuid, FieldKind.UUID),
    (String, FieldKind.STRING),
)


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_datetime(raw: str) -> datetime:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


# Signed 64-bit: the widest integer any supported backend binds (BIGINT, SQLite INTEGER).
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_PARSERS: Dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.STRING: lambda raw: raw,
    FieldKind.INTEGER: lambda raw: int(raw.strip()),
    FieldKind.DECIMAL: lambda raw: Decimal(raw.strip()),
    FieldKind.BOOLEAN: _parse_bool,
    FieldKind.DATE: lambda raw: date.fromisoformat(raw.strip()),
    FieldKind.DATETIME: _parse_datetime,
    FieldKind.TIME: lambda raw: time.fromisoformat(raw.strip()),
    FieldKind.UUID: lambda raw: UUID(raw.strip()),
}

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


# PUBLIC_INTERFACE
def to_snake_case(name: str) -> str:
    """Normalize PascalCase/camelCase property names: 'StartDate' -> 'start_date'."""
    return _CAMEL_BOUNDARY.sub(r"\1_\2", name.strip()).lower()


def _int_range(column_type: Any) -> Tuple[int, int]:
    if isinstance(column_type, BigInteger):
        return INT64_MIN, INT64_MAX
    if isinstance(column_type, SmallInteger):
        return -(2**15), 2**15 - 1
    return _INT32_MIN, _INT32_MAX


@dataclass(frozen=True)
class FieldSpec:
    """One filterable/sortable entity attribute."""
    name: str
    attribute: InstrumentedAttribute
    kind: FieldKind
    int_range: Optional[Tuple[int, int]] = None

    def parse(self, raw: str) -> Any:
        """Convert a raw filter value to the column's Python type."""
        try:
            value = _PARSERS[self.kind](raw)
        except (ValueError, ArithmeticError) as exc:
            raise BadRequestError(
                f"Value {raw!r} is not a valid {self.kind.value} for property '{self.name}'."
            ) from exc
        if self.int_range is not None and not self.int_range[0] <= value <= self.int_range[1]:
            low, high = self.int_range
            raise BadRequestError(
                f"Value {raw!r} is out of range for property '{self.name}' ({low}..{high})."
            )
        return value


class EntityFields:
    """
    Static map of an entity's allowed field names.

    Built once per entity at startup; construction fails with ConfigurationError
    when a column type is not supported or a searchable field is not a string column.
    """

    def __init__(self, model: type, searchable: Iterable[str] = ()) -> None:
        self.model = model
        self.fields: Dict[str, FieldSpec] = {}
        mapper = inspect(model)
        for prop in mapper.column_attrs:
            column = prop.columns[0]
            kind = self._kind_for(prop.key, column.type)
            self.fields[prop.key] = FieldSpec(
                name=prop.key,
                attribute=getattr(model, prop.key),
                kind=kind,
                int_range=_int_range(column.type) if kind is FieldKind.INTEGER else None,
            )

        pk_columns = mapper.primary_key
        if len(pk_columns) != 1:
            raise ConfigurationError(f"{model.__name__} must have exactly one primary key column")
        self.primary_key = self.fields[mapper.get_property_by_column(pk_columns[0]).key]

        self.searchable: Tuple[FieldSpec, ...] = tuple(self._searchable(searchable))

    def _kind_for(self, key: str, column_type: Any) -> FieldKind:
        for type_, kind in _KIND_BY_TYPE:
            if isinstance(column_type, type_):
                return kind
        raise ConfigurationError(
            f"{self.model.__name__}.{key} has unsupported column type {column_type!r}"
        )

    def _searchable(self, names: Iterable[str]) -> List[FieldSpec]:
        specs = []
        for name in names:
            spec = self.fields.get(name)
            if spec is None:
                raise ConfigurationError(f"{self.model.__name__} has no searchable field '{name}'")
            if spec.kind is not FieldKind.STRING:
                raise ConfigurationError(
                    f"{self.model.__name__}.{name} is {spec.kind.value}; only string fields are searchable"
                )
            specs.append(spec)
        return specs

    def canonical_name(self, name: str) -> Optional[str]:
        """Return the mapped field name for `name`, or None if it is unknown."""
        if name in self.fields:
            return name
        snake = to_snake_case(name)
        return snake if snake in self.fields else None

    def resolve(self, name: Optional[str]) -> FieldSpec:
        """Resolve a client-supplied property name or raise BadRequestError."""
        if not name or not name.strip():
            raise BadRequestError("Property name is required.")
        canonical = self.canonical_name(name)
        if canonical is None:
            raise BadRequestError(
                f"Unknown property '{name}' for {self.model.__name__}.",
                details={"allowed": sorted(self.fields)},
            )
        return self.fields[canonical]


_CRITERIA_ADAPTER = TypeAdapter(List[FilterCriterion])


# PUBLIC_INTERFACE
def parse_filters(raw: Optional[str]) -> List[FilterCriterion]:
    """
    Decode the `filters` query parameter.

    Returns an empty list for a missing/blank value. Raises BadRequestError for
    malformed JSON or a payload that is not an array of criteria.
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _CRITERIA_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise BadRequestError(
            "Invalid filters. Expected a JSON array of {PropertyName, Operator, Value} objects.",
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def resolve_operator(name: Optional[str]) -> FilterOperator:
    """Case-insensitive operator lookup."""
    op = _OPERATORS_BY_NAME.get((name or "").strip().lower())
    if op is None:
        raise BadRequestError(
            f"Unsupported filter operator '{name}'.",
            details={"allowed": [o.value for o in FilterOperator]},
        )
    return op


# PUBLIC_INTERFACE
def build_predicate(spec: FieldSpec, operator: Optional[str], raw: Optional[str]):
    """Build a typed SQL predicate for one criterion."""
    op = resolve_operator(operator)
    if op not in OPERATORS_BY_KIND[spec.kind]:
        raise BadRequestError(
            f"Operator '{op.value}' is not supported for {spec.kind.value} property '{spec.name}'."
        )
    column = spec.attribute
    if raw is None:
        if op is FilterOperator.EQUAL:
            return column.is_(None)
        if op is FilterOperator.NOT_EQUAL:
            return column.is_not(None)
        raise BadRequestError(f"Operator '{op.value}' requires a value for property '{spec.name}'.")
    return _COMPARATORS[op](column, spec.parse(raw))


# PUBLIC_INTERFACE
def apply_filter(
    stmt: Select,
    fields: EntityFields,
    criteria: Optional[Sequence[FilterCriterion]],
    search_term: Optional[str] = None,
) -> Select:
    """
    AND together all criteria, then AND the free-text search.

    An empty/None criteria list and a blank search term are no-ops.
    """
    predicates = [
        build_predicate(fields.resolve(c.property_name), c.operator, c.value)
        for c in (criteria or ())
    ]
    if predicates:
        stmt = stmt.where(and_(*predicates))
    return apply_search(stmt, fields, search_term)


# PUBLIC_INTERFACE
def apply_search(stmt: Select, fields: EntityFields, search_term: Optional[str]) -> Select:
    """Case-insensitive substring match OR-ed across the entity's searchable fields."""
    if not search_term or not search_term.strip() or not fields.searchable:
        return stmt
    term = search_term.strip()
    return stmt.where(
        or_(*(spec.attribute.icontains(term, autoescape=True) for spec in fields.searchable))
    )


# PUBLIC_INTERFACE
def apply_sort(
    stmt: Select,
    fields: EntityFields,
    sort_field: Optional[str] = None,
    sort_order: Optional[str] = "asc",
) -> Select:
    """
    Order by `sort_field` in `sort_order` ("asc"/"desc", case-insensitive).

    The primary key is always the final ascending tie-breaker, and the sole key
    when no sort field is given, so pagination is stable.
    """
    order = (sort_order or "asc").strip().lower()
    if order not in ("asc", "desc"):
        raise BadRequestError("Invalid sort order. Use 'asc' or 'desc'.")

    pk = fields.primary_key
    if sort_field and sort_field.strip():
        spec = fields.resolve(sort_field)
        column = spec.attribute
        stmt = stmt.order_by(column.desc() if order == "desc" else column.asc())
        if spec is pk:
            return stmt
    return stmt.order_by(pk.attribute.asc())


# PUBLIC_INTERFACE
def validate_page_bounds(page_number: int, page_size: int, max_page_size: Optional[int] = None) -> None:
    """Raise BadRequestError unless 1 <= page_number and 1 <= page_size <= max_page_size."""
    if page_size < 1:
        raise BadRequestError("Page size invalid.")
    if page_number < 1:
        raise BadRequestError("Page number invalid.")
    if max_page_size is not None and page_size > max_page_size:
        raise BadRequestError(f"Page size must not exceed {max_page_size}.")


# PUBLIC_INTERFACE
def page_offset(page_number: int, page_size: int) -> Optional[int]:
    """
    Rows to skip before the requested page.

    Returns None when the offset exceeds the 64-bit OFFSET range; no row can
    live that far in, so the page is empty.
    """
    offset = (page_number - 1) * page_size
    return offset if offset <= INT64_MAX else None


# PUBLIC_INTERFACE
def paginate(
    stmt: Select, page_number: int, page_size: int, max_page_size: Optional[int] = None
) -> Select:
    """
    Skip (page_number - 1) * page_size rows, then take page_size.

    Callers check page_offset() first; a page past the OFFSET range is rejected here.
    """
    validate_page_bounds(page_number, page_size, max_page_size)
    offset = page_offset(page_number, page_size)
    if offset is None:
        raise BadRequestError("Page number invalid.")
    return stmt.offset(offset).limit(min(page_size, INT64_MAX))
