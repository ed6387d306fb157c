"""
Tests for CrudService - the generic create/read/update/patch/delete service.

Tests cover:
- create and get_by_id, audit and tenant stamping
- filtering, search, sorting and pagination
- full update, JSON Patch, delete
- tenant isolation
"""

from uuid import UUID, uuid4

import pytest

from src.core.errors import BadRequestError, NotFoundError
from src.repositories.query import parse_filters
from src.schemas.academics import CourseUpdate, CourseWrite
from src.schemas.common import PatchOperation
from src.services.crud import CrudService
from src.services.registry import validate_resources

ACTOR = UUID("aaaaaaaa-0000-0000-0000-000000000001")
TENANT_A = UUID("11111111-1111-1111-1111-111111111111")
TENANT_B = UUID("22222222-2222-2222-2222-222222222222")

RESOURCES = validate_resources()


@pytest.fixture
def courses(db_session):
    return CrudService(db_session, RESOURCES["course"], actor_id=ACTOR, tenant_id=TENANT_A, max_page_size=1000)


@pytest.fixture
def discounts(db_session):
    return CrudService(db_session, RESOURCES["discount"], actor_id=ACTOR)


@pytest.fixture
def trainings(db_session):
    return CrudService(db_session, RESOURCES["training"], actor_id=ACTOR)


@pytest.fixture
def report_cards(db_session):
    return CrudService(db_session, RESOURCES["reportcard"], actor_id=ACTOR, tenant_id=TENANT_A)


async def _seed_courses(svc, names):
    ids = []
    for i, name in enumerate(names):
        ids.append(await svc.create(CourseWrite(name=name, code=f"C{i:02d}", credits=i)))
    return ids


class TestCreateAndGet:
    async def test_create_then_get_returns_payload(self, courses):
        payload = CourseWrite(name="Algebra", code="MATH-101", credits=3, description="Intro")
        new_id = await courses.create(payload)

        entity = await courses.get_by_id(new_id)
        assert entity is not None
        assert CourseWrite.model_validate(entity).model_dump() == payload.model_dump()

    async def test_server_assigns_id_audit_and_tenant(self, courses):
        new_id = await courses.create({"name": "Biology"})
        entity = await courses.get_by_id(new_id)
        assert isinstance(new_id, UUID)
        assert entity.created_on is not None
        assert entity.created_by == ACTOR
        assert entity.updated_on is None
        assert entity.tenant_id == TENANT_A

    async def test_get_missing_returns_none(self, courses):
        assert await courses.get_by_id(uuid4()) is None

    async def test_invalid_payload_is_rejected(self, courses):
        with pytest.raises(BadRequestError):
            await courses.create({"credits": "many"})


class TestFiltering:
    async def test_equal_filter_returns_exactly_the_match(self, courses):
        ids = await _seed_courses(courses, ["X", "Y", "XX"])
        rows = await courses.get(
            filters=parse_filters('[{"PropertyName": "Name", "Operator": "Equal", "Value": "X"}]'),
            page_size=10,
        )
        assert [r.id for r in rows] == [ids[0]]

    async def test_text_operators_are_case_insensitive(self, courses):
        await _seed_courses(courses, ["Organic Chemistry", "Chemistry Lab", "Physics"])

        async def names(op, value):
            criteria = parse_filters(f'[{{"PropertyName": "name", "Operator": "{op}", "Value": "{value}"}}]')
            rows = await courses.get(filters=criteria, page_size=10, sort_field="name")
            return [r.name for r in rows]

        assert await names("Contains", "CHEM") == ["Chemistry Lab", "Organic Chemistry"]
        assert await names("StartsWith", "chem") == ["Chemistry Lab"]
        assert await names("EndsWith", "ICS") == ["Physics"]

    async def test_like_wildcards_are_literal(self, courses):
        await _seed_courses(courses, ["100% Attendance", "Attendance"])
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "Contains", "Value": "%"}]')
        rows = await courses.get(filters=criteria, page_size=10)
        assert [r.name for r in rows] == ["100% Attendance"]

    async def test_numeric_comparison_is_not_textual(self, courses):
        for credits in (2, 10, 100, 9):
            await courses.create(CourseWrite(name=f"c{credits}", credits=credits))
        criteria = parse_filters('[{"PropertyName": "Credits", "Operator": "GreaterThan", "Value": 9}]')
        rows = await courses.get(filters=criteria, page_size=10, sort_field="credits")
        assert [r.credits for r in rows] == [10, 100]

        criteria = parse_filters('[{"PropertyName": "Credits", "Operator": "GreaterThanOrEqual", "Value": "9"}]')
        rows = await courses.get(filters=criteria, page_size=10, sort_field="credits")
        assert [r.credits for r in rows] == [9, 10, 100]

    async def test_date_comparison(self, courses):
        for day in ("2026-01-15", "2026-09-01", "2027-02-01"):
            await courses.create({"name": day, "start_date": day})
        after = parse_filters('[{"PropertyName": "StartDate", "Operator": "GreaterThan", "Value": "2026-02-01"}]')
        before = parse_filters('[{"PropertyName": "StartDate", "Operator": "LessThan", "Value": "2026-09-01"}]')

        rows = await courses.get(filters=after, page_size=10, sort_field="start_date")
        assert [r.name for r in rows] == ["2026-09-01", "2027-02-01"]
        rows = await courses.get(filters=before, page_size=10, sort_field="start_date")
        assert [r.name for r in rows] == ["2026-01-15"]

    async def test_datetime_comparison(self, trainings):
        for stamp in ("2026-03-01T08:00:00", "2026-03-01T17:30:00", "2026-03-02T09:00:00"):
            await trainings.create({"name": stamp, "start_date": stamp})
        after = parse_filters(
            '[{"PropertyName": "StartDate", "Operator": "GreaterThan", "Value": "2026-03-01T12:00:00"}]'
        )
        before = parse_filters(
            '[{"PropertyName": "StartDate", "Operator": "LessThan", "Value": "2026-03-01T17:30:00"}]'
        )

        rows = await trainings.get(filters=after, page_size=10, sort_field="start_date")
        assert [r.name for r in rows] == ["2026-03-01T17:30:00", "2026-03-02T09:00:00"]
        rows = await trainings.get(filters=before, page_size=10, sort_field="start_date")
        assert [r.name for r in rows] == ["2026-03-01T08:00:00"]

    async def test_out_of_range_integer_is_rejected(self, courses):
        criteria = parse_filters(
            '[{"PropertyName": "Credits", "Operator": "GreaterThan", "Value": "99999999999999999999"}]'
        )
        with pytest.raises(BadRequestError, match="out of range"):
            await courses.get(filters=criteria, page_size=10)

    async def test_criteria_are_and_combined(self, courses):
        await _seed_courses(courses, ["Art", "Art", "Music"])  # credits 0, 1, 2
        criteria = parse_filters(
            '[{"PropertyName": "Name", "Operator": "Equal", "Value": "Art"},'
            ' {"PropertyName": "Credits", "Operator": "GreaterThan", "Value": "0"}]'
        )
        rows = await courses.get(filters=criteria, page_size=10)
        assert [(r.name, r.credits) for r in rows] == [("Art", 1)]

    async def test_not_equal_keeps_null_rows(self, courses):
        await courses.create({"name": "Named"})
        await courses.create({"name": None})
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "NotEqual", "Value": "Named"}]')
        rows = await courses.get(filters=criteria, page_size=10)
        assert [r.name for r in rows] == [None]

    async def test_null_value_matches_missing(self, courses):
        await courses.create({"name": "Named"})
        await courses.create({"code": "ONLY-CODE"})
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "Equal", "Value": null}]')
        rows = await courses.get(filters=criteria, page_size=10)
        assert [r.code for r in rows] == ["ONLY-CODE"]

    async def test_search_term_matches_any_searchable_field(self, courses):
        await courses.create({"name": "Statistics", "code": "STAT-1"})
        await courses.create({"name": "Poetry", "code": "LIT-STA"})
        await courses.create({"name": "Essays", "description": "Stanza work"})
        await courses.create({"name": "Drawing", "code": "ART-1"})
        rows = await courses.get(search_term="  sta ", page_size=10, sort_field="name")
        assert [r.name for r in rows] == ["Essays", "Poetry", "Statistics"]

    async def test_unknown_property_is_rejected(self, courses):
        criteria = parse_filters('[{"PropertyName": "Salary", "Operator": "Equal", "Value": "1"}]')
        with pytest.raises(BadRequestError):
            await courses.get(filters=criteria, page_size=10)


class TestSortingAndPaging:
    async def test_asc_and_desc_are_reverses(self, courses):
        await _seed_courses(courses, ["delta", "alpha", "charlie", "bravo"])
        asc = await courses.get(page_size=10, sort_field="Name", sort_order="asc")
        desc = await courses.get(page_size=10, sort_field="Name", sort_order="DESC")
        assert [r.name for r in asc] == ["alpha", "bravo", "charlie", "delta"]
        assert [r.name for r in desc] == list(reversed([r.name for r in asc]))

    async def test_invalid_sort_order_is_rejected(self, courses):
        with pytest.raises(BadRequestError):
            await courses.get(page_size=10, sort_field="name", sort_order="random")

    async def test_pages_are_contiguous_slices(self, courses):
        names = [f"course-{i:02d}" for i in range(7)]
        await _seed_courses(courses, list(reversed(names)))

        pages = []
        for page_number in (1, 2, 3, 4):
            rows = await courses.get(page_number=page_number, page_size=3, sort_field="name")
            assert len(rows) <= 3
            pages.append([r.name for r in rows])

        assert pages == [names[0:3], names[3:6], names[6:7], []]

    async def test_pagination_applies_after_filter(self, courses):
        await _seed_courses(courses, ["keep-1", "drop-1", "keep-2", "drop-2", "keep-3"])
        criteria = parse_filters('[{"PropertyName": "Name", "Operator": "StartsWith", "Value": "keep"}]')
        rows = await courses.get(filters=criteria, page_number=2, page_size=2, sort_field="name")
        assert [r.name for r in rows] == ["keep-3"]

    @pytest.mark.parametrize("page_number,page_size", [(0, 10), (1, 0), (1, 1001)])
    async def test_page_bounds_are_validated(self, courses, page_number, page_size):
        with pytest.raises(BadRequestError):
            await courses.get(page_number=page_number, page_size=page_size)

    async def test_page_past_offset_range_is_empty(self, courses):
        await _seed_courses(courses, ["only"])
        assert await courses.get(page_number=10**19, page_size=10) == []


class TestUpdate:
    async def test_update_replaces_every_writable_field(self, courses):
        new_id = await courses.create(CourseWrite(name="Old", code="OLD", credits=2))
        assert await courses.update(new_id, CourseUpdate(id=new_id, name="New")) is True

        entity = await courses.get_by_id(new_id)
        assert entity.name == "New"
        assert entity.code is None
        assert entity.credits is None
        assert entity.updated_by == ACTOR
        assert entity.updated_on is not None
        assert entity.tenant_id == TENANT_A

    async def test_update_missing_raises_not_found(self, courses):
        missing = uuid4()
        with pytest.raises(NotFoundError):
            await courses.update(missing, CourseUpdate(id=missing, name="Ghost"))


class TestPatch:
    async def test_patch_sets_one_field_and_keeps_the_rest(self, courses, session_maker):
        new_id = await courses.create(CourseWrite(name="Before", code="K-1", credits=4))
        ops = [PatchOperation(op="replace", path="/Name", value="After")]
        assert await courses.patch(new_id, ops) is True

        async with session_maker() as fresh:
            entity = await CrudService(fresh, RESOURCES["course"], tenant_id=TENANT_A).get_by_id(new_id)
        assert entity.name == "After"
        assert entity.code == "K-1"
        assert entity.credits == 4
        assert entity.updated_by == ACTOR

    async def test_patch_accepts_plain_dicts_and_remove(self, courses):
        new_id = await courses.create(CourseWrite(name="Keep", code="DROP"))
        await courses.patch(new_id, [{"op": "remove", "path": "/code"}])
        entity = await courses.get_by_id(new_id)
        assert entity.name == "Keep"
        assert entity.code is None

    async def test_patch_values_are_validated(self, courses):
        new_id = await courses.create(CourseWrite(name="Typed"))
        with pytest.raises(BadRequestError):
            await courses.patch(new_id, [PatchOperation(op="replace", path="/credits", value="lots")])

    async def test_patch_cannot_touch_server_managed_fields(self, courses):
        new_id = await courses.create(CourseWrite(name="Guarded"))
        for path in ("/id", "/tenant_id", "/created_on"):
            with pytest.raises(BadRequestError):
                await courses.patch(new_id, [PatchOperation(op="replace", path=path, value=None)])
        with pytest.raises(BadRequestError):
            await courses.patch(new_id, [PatchOperation(op="add", path="/salary", value=1)])

    async def test_failed_test_operation_is_rejected(self, courses):
        new_id = await courses.create(CourseWrite(name="Actual"))
        ops = [
            PatchOperation(op="test", path="/name", value="Expected"),
            PatchOperation(op="replace", path="/name", value="Changed"),
        ]
        with pytest.raises(BadRequestError):
            await courses.patch(new_id, ops)
        assert (await courses.get_by_id(new_id)).name == "Actual"

    async def test_test_operation_compares_decimals_by_value(self, report_cards):
        new_id = await report_cards.create({"student_name": "Ana", "score": 85.5, "grade": "A"})
        ops = [
            {"op": "test", "path": "/score", "value": 85.5},
            {"op": "replace", "path": "/grade", "value": "B"},
        ]
        assert await report_cards.patch(new_id, ops) is True
        assert (await report_cards.get_by_id(new_id)).grade == "B"

        with pytest.raises(BadRequestError, match="Patch test failed"):
            await report_cards.patch(new_id, [{"op": "test", "path": "/score", "value": 85.25}])

    async def test_test_operation_compares_datetimes_by_instant(self, trainings):
        new_id = await trainings.create({"name": "Safety", "start_date": "2026-03-01T08:00:00Z"})
        ops = [
            {"op": "test", "path": "/StartDate", "value": "2026-03-01T10:00:00+02:00"},
            {"op": "replace", "path": "/name", "value": "Fire safety"},
        ]
        assert await trainings.patch(new_id, ops) is True
        assert (await trainings.get_by_id(new_id)).name == "Fire safety"

        with pytest.raises(BadRequestError, match="Patch test failed"):
            await trainings.patch(new_id, [{"op": "test", "path": "/start_date", "value": "2026-03-01T09:00:00Z"}])

    async def test_test_operation_sees_earlier_operations(self, courses):
        new_id = await courses.create(CourseWrite(name="First", credits=1))
        ops = [
            {"op": "replace", "path": "/credits", "value": 5},
            {"op": "test", "path": "/credits", "value": 5},
        ]
        assert await courses.patch(new_id, ops) is True
        assert (await courses.get_by_id(new_id)).credits == 5

    async def test_missing_document_is_rejected(self, courses):
        new_id = await courses.create(CourseWrite(name="Any"))
        with pytest.raises(BadRequestError, match="Patch document is missing"):
            await courses.patch(new_id, None)

    async def test_patch_missing_raises_not_found(self, courses):
        with pytest.raises(NotFoundError):
            await courses.patch(uuid4(), [PatchOperation(op="replace", path="/name", value="x")])


class TestDelete:
    async def test_delete_twice(self, courses):
        new_id = await courses.create(CourseWrite(name="Short-lived"))
        assert await courses.delete(new_id) is True
        assert await courses.get_by_id(new_id) is None
        with pytest.raises(NotFoundError):
            await courses.delete(new_id)


class TestTenancy:
    async def test_other_tenant_cannot_see_records(self, db_session, courses):
        new_id = await courses.create(CourseWrite(name="Private"))
        other = CrudService(db_session, RESOURCES["course"], tenant_id=TENANT_B)

        assert await other.get_by_id(new_id) is None
        assert await other.get(page_size=10) == []
        with pytest.raises(NotFoundError):
            await other.delete(new_id)

    async def test_tenant_is_ignored_for_shared_entities(self, db_session, discounts):
        new_id = await discounts.create({"name": "Sibling"})
        scoped = CrudService(db_session, RESOURCES["discount"], tenant_id=TENANT_B)
        assert scoped.tenant_id is None
        assert (await scoped.get_by_id(new_id)).name == "Sibling"
