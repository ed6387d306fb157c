"""Initial campus schema.

- staff: access_levels, employees, instructors, breaks, conflict_resolutions, minutes
- academics: terms, courses, report_cards, timetable_templates, trainings, events
- billing: billing_cycles, discounts, late_fees, payment_methods, payment_statuses, payment_terms
- facilities: archive_locations, exam_rooms, resources, resource_bookings, resource_requests

Every table has a UUID primary key and nullable audit columns; tenant-scoped
tables also carry an indexed, nullable tenant_id.
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d9e2a7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Creation order respects foreign keys; downgrade drops in reverse.
TABLES: List[str] = [
    "access_levels",
    "employees",
    "instructors",
    "breaks",
    "conflict_resolutions",
    "minutes",
    "terms",
    "courses",
    "report_cards",
    "timetable_templates",
    "trainings",
    "events",
    "billing_cycles",
    "discounts",
    "late_fees",
    "payment_methods",
    "payment_statuses",
    "payment_terms",
    "archive_locations",
    "exam_rooms",
    "resources",
    "resource_bookings",
    "resource_requests",
]


def _text(name: str) -> sa.Column:
    return sa.Column(name, sa.Text(), nullable=True)


def _fk(name: str, target: str) -> sa.Column:
    return sa.Column(
        name,
        sa.Uuid(),
        sa.ForeignKey(f"{target}.id", ondelete="SET NULL"),
        nullable=True,
    )


def _create(table: str, *columns: sa.Column, tenant: bool = False) -> None:
    """Create a table with id, optional tenant_id and audit columns around `columns`."""
    cols = [sa.Column("id", sa.Uuid(), nullable=False)]
    if tenant:
        cols.append(sa.Column("tenant_id", sa.Uuid(), nullable=True))
    cols.extend(columns)
    cols += [
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("updated_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
    ]
    op.create_table(table, *cols, sa.PrimaryKeyConstraint("id", name=f"pk_{table}"))
    if tenant:
        op.create_index(f"ix_{table}_tenant_id", table, ["tenant_id"])


def upgrade() -> None:
    # Staff
    _create("access_levels", _text("name"), _text("description"), sa.Column("level", sa.Integer(), nullable=True))
    _create(
        "employees",
        _text("first_name"),
        _text("last_name"),
        _text("email"),
        _text("phone"),
        _text("job_title"),
        sa.Column("hire_date", sa.Date(), nullable=True),
        _fk("access_level_id", "access_levels"),
        tenant=True,
    )
    _create(
        "instructors",
        _text("first_name"),
        _text("last_name"),
        _text("email"),
        _text("phone"),
        _text("specialization"),
        _fk("employee_id", "employees"),
    )
    _create(
        "breaks",
        _text("name"),
        _text("description"),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
    )
    _create(
        "conflict_resolutions",
        _text("title"),
        _text("description"),
        _text("resolution"),
        _text("status"),
        sa.Column("resolved_on", sa.DateTime(timezone=True), nullable=True),
        _fk("employee_id", "employees"),
    )
    _create(
        "minutes",
        _text("title"),
        sa.Column("meeting_date", sa.DateTime(timezone=True), nullable=True),
        _text("content"),
        _fk("recorded_by", "employees"),
    )

    # Academics
    _create(
        "terms",
        _text("name"),
        _text("description"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        tenant=True,
    )
    _create(
        "courses",
        _text("name"),
        _text("code"),
        _text("description"),
        sa.Column("credits", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        _fk("instructor_id", "instructors"),
        tenant=True,
    )
    _create(
        "report_cards",
        _text("student_name"),
        _fk("term_id", "terms"),
        _fk("course_id", "courses"),
        _text("grade"),
        sa.Column("score", sa.Numeric(5, 2), nullable=True),
        _text("remarks"),
        sa.Column("issued_on", sa.Date(), nullable=True),
        tenant=True,
    )
    _create("timetable_templates", _text("name"), _text("description"), tenant=True)
    _create(
        "trainings",
        _text("name"),
        _text("description"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
    )
    _create(
        "events",
        _text("name"),
        _text("description"),
        _text("location"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
    )

    # Billing
    _create(
        "billing_cycles",
        _text("name"),
        _text("description"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("due_day", sa.Integer(), nullable=True),
        tenant=True,
    )
    _create(
        "discounts",
        _text("name"),
        _text("description"),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=True),
        sa.Column("valid_to", sa.Date(), nullable=True),
    )
    _create(
        "late_fees",
        _text("name"),
        _text("description"),
        sa.Column("amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("grace_period_days", sa.Integer(), nullable=True),
        _fk("billing_cycle_id", "billing_cycles"),
    )
    _create(
        "payment_methods",
        _text("name"),
        _text("description"),
        sa.Column("is_active", sa.Boolean(), nullable=True),
    )
    _create("payment_statuses", _text("name"), _text("code"), _text("description"))
    _create(
        "payment_terms",
        _text("name"),
        _text("description"),
        sa.Column("due_days", sa.Integer(), nullable=True),
        _fk("discount_id", "discounts"),
    )

    # Facilities
    _create(
        "archive_locations",
        _text("name"),
        _text("description"),
        _text("building"),
        _text("room"),
        _text("shelf_code"),
    )
    _create(
        "exam_rooms",
        _text("name"),
        _text("building"),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=True),
    )
    _create(
        "resources",
        _text("name"),
        _text("description"),
        _text("resource_type"),
        sa.Column("quantity", sa.Integer(), nullable=True),
        _fk("archive_location_id", "archive_locations"),
    )
    _create(
        "resource_bookings",
        _fk("resource_id", "resources"),
        sa.Column("booked_by", sa.Uuid(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        _text("purpose"),
        _text("status"),
    )
    _create(
        "resource_requests",
        _fk("resource_id", "resources"),
        sa.Column("requested_by", sa.Uuid(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        _text("reason"),
        _text("status"),
        sa.Column("requested_on", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    for table in reversed(TABLES):
        op.drop_table(table)
