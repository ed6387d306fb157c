"""Tests for reference data seeding."""

from sqlalchemy import func, select

from src.db.models import AccessLevel, PaymentMethod, PaymentStatus
from src.db.seed import ACCESS_LEVELS, seed_reference_data


async def test_seed_inserts_reference_rows(db_session):
    counts = await seed_reference_data(db_session)
    assert counts == {"access_levels": 4, "payment_statuses": 4, "payment_methods": 3}

    names = (await db_session.execute(select(AccessLevel.name).order_by(AccessLevel.level))).scalars().all()
    assert names == [row["name"] for row in ACCESS_LEVELS]


async def test_seed_is_idempotent(db_session):
    await seed_reference_data(db_session)
    again = await seed_reference_data(db_session)
    assert set(again.values()) == {0}

    for model, expected in ((AccessLevel, 4), (PaymentStatus, 4), (PaymentMethod, 3)):
        total = await db_session.scalar(select(func.count()).select_from(model))
        assert total == expected


async def test_seed_fills_only_missing_rows(db_session):
    db_session.add(PaymentMethod(name="Cash", is_active=False))
    await db_session.commit()

    counts = await seed_reference_data(db_session)
    assert counts["payment_methods"] == 2
    cash = (await db_session.execute(select(PaymentMethod).where(PaymentMethod.name == "Cash"))).scalar_one()
    assert cash.is_active is False
