"""
Database seeding utilities for minimal reference data.

Seeds:
- Access levels (Basic, Staff, Manager, Administrator)
- Payment statuses (Pending, Paid, Overdue, Cancelled)
- Payment methods (Cash, Card, Bank Transfer)

Rows are matched by name, so running the seed again inserts nothing new.

Usage:
  python -m src.db.run_migrations upgrade head
  python -m src.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Type
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import Base
from src.db.models import AccessLevel, PaymentMethod, PaymentStatus
from src.db.session import get_async_session

logger = logging.getLogger(__name__)

ACCESS_LEVELS: List[Dict[str, Any]] = [
    {"name": "Basic", "description": "Read-only access", "level": 1},
    {"name": "Staff", "description": "Day-to-day staff access", "level": 2},
    {"name": "Manager", "description": "Department manager access", "level": 3},
    {"name": "Administrator", "description": "Full administrative access", "level": 4},
]

PAYMENT_STATUSES: List[Dict[str, Any]] = [
    {"name": "Pending", "code": "PENDING", "description": "Awaiting payment"},
    {"name": "Paid", "code": "PAID", "description": "Payment received"},
    {"name": "Overdue", "code": "OVERDUE", "description": "Past the due date"},
    {"name": "Cancelled", "code": "CANCELLED", "description": "No longer payable"},
]

PAYMENT_METHODS: List[Dict[str, Any]] = [
    {"name": "Cash", "description": "Paid at the front office", "is_active": True},
    {"name": "Card", "description": "Credit or debit card", "is_active": True},
    {"name": "Bank Transfer", "description": "Direct bank transfer", "is_active": True},
]


async def _seed_rows(session: AsyncSession, model: Type[Base], rows: List[Dict[str, Any]]) -> int:
    """Insert rows whose name is not present yet; return how many were added."""
    res = await session.execute(select(model.name))
    existing = set(res.scalars())
    now = datetime.now(tz=timezone.utc)
    added = 0
    for row in rows:
        if row["name"] in existing:
            continue
        session.add(model(id=uuid4(), created_on=now, **row))
        added += 1
    return added


# PUBLIC_INTERFACE
async def seed_reference_data(session: AsyncSession) -> Dict[str, int]:
    """
    Insert reference data that is missing and commit.

    Returns:
        Mapping of table name to number of rows inserted.
    """
    counts = {
        AccessLevel.__tablename__: await _seed_rows(session, AccessLevel, ACCESS_LEVELS),
        PaymentStatus.__tablename__: await _seed_rows(session, PaymentStatus, PAYMENT_STATUSES),
        PaymentMethod.__tablename__: await _seed_rows(session, PaymentMethod, PAYMENT_METHODS),
    }
    await session.commit()
    logger.info("Seeded reference data: %s", counts)
    return counts


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """Seed the database with minimal reference data using the app's engine."""
    async for session in get_async_session():
        await seed_reference_data(session)


# PUBLIC_INTERFACE
def main() -> None:
    """Entrypoint to run the asynchronous seeding."""
    asyncio.run(seed_all())


if __name__ == "__main__":
    main()
