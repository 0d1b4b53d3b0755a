"""
Protest service handling listings, owner-only edits and likes.

OWNERSHIP CHECKS
================

Edits and deletes are a single conditional statement:

  UPDATE protests SET ... WHERE id = :id AND organizer_id = :caller RETURNING *

If no row comes back, a follow-up read decides between 404 (no such protest)
and 403 (someone else's protest). The follow-up read never leads to a write,
so there is no window in which ownership can change between the check and
the mutation.
"""

import math
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from protest_tracker.core.logging import get_logger
from protest_tracker.core.metrics import record_engagement, record_protest_write
from protest_tracker.models import Organizer, Protest
from protest_tracker.schemas.protest import ProtestBase
from protest_tracker.services.counters import floored_add, step_for

logger = get_logger(__name__)

ATTENDEES_PER_LIKE = 3.5


def estimate_attendees(likes: int) -> int:
    return math.floor(likes * ATTENDEES_PER_LIKE)


def _to_decimal(value: Optional[float]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(round(value, 7)))


def _column_values(protest_data: ProtestBase) -> dict:
    values = protest_data.model_dump()
    values["latitude"] = _to_decimal(protest_data.latitude)
    values["longitude"] = _to_decimal(protest_data.longitude)
    return values


def _chronological(query):
    return query.order_by(Protest.date.asc(), Protest.time.asc(), Protest.id.asc())


async def list_protests(db: AsyncSession, upcoming_only: bool = False) -> list[tuple[Protest, str]]:
    """All protests with their organizer's name, soonest first."""
    query = select(Protest, Organizer.name).join(Organizer, Protest.organizer_id == Organizer.id)

    if upcoming_only:
        query = query.where(Protest.date >= func.current_date())

    result = await db.execute(_chronological(query))
    return [(protest, organizer_name) for protest, organizer_name in result.all()]


async def get_protest(db: AsyncSession, protest_id: int) -> tuple[Protest, str]:
    result = await db.execute(
        select(Protest, Organizer.name)
        .join(Organizer, Protest.organizer_id == Organizer.id)
        .where(Protest.id == protest_id)
    )
    row = result.one_or_none()

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Protest {protest_id} not found",
        )
    return row[0], row[1]


async def list_organizer_protests(db: AsyncSession, organizer_id: int) -> list[Protest]:
    result = await db.execute(_chronological(select(Protest).where(Protest.organizer_id == organizer_id)))
    return list(result.scalars().all())


async def create_protest(db: AsyncSession, protest_data: ProtestBase, organizer_id: int) -> Protest:
    protest = Protest(organizer_id=organizer_id, **_column_values(protest_data))
    db.add(protest)
    await db.flush()
    await db.refresh(protest)

    record_protest_write("create")
    logger.info("protest_created", protest_id=protest.id, organizer_id=organizer_id, date=str(protest.date))
    return protest


async def _raise_missing_or_forbidden(db: AsyncSession, protest_id: int, action: str) -> None:
    result = await db.execute(select(Protest.organizer_id).where(Protest.id == protest_id))
    owner_id = result.scalar_one_or_none()

    if owner_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Protest {protest_id} not found",
        )

    logger.warning("protest_ownership_denied", protest_id=protest_id, owner_id=owner_id, action=action)
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"You can only {action} your own protests",
    )


async def update_protest(
    db: AsyncSession,
    protest_id: int,
    organizer_id: int,
    protest_data: ProtestBase,
) -> Protest:
    """Overwrite every editable field. Owner only."""
    result = await db.execute(
        update(Protest)
        .where(Protest.id == protest_id, Protest.organizer_id == organizer_id)
        .values(**_column_values(protest_data))
        .returning(Protest)
    )
    protest = result.scalar_one_or_none()

    if protest is None:
        await _raise_missing_or_forbidden(db, protest_id, "edit")

    record_protest_write("update")
    logger.info("protest_updated", protest_id=protest_id, organizer_id=organizer_id)
    return protest


async def delete_protest(db: AsyncSession, protest_id: int, organizer_id: int) -> int:
    """Delete a protest. Owner only."""
    result = await db.execute(
        delete(Protest)
        .where(Protest.id == protest_id, Protest.organizer_id == organizer_id)
        .returning(Protest.id)
    )
    deleted_id = result.scalar_one_or_none()

    if deleted_id is None:
        await _raise_missing_or_forbidden(db, protest_id, "delete")

    record_protest_write("delete")
    logger.info("protest_deleted", protest_id=protest_id, organizer_id=organizer_id)
    return deleted_id


async def update_likes(db: AsyncSession, protest_id: int, liked: bool) -> int:
    """Move the like counter by one, floored at zero. Returns the new count."""
    result = await db.execute(
        update(Protest)
        .where(Protest.id == protest_id)
        .values(likes=floored_add(Protest.likes, step_for(liked)))
        .returning(Protest.likes)
    )
    likes = result.scalar_one_or_none()

    if likes is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Protest {protest_id} not found",
        )

    record_engagement("protest", liked)
    logger.info("protest_like_updated", protest_id=protest_id, liked=liked, likes=likes)
    return likes
