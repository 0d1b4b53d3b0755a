"""
Protest endpoints: public listing and likes, owner-only create/edit/delete.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from protest_tracker.core.security import get_current_organizer_id
from protest_tracker.db.session import get_db
from protest_tracker.models import Protest
from protest_tracker.schemas.protest import (
    LikeRequest,
    LikeResponse,
    ProtestCreate,
    ProtestDeleteResponse,
    ProtestListItem,
    ProtestListResponse,
    ProtestResponse,
    ProtestUpdate,
)
from protest_tracker.services.protest_service import (
    create_protest,
    delete_protest,
    estimate_attendees,
    get_protest,
    list_protests,
    update_likes,
    update_protest,
)

router = APIRouter(prefix="/protests", tags=["Protests"])


def _list_item(protest: Protest, organizer_name: str) -> ProtestListItem:
    return ProtestListItem(
        **ProtestResponse.model_validate(protest).model_dump(),
        organizer_name=organizer_name,
        attendees=estimate_attendees(protest.likes),
    )


@router.get("", response_model=ProtestListResponse)
async def list_protests_endpoint(
    upcoming: bool = Query(False, description="Only protests dated today or later"),
    db: AsyncSession = Depends(get_db),
):
    """All protests ordered by date, then time."""
    rows = await list_protests(db, upcoming_only=upcoming)
    return ProtestListResponse(protests=[_list_item(protest, name) for protest, name in rows])


@router.post("", response_model=ProtestResponse, status_code=status.HTTP_201_CREATED)
async def create_protest_endpoint(
    protest_data: ProtestCreate,
    organizer_id: int = Depends(get_current_organizer_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a protest owned by the authenticated organizer."""
    return await create_protest(db, protest_data, organizer_id)


@router.get("/{protest_id}", response_model=ProtestListItem)
async def get_protest_endpoint(protest_id: int, db: AsyncSession = Depends(get_db)):
    protest, organizer_name = await get_protest(db, protest_id)
    return _list_item(protest, organizer_name)


@router.put("/{protest_id}", response_model=ProtestResponse)
async def update_protest_endpoint(
    protest_id: int,
    protest_data: ProtestUpdate,
    organizer_id: int = Depends(get_current_organizer_id),
    db: AsyncSession = Depends(get_db),
):
    """Replace a protest's editable fields. 404 if missing, 403 if not yours."""
    return await update_protest(db, protest_id, organizer_id, protest_data)


@router.delete("/{protest_id}", response_model=ProtestDeleteResponse)
async def delete_protest_endpoint(
    protest_id: int,
    organizer_id: int = Depends(get_current_organizer_id),
    db: AsyncSession = Depends(get_db),
):
    deleted_id = await delete_protest(db, protest_id, organizer_id)
    return ProtestDeleteResponse(message="Protest deleted successfully", protest_id=deleted_id)


@router.post("/{protest_id}/like", response_model=LikeResponse)
async def like_protest(
    protest_id: int,
    like_data: LikeRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Like (`liked: true`) or unlike (`liked: false`) a protest.

    Public and stateless: every call moves the counter by one, never below zero.
    """
    likes = await update_likes(db, protest_id, like_data.liked)
    return LikeResponse(likes=likes)
