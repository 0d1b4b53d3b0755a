"""
Organizer endpoints: registration, login, public profile, dashboard and follows.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from protest_tracker.core.security import get_current_organizer_id
from protest_tracker.db.session import get_db
from protest_tracker.schemas.organizer import (
    AnalyticsResponse,
    AuthResponse,
    FollowRequest,
    FollowResponse,
    OrganizerCreate,
    OrganizerLogin,
    OrganizerProfile,
    OrganizerPublic,
)
from protest_tracker.schemas.protest import ProtestResponse
from protest_tracker.services.organizer_service import (
    authenticate_organizer,
    get_analytics,
    get_organizer,
    register_organizer,
    require_self,
    update_followers,
)
from protest_tracker.services.protest_service import list_organizer_protests

router = APIRouter(prefix="/organizers", tags=["Organizers"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(organizer_data: OrganizerCreate, db: AsyncSession = Depends(get_db)):
    """Create an organizer account. The response carries a bearer token."""
    organizer, token = await register_organizer(db, organizer_data)
    return AuthResponse(
        message="Registration successful",
        token=token,
        organizer_id=organizer.id,
        organizer=OrganizerPublic.model_validate(organizer),
    )


@router.post("/login", response_model=AuthResponse)
async def login(login_data: OrganizerLogin, db: AsyncSession = Depends(get_db)):
    organizer, token = await authenticate_organizer(db, login_data)
    return AuthResponse(
        message="Login successful",
        token=token,
        organizer_id=organizer.id,
        organizer=OrganizerPublic.model_validate(organizer),
    )


@router.get("/{organizer_id}", response_model=OrganizerProfile)
async def get_organizer_endpoint(organizer_id: int, db: AsyncSession = Depends(get_db)):
    """Public profile. Never includes the password digest."""
    return await get_organizer(db, organizer_id)


@router.get("/{organizer_id}/protests", response_model=list[ProtestResponse])
async def list_own_protests(
    organizer_id: int,
    current_organizer_id: int = Depends(get_current_organizer_id),
    db: AsyncSession = Depends(get_db),
):
    """The caller's own protests, soonest first."""
    require_self(organizer_id, current_organizer_id)
    return await list_organizer_protests(db, organizer_id)


@router.get("/{organizer_id}/analytics", response_model=AnalyticsResponse)
async def organizer_analytics(
    organizer_id: int,
    current_organizer_id: int = Depends(get_current_organizer_id),
    db: AsyncSession = Depends(get_db),
):
    require_self(organizer_id, current_organizer_id)
    return await get_analytics(db, organizer_id)


@router.post("/{organizer_id}/follow", response_model=FollowResponse)
async def follow_organizer(
    organizer_id: int,
    follow_data: FollowRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Follow (`following: true`) or unfollow (`following: false`) an organizer.

    Public and stateless: every call moves the counter by one, never below zero.
    """
    followers = await update_followers(db, organizer_id, follow_data.following)
    return FollowResponse(followers=followers)
