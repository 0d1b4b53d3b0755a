"""
Organizer accounts: registration, login, public profile, followers and analytics.
"""

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from protest_tracker.core.logging import get_logger
from protest_tracker.core.metrics import record_auth_attempt, record_engagement
from protest_tracker.core.security import create_access_token, hash_password, verify_password
from protest_tracker.models import Organizer, Protest
from protest_tracker.schemas.organizer import OrganizerCreate, OrganizerLogin
from protest_tracker.services.counters import floored_add, step_for

logger = get_logger(__name__)


def _email_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Email already registered",
    )


async def register_organizer(db: AsyncSession, organizer_data: OrganizerCreate) -> tuple[Organizer, str]:
    """
    Create an organizer account and issue its first token.
    Raises 409 if the email is already registered.
    """
    result = await db.execute(select(Organizer.id).where(Organizer.email == organizer_data.email))
    if result.scalar_one_or_none() is not None:
        logger.warning("registration_failed", reason="email_exists", email=organizer_data.email)
        record_auth_attempt("register", "conflict")
        raise _email_taken()

    organizer = Organizer(
        name=organizer_data.name,
        email=organizer_data.email,
        password_hash=hash_password(organizer_data.password),
        bio=organizer_data.bio or "",
    )
    db.add(organizer)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        logger.warning("registration_failed", reason="unique_violation", email=organizer_data.email)
        record_auth_attempt("register", "conflict")
        raise _email_taken()
    await db.refresh(organizer)

    token = create_access_token(organizer.id, organizer.email)
    record_auth_attempt("register", "success")
    logger.info("organizer_registered", organizer_id=organizer.id, email=organizer.email)
    return organizer, token


async def authenticate_organizer(db: AsyncSession, login_data: OrganizerLogin) -> tuple[Organizer, str]:
    """
    Check credentials and issue a token.
    Raises 401 for an unknown email or a wrong password, without saying which.
    """
    result = await db.execute(select(Organizer).where(Organizer.email == login_data.email))
    organizer = result.scalar_one_or_none()

    if not organizer or not verify_password(login_data.password, organizer.password_hash):
        logger.warning("login_failed", email=login_data.email)
        record_auth_attempt("login", "invalid")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(organizer.id, organizer.email)
    record_auth_attempt("login", "success")
    logger.info("organizer_logged_in", organizer_id=organizer.id)
    return organizer, token


async def get_organizer(db: AsyncSession, organizer_id: int) -> Organizer:
    result = await db.execute(select(Organizer).where(Organizer.id == organizer_id))
    organizer = result.scalar_one_or_none()

    if not organizer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Organizer {organizer_id} not found",
        )
    return organizer


def require_self(organizer_id: int, current_organizer_id: int) -> None:
    """Organizer dashboards are private to their owner."""
    if organizer_id != current_organizer_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own dashboard",
        )


async def update_followers(db: AsyncSession, organizer_id: int, following: bool) -> int:
    """Move the follower counter by one, floored at zero. Returns the new count."""
    result = await db.execute(
        update(Organizer)
        .where(Organizer.id == organizer_id)
        .values(followers=floored_add(Organizer.followers, step_for(following)))
        .returning(Organizer.followers)
    )
    followers = result.scalar_one_or_none()

    if followers is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Organizer {organizer_id} not found",
        )

    record_engagement("organizer", following)
    logger.info("organizer_follow_updated", organizer_id=organizer_id, following=following, followers=followers)
    return followers


async def get_analytics(db: AsyncSession, organizer_id: int) -> dict:
    """Followers, likes summed over the organizer's protests, and social clicks."""
    organizer = await get_organizer(db, organizer_id)

    result = await db.execute(
        select(func.coalesce(func.sum(Protest.likes), 0)).where(Protest.organizer_id == organizer_id)
    )
    total_likes = int(result.scalar_one())

    return {
        "followers": organizer.followers,
        "total_likes": total_likes,
        "social_clicks": organizer.social_clicks,
    }
