"""
Password hashing (bcrypt) and bearer token handling (PyJWT).

Tokens carry the organizer id as a string `sub` claim and expire after
ACCESS_TOKEN_EXPIRE_DAYS. Clients present them as `Authorization: Bearer <token>`.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from protest_tracker.core.config import get_settings
from protest_tracker.core.logging import get_logger

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return digest.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored digest
        return False


def create_access_token(organizer_id: int, email: Optional[str] = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(organizer_id),
        "iat": now,
        "exp": now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises:
        jwt.InvalidTokenError: if the token is malformed, tampered or expired.
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


async def get_current_organizer_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> int:
    """
    Resolve the authenticated organizer id from the bearer token.

    401 when no bearer token is supplied, 403 when it does not verify.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(credentials.credentials)
        return int(claims["sub"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        logger.warning("token_rejected", reason=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )
