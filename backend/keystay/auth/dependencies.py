"""FastAPI authentication dependencies for owner-only routes."""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.auth.jwt import decode_token
from keystay.database import get_db
from keystay.models.user import User

# Strict bearer: FastAPI answers 403 when the header is missing
_bearer_scheme = HTTPBearer()

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def user_id_from_token(token: str, expected_type: str = "access") -> uuid.UUID | None:
    """Return the ``sub`` of a valid token of ``expected_type``, else ``None``."""
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    if payload.get("type") != expected_type:
        return None

    sub = payload.get("sub")
    if sub is None:
        return None
    try:
        return uuid.UUID(sub)
    except ValueError:
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the Bearer access token to a user.

    Raises:
        HTTPException 401: Bad or expired token, refresh token used, or unknown user.
    """
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("Could not validate credentials")

    return user


async def get_current_active_user(
    user: User = Depends(get_current_user),
) -> User:
    """Return the current user only if their account is active.

    Raises:
        HTTPException 403: If the user account is inactive.
    """
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return user
