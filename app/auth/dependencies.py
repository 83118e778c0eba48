import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from jose import JWTError
import uuid


from app.database import get_db
from app.models import User, UserRole
from app.auth.jwt import verify_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(token: str, db: AsyncSession) -> User:
    try:
        payload = verify_token(token, expected_type="access")
        user_id_str: str = payload.get("user_id")
        if not user_id_str:
            raise HTTPException(status_code=401, detail="Invalid token payload")

        user_id = uuid.UUID(user_id_str)

    except (JWTError, ValueError):  # ValueError for invalid UUID string
        logger.warning("Rejected access token")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the current logged-in User from the JWT access token.
    Raises 401 if token is invalid, expired, or user not found.
    """
    return await _user_from_token(credentials.credentials, db)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Same as get_current_user, but anonymous requests resolve to None.
    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return await _user_from_token(credentials.credentials, db)


async def is_teacher(current_user: User = Depends(get_current_user)) -> User:
    """
    Allow only users with INSTRUCTOR role.
    """
    if current_user.role != UserRole.INSTRUCTOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers can access this resource"
        )
    return current_user


def ensure_acting_as(current_user: User, claimed_user_id: Optional[uuid.UUID]) -> uuid.UUID:
    """
    Bodies may name the acting user; it has to be the authenticated one.
    """
    if claimed_user_id is not None and claimed_user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only act on your own behalf"
        )
    return current_user.id
