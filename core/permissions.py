# app/core/permissions.py
import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.exceptions import AuthenticationError, AuthorizationError
from core.security import decode_token, oauth2_scheme
from models.user import User, UserRole

logger = logging.getLogger(__name__)


async def get_current_user(
        token: Optional[str] = Depends(oauth2_scheme),
        db: AsyncSession = Depends(get_db),
) -> User:

    if not token:
        raise AuthenticationError("Not authorized, no token")

    try:
        user_id = int(decode_token(token))
    except (AuthenticationError, ValueError) as e:
        logger.warning(f"Invalid token: {e}")
        raise AuthenticationError("Not authorized, token failed")

    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationError("Not authorized, user not found")

    return user


def require_roles(*roles_allowed):
    def wrapper(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles_allowed:
            raise AuthorizationError("Not authorized as admin")
        return user
    return wrapper


require_admin = require_roles(UserRole.ADMIN)


# ---------- ownership ----------

def is_owner_or_admin(user: User, owner_id: Optional[int]) -> bool:
    """The one rule for mutating owned entities: creator or admin."""
    return user.is_admin or (owner_id is not None and owner_id == user.id)


def ensure_owner_or_admin(user: User, owner_id: Optional[int], action: str) -> None:
    if not is_owner_or_admin(user, owner_id):
        logger.warning(f"User {user.id} denied: {action}")
        raise AuthorizationError(f"Not authorized to {action}")
