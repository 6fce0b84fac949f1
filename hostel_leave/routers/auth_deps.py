"""
Caller resolution and role checks for FastAPI endpoints.

Authentication happens upstream; the gateway forwards the authenticated
user's id in the actor header (settings.actor_id_header).
"""
import logging
from typing import Callable, List, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from hostel_leave.core.config import settings
from hostel_leave.core.exceptions import AccessDeniedError, AuthenticationError
from hostel_leave.database import get_db
from hostel_leave.models.user import User, UserRole

logger = logging.getLogger(__name__)


def get_current_user(
    actor_id: Optional[str] = Header(default=None, alias=settings.actor_id_header),
    db: Session = Depends(get_db),
) -> User:
    if not actor_id or not actor_id.isdigit():
        logger.warning("Caller resolution failed: missing or malformed actor header")
        raise AuthenticationError()

    user = db.query(User).filter(User.id == int(actor_id)).first()
    if user is None:
        logger.warning(f"Caller resolution failed: user {actor_id} not found")
        raise AuthenticationError("User not found")
    return user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.post("/override")
        def override(user: User = Depends(require_role([UserRole.ADMIN]))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise AccessDeniedError(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


require_admin = require_role([UserRole.ADMIN])
require_staff = require_role([UserRole.STAFF])
require_parent = require_role([UserRole.PARENT])
require_student = require_role([UserRole.STUDENT])
