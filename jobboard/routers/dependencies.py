# dependencies.py
import logging
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.errors import LoginRequired, RoleRequired
from jobboard.models.user import User, UserRole
from jobboard.services.auth_service import SESSION_USER_KEY, session_user_id


logger = logging.getLogger(__name__)


# Operation -> role required to perform it (None: any authenticated user).
ACCESS_RULES: dict[str, UserRole | None] = {
    "vacancy.create_form": UserRole.COMPANY,
    "vacancy.create": UserRole.COMPANY,
    "vacancy.details": None,
    "vacancy.list": None,
    "vacancy.filter": None,
    "vacancy.edit_form": UserRole.COMPANY,
    "vacancy.update": UserRole.COMPANY,
    "vacancy.delete": UserRole.COMPANY,
}


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    user_id = session_user_id(request.session)
    if user_id is None:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        # Session points at a user that no longer exists.
        request.session.pop(SESSION_USER_KEY, None)
    return user


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise LoginRequired()
    return user


def require_access(operation: str) -> Callable[..., User]:
    required = ACCESS_RULES[operation]

    def _check(current_user: User = Depends(get_current_user)) -> User:
        if required is not None and current_user.role != required.value:
            logger.info("access.denied op=%s user_id=%s role=%s", operation, current_user.id, current_user.role)
            raise RoleRequired(required.value, current_user.role)
        return current_user

    return _check
