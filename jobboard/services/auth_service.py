# auth_service.py
import logging
from typing import Any, MutableMapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.errors import InvalidCredentials, UnknownProvider, UsernameTaken
from jobboard.models.user import EXTERNAL_ID_FIELDS, User, UserRole
from jobboard.utils.password_hash import hash_password, verify_password


logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"

# bcrypt only looks at the first 72 bytes of a password.
_MAX_PASSWORD_BYTES = 72


def authenticate_local(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("auth.local failed username=%s", username)
        raise InvalidCredentials()
    return user


def register_local_user(db: Session, username: str, password: str, role: UserRole = UserRole.CANDIDATE) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise InvalidCredentials("Username and password are required")
    if len(password.encode("utf-8")) > _MAX_PASSWORD_BYTES:
        raise InvalidCredentials("Password is too long")
    if db.query(User).filter(User.username == username).first() is not None:
        raise UsernameTaken(username)

    user = User(username=username, password_hash=hash_password(password), role=UserRole(role).value)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UsernameTaken(username) from exc
    db.refresh(user)
    logger.info("auth.signup user_id=%s role=%s", user.id, user.role)
    return user


def external_id_field(provider: str) -> str:
    try:
        return EXTERNAL_ID_FIELDS[provider]
    except KeyError as exc:
        raise UnknownProvider(provider) from exc


def find_or_create_external_user(db: Session, provider: str, subject_id: str) -> User:
    """Return the user bound to ``provider``/``subject_id``, creating it on first login.

    A new user only carries the provider's id column and the default role. The
    insert leans on the column's unique constraint: if a concurrent login wins
    the race, the rollback path returns that row instead of a duplicate.
    """
    field = external_id_field(provider)
    column = getattr(User, field)
    subject_id = str(subject_id)

    found = db.query(User).filter(column == subject_id).first()
    if found is not None:
        return found

    user = User(role=UserRole.CANDIDATE.value, **{field: subject_id})
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = db.query(User).filter(column == subject_id).first()
        if existing is None:
            raise
        return existing
    db.refresh(user)
    logger.info("auth.external created user_id=%s provider=%s", user.id, provider)
    return user


def login_session(session: MutableMapping[str, Any], user: User) -> None:
    session[SESSION_USER_KEY] = user.id


def logout_session(session: MutableMapping[str, Any]) -> None:
    session.clear()


def session_user_id(session: MutableMapping[str, Any]) -> int | None:
    raw = session.get(SESSION_USER_KEY)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None
