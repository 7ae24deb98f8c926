# session_store.py
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from jobboard.models.session import AuthSession


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def new_token() -> str:
    return secrets.token_urlsafe(32)


def create_session(db: Session, data: dict[str, Any], ttl_seconds: int) -> tuple[str, AuthSession]:
    token = new_token()
    record = AuthSession(
        token_hash=hash_token(token),
        data=dict(data),
        expires_at=_utc_now() + timedelta(seconds=ttl_seconds),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return token, record


def load_session(db: Session, token: str | None) -> AuthSession | None:
    if not token:
        return None
    return (
        db.query(AuthSession)
        .filter(AuthSession.token_hash == hash_token(token))
        .filter(AuthSession.expires_at > _utc_now())
        .first()
    )


def save_session_data(db: Session, token: str, data: dict[str, Any]) -> bool:
    # Expiry is fixed at creation; writes never extend it.
    record = load_session(db, token)
    if record is None:
        return False
    record.data = dict(data)
    db.commit()
    return True


def delete_session(db: Session, token: str | None) -> None:
    if not token:
        return
    db.query(AuthSession).filter(AuthSession.token_hash == hash_token(token)).delete(synchronize_session=False)
    db.commit()


def purge_expired(db: Session) -> int:
    removed = db.query(AuthSession).filter(AuthSession.expires_at <= _utc_now()).delete(synchronize_session=False)
    db.commit()
    return int(removed or 0)
