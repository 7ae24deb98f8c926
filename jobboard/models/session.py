# session.py
from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.sql import func
from jobboard.database import Base


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(Integer, primary_key=True, index=True)
    # sha256 of the cookie token; the raw token is never stored.
    token_hash = Column(String(64), unique=True, index=True, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), index=True, nullable=False)
