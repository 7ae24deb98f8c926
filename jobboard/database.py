# database.py
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from jobboard.config import build_sqlalchemy_db_url, settings


logger = logging.getLogger(__name__)


def _build_connect_args(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def mask_db_url(db_url: str) -> str:
    try:
        return str(make_url(db_url).set(password="***"))
    except Exception:
        return db_url


def _make_engine(db_url: str) -> Engine:
    logger.info("SQLAlchemy ORM db_url=%s", mask_db_url(db_url))
    return create_engine(db_url, pool_pre_ping=True, future=True, connect_args=_build_connect_args(db_url))


_db_url = build_sqlalchemy_db_url(settings)
engine = _make_engine(_db_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def configure_engine(db_url: str) -> Engine:
    """Rebind ``engine`` and ``SessionLocal`` to ``db_url``.

    Callers must read ``database.engine`` at call time rather than importing
    the name. Binding to the current URL again is a no-op.
    """
    global engine, _db_url
    if db_url == _db_url:
        return engine
    previous = engine
    engine = _make_engine(db_url)
    _db_url = db_url
    SessionLocal.configure(bind=engine)
    previous.dispose()
    return engine
