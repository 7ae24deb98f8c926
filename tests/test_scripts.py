from __future__ import annotations

import importlib.util
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from jobboard.database import SessionLocal
from jobboard.models.session import AuthSession
from jobboard.services import session_store


SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name: str):
    spec = importlib.util.spec_from_file_location(f"scripts_{name}", SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _add_expired_session(db: Session) -> None:
    _token, record = session_store.create_session(db, {"user_id": 1}, ttl_seconds=60)
    record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=5)
    db.commit()


def test_create_tables_requires_safety_flag(tmp_path) -> None:
    create_tables = _load_script("create_tables")
    target = tmp_path / "refused.db"

    assert create_tables.main(["--db-url", f"sqlite:///{target}"]) == 2
    assert not target.exists()


def test_create_tables_purges_sessions_on_target_db_only(tmp_path) -> None:
    create_tables = _load_script("create_tables")
    target_url = f"sqlite:///{tmp_path / 'other.db'}"

    # Expired session in the process-wide DB must survive.
    with SessionLocal() as db:
        _add_expired_session(db)

    assert create_tables.main(["--i-understand", "--db-url", target_url]) == 0
    target_engine = create_engine(target_url, future=True)
    try:
        with Session(bind=target_engine) as db:
            _add_expired_session(db)
            _add_expired_session(db)

        assert create_tables.main(["--i-understand", "--db-url", target_url, "--purge-sessions"]) == 0

        with Session(bind=target_engine) as db:
            assert db.query(AuthSession).count() == 0
    finally:
        target_engine.dispose()

    with SessionLocal() as db:
        assert db.query(AuthSession).count() == 1
