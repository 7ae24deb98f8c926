from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"

    # No OAuth provider is configured; tests patch the handshake directly.
    for name in (
        "GITHUB_CLIENT_ID",
        "GITHUB_CLIENT_SECRET",
        "GOOGLE_CLIENT_ID",
        "GOOGLE_CLIENT_SECRET",
        "LINKEDIN_CLIENT_ID",
        "LINKEDIN_CLIENT_SECRET",
        "XING_CONSUMER_KEY",
        "XING_CONSUMER_SECRET",
    ):
        os.environ.pop(name, None)


@pytest.fixture(autouse=True)
def reset_database() -> None:
    from jobboard.database import Base, engine
    import jobboard.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def client() -> Any:
    from jobboard.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user():
    from jobboard.database import SessionLocal
    from jobboard.models.user import User, UserRole
    from jobboard.utils.password_hash import hash_password

    def _make_user(
        username: str | None = None,
        *,
        password: str = "SecretPass123",
        role: UserRole = UserRole.CANDIDATE,
        **fields: Any,
    ) -> int:
        with SessionLocal() as db:
            user = User(
                username=username,
                password_hash=hash_password(password) if username else None,
                role=role.value,
                **fields,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return user.id

    return _make_user


@pytest.fixture()
def login():
    def _login(client: TestClient, username: str, password: str = "SecretPass123") -> None:
        r = client.post("/login", data={"username": username, "password": password}, follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/vacancies"

    return _login
