from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jobboard.database import SessionLocal
from jobboard.models.session import AuthSession
from jobboard.models.user import User, UserRole
from jobboard.services import session_store


def _expire_all_sessions() -> None:
    with SessionLocal() as db:
        for record in db.query(AuthSession).all():
            record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.commit()


def test_session_store_round_trip() -> None:
    with SessionLocal() as db:
        token, record = session_store.create_session(db, {"user_id": 7}, ttl_seconds=3600)
        assert record.token_hash == session_store.hash_token(token)
        assert record.token_hash != token

        loaded = session_store.load_session(db, token)
        assert loaded is not None
        assert loaded.data == {"user_id": 7}

        assert session_store.load_session(db, "not-a-token") is None
        assert session_store.load_session(db, None) is None


def test_saving_data_does_not_extend_expiry() -> None:
    with SessionLocal() as db:
        token, record = session_store.create_session(db, {"user_id": 1}, ttl_seconds=3600)
        original_expiry = record.expires_at

    with SessionLocal() as db:
        assert session_store.save_session_data(db, token, {"user_id": 2}) is True

    with SessionLocal() as db:
        loaded = session_store.load_session(db, token)
        assert loaded.data == {"user_id": 2}
        assert loaded.expires_at == original_expiry


def test_expired_sessions_are_ignored_and_purged() -> None:
    with SessionLocal() as db:
        live_token, _ = session_store.create_session(db, {"user_id": 1}, ttl_seconds=3600)
        dead_token, dead = session_store.create_session(db, {"user_id": 2}, ttl_seconds=3600)
        dead.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        db.commit()

        assert session_store.load_session(db, dead_token) is None
        assert session_store.save_session_data(db, dead_token, {"user_id": 3}) is False
        assert session_store.purge_expired(db) == 1
        assert session_store.load_session(db, live_token) is not None
        assert db.query(AuthSession).count() == 1


def test_anonymous_pages_do_not_create_sessions(client) -> None:
    assert client.get("/").status_code == 200
    assert client.get("/login").status_code == 200
    assert client.get("/vacancies", follow_redirects=False).status_code == 303

    with SessionLocal() as db:
        assert db.query(AuthSession).count() == 0


def test_login_sets_opaque_http_only_cookie(client, make_user) -> None:
    user_id = make_user("erin")

    r = client.post("/login", data={"username": "erin", "password": "SecretPass123"}, follow_redirects=False)
    cookie = r.headers["set-cookie"]
    assert cookie.startswith("jobboard.sid=")
    assert "HttpOnly" in cookie
    assert "Max-Age=86400" in cookie
    token = cookie.split(";")[0].split("=", 1)[1]
    assert len(token) >= 32

    with SessionLocal() as db:
        records = db.query(AuthSession).all()
        assert len(records) == 1
        assert records[0].data == {"user_id": user_id}


def test_expired_session_is_logged_out(client, make_user, login) -> None:
    make_user("frank", role=UserRole.COMPANY)
    login(client, "frank")
    assert client.get("/vacancies").status_code == 200

    _expire_all_sessions()

    r = client.get("/vacancies", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/login"


def test_session_for_deleted_user_is_logged_out(client, make_user, login) -> None:
    user_id = make_user("gina")
    login(client, "gina")

    with SessionLocal() as db:
        db.query(User).filter(User.id == user_id).delete()
        db.commit()

    r = client.get("/vacancies", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/login"

    with SessionLocal() as db:
        assert db.query(AuthSession).count() == 0


def test_login_replaces_a_token_issued_before_it(client, make_user) -> None:
    user_id = make_user("hank")
    with SessionLocal() as db:
        planted, _ = session_store.create_session(db, {"oauth_state": "xyz"}, ttl_seconds=3600)

    r = client.post(
        "/login",
        data={"username": "hank", "password": "SecretPass123"},
        headers={"Cookie": f"jobboard.sid={planted}"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    token = r.headers["set-cookie"].split(";")[0].split("=", 1)[1]
    assert token != planted

    with SessionLocal() as db:
        assert session_store.load_session(db, planted) is None
        record = session_store.load_session(db, token)
        assert record is not None
        assert record.data["user_id"] == user_id
        assert db.query(AuthSession).count() == 1

    assert client.get("/vacancies").status_code == 200
