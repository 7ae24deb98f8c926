"""Server-side session middleware.

The browser only holds an opaque token; the payload lives in ``auth_sessions``.
The payload is exposed as ``request.session`` so anything written for
Starlette's signed-cookie sessions (including the OAuth client) works unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from jobboard.database import SessionLocal
from jobboard.services import session_store
from jobboard.services.auth_service import SESSION_USER_KEY


logger = logging.getLogger(__name__)


class ServerSessionMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        cookie_name: str,
        ttl_seconds: int,
        https_only: bool = False,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        super().__init__(app)
        self.cookie_name = cookie_name
        self.ttl_seconds = ttl_seconds
        self.https_only = https_only
        self.session_factory = session_factory

    def _load(self, token: str | None) -> dict[str, Any] | None:
        with self.session_factory() as db:
            record = session_store.load_session(db, token)
            return dict(record.data or {}) if record is not None else None

    def _create(self, data: dict[str, Any]) -> str:
        with self.session_factory() as db:
            token, _record = session_store.create_session(db, data, self.ttl_seconds)
            return token

    def _save(self, token: str, data: dict[str, Any]) -> bool:
        with self.session_factory() as db:
            return session_store.save_session_data(db, token, data)

    def _delete(self, token: str) -> None:
        with self.session_factory() as db:
            session_store.delete_session(db, token)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        token = request.cookies.get(self.cookie_name)
        stored = await run_in_threadpool(self._load, token)
        stale_cookie = token is not None and stored is None
        if stored is None:
            token = None

        initial = dict(stored or {})
        request.scope["session"] = dict(initial)

        response = await call_next(request)

        current = dict(request.scope.get("session") or {})
        if current == initial:
            if stale_cookie:
                self._clear_cookie(response)
            return response

        if not current:
            if token is not None:
                await run_in_threadpool(self._delete, token)
            self._clear_cookie(response)
        elif token is None:
            token = await run_in_threadpool(self._create, current)
            self._set_cookie(response, token)
        elif current.get(SESSION_USER_KEY) != initial.get(SESSION_USER_KEY):
            # A login or account switch never keeps a token issued before it.
            await run_in_threadpool(self._delete, token)
            token = await run_in_threadpool(self._create, current)
            self._set_cookie(response, token)
        else:
            saved = await run_in_threadpool(self._save, token, current)
            if not saved:
                # Expired between load and save; start over with a fresh record.
                token = await run_in_threadpool(self._create, current)
                self._set_cookie(response, token)
        return response

    def _set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=self.ttl_seconds,
            path="/",
            secure=self.https_only,
            httponly=True,
            samesite="lax",
        )

    def _clear_cookie(self, response: Response) -> None:
        response.delete_cookie(self.cookie_name, path="/", secure=self.https_only, httponly=True, samesite="lax")
