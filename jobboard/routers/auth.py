# auth.py
import logging
from typing import Annotated

import httpx
from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from jobboard.config import provider_credentials
from jobboard.database import get_db
from jobboard.errors import InvalidCredentials, UsernameTaken
from jobboard.models.user import EXTERNAL_ID_FIELDS, User, UserRole
from jobboard.oauth import callback_url, fetch_subject_id
from jobboard.routers.dependencies import get_optional_user
from jobboard.schemas.user import LoginForm, SignupForm
from jobboard.services.auth_service import (
    authenticate_local,
    find_or_create_external_user,
    login_session,
    logout_session,
    register_local_user,
)
from jobboard.templating import templates


router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _login_page(request: Request, *, error: str | None = None, username: str = "") -> HTMLResponse:
    providers = sorted(provider_credentials(request.app.state.settings))
    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {"user": None, "error": error, "username": username, "providers": providers},
    )


def _signup_page(request: Request, *, error: str | None = None) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "auth/signup.html", {"user": None, "error": error, "roles": [r.value for r in UserRole]}
    )


def _oauth_client(request: Request, provider: str):
    client = request.app.state.oauth.create_client(provider) if provider in EXTERNAL_ID_FIELDS else None
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown identity provider")
    return client


async def resolve_external_subject(request: Request, provider: str) -> str:
    """Finish the provider handshake and return the provider's subject id."""
    client = _oauth_client(request, provider)
    token = await client.authorize_access_token(request)
    return await fetch_subject_id(client, provider, token)


@router.get("/", response_class=HTMLResponse)
def index(request: Request, user: User | None = Depends(get_optional_user)):
    return templates.TemplateResponse(request, "index.html", {"user": user})


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return _login_page(request)


@router.post("/login")
def login(request: Request, form: Annotated[LoginForm, Form()], db: Session = Depends(get_db)):
    try:
        user = authenticate_local(db, form.username, form.password)
    except InvalidCredentials as exc:
        return _login_page(request, error=exc.message, username=form.username)
    login_session(request.session, user)
    return _redirect("/vacancies")


@router.get("/signup", response_class=HTMLResponse)
def signup_form(request: Request):
    return _signup_page(request)


@router.post("/signup")
def signup(request: Request, form: Annotated[SignupForm, Form()], db: Session = Depends(get_db)):
    try:
        user = register_local_user(db, form.username, form.password, form.role)
    except InvalidCredentials as exc:
        return _signup_page(request, error=exc.message)
    except UsernameTaken:
        return _signup_page(request, error="Username already taken")
    login_session(request.session, user)
    return _redirect("/vacancies")


@router.api_route("/logout", methods=["GET", "POST"])
def logout(request: Request):
    logout_session(request.session)
    return _redirect("/")


@router.get("/auth/{provider}")
async def oauth_start(provider: str, request: Request):
    client = _oauth_client(request, provider)
    return await client.authorize_redirect(request, callback_url(request.app.state.settings, provider))


@router.get("/auth/{provider}/callback")
async def oauth_callback(provider: str, request: Request, db: Session = Depends(get_db)):
    if provider not in EXTERNAL_ID_FIELDS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown identity provider")
    try:
        subject_id = await resolve_external_subject(request, provider)
    except (OAuthError, httpx.HTTPError, KeyError, IndexError) as exc:
        logger.info("auth.external handshake failed provider=%s error=%s", provider, exc)
        return _redirect("/login")

    user = await run_in_threadpool(find_or_create_external_user, db, provider, subject_id)
    login_session(request.session, user)
    return _redirect("/vacancies")
