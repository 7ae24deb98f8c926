# main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse

from jobboard.config import Settings, build_sqlalchemy_db_url, get_settings, provider_credentials
from jobboard import database
from jobboard.errors import LoginRequired, RoleRequired
from jobboard.middleware import ServerSessionMiddleware
from jobboard.oauth import build_oauth
from jobboard.routers import auth, health, vacancies
import jobboard.models  # noqa: F401  # ensure all models are registered


logger = logging.getLogger(__name__)


def _redirect_to_login(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


def _redirect_to_listing(request: Request, exc: RoleRequired) -> RedirectResponse:
    # Wrong role degrades to the listing page rather than an error status.
    return RedirectResponse(vacancies.LIST_URL, status_code=status.HTTP_303_SEE_OTHER)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        docs_url="/api-docs",
        redoc_url=None,
        swagger_ui_parameters={"supportedSubmitMethods": []},
    )
    application.state.settings = settings
    application.state.oauth = build_oauth(settings)

    application.add_middleware(
        ServerSessionMiddleware,
        cookie_name=settings.session_cookie_name,
        ttl_seconds=settings.session_ttl_seconds,
        https_only=settings.session_cookie_secure,
    )
    application.add_exception_handler(LoginRequired, _redirect_to_login)
    application.add_exception_handler(RoleRequired, _redirect_to_listing)

    application.include_router(health.router)
    application.include_router(auth.router)
    application.include_router(vacancies.router)

    db_url = build_sqlalchemy_db_url(settings)
    engine = database.configure_engine(db_url)
    # Auto-create tables for local sqlite usage only.
    if db_url.startswith("sqlite"):
        database.Base.metadata.create_all(bind=engine)
    logger.info("app created env=%s providers=%s", settings.environment, sorted(provider_credentials(settings)))
    return application


app = create_app()
