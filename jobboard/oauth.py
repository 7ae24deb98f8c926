"""OAuth client registry for the external identity providers.

Each provider is registered with credentials taken from ``Settings`` and
resolves to a single stable subject id once the handshake completes.
"""

from __future__ import annotations

from typing import Any

from authlib.integrations.starlette_client import OAuth

from jobboard.config import Settings, provider_credentials
from jobboard.errors import UnknownProvider


PROVIDER_OPTIONS: dict[str, dict[str, Any]] = {
    "github": {
        "access_token_url": "https://github.com/login/oauth/access_token",
        "authorize_url": "https://github.com/login/oauth/authorize",
        "api_base_url": "https://api.github.com/",
        "client_kwargs": {"scope": "read:user"},
    },
    "google": {
        "server_metadata_url": "https://accounts.google.com/.well-known/openid-configuration",
        "client_kwargs": {"scope": "openid email profile"},
    },
    "linkedin": {
        "server_metadata_url": "https://www.linkedin.com/oauth/.well-known/openid-configuration",
        "client_kwargs": {"scope": "openid profile email", "token_endpoint_auth_method": "client_secret_post"},
    },
    # Xing still speaks OAuth 1.0a.
    "xing": {
        "request_token_url": "https://api.xing.com/v1/request_token",
        "authorize_url": "https://api.xing.com/v1/authorize",
        "access_token_url": "https://api.xing.com/v1/access_token",
        "api_base_url": "https://api.xing.com/v1/",
    },
}


def build_oauth(settings: Settings) -> OAuth:
    oauth = OAuth()
    for name, (client_id, client_secret) in provider_credentials(settings).items():
        oauth.register(name=name, client_id=client_id, client_secret=client_secret, **PROVIDER_OPTIONS[name])
    return oauth


def callback_url(settings: Settings, provider: str) -> str:
    return f"{settings.oauth_callback_base_url.rstrip('/')}/auth/{provider}/callback"


async def fetch_subject_id(client: Any, provider: str, token: dict[str, Any]) -> str:
    if provider == "github":
        resp = await client.get("user", token=token)
        resp.raise_for_status()
        return str(resp.json()["id"])

    if provider in ("google", "linkedin"):
        userinfo = token.get("userinfo")
        if not userinfo:
            userinfo = await client.userinfo(token=token)
        return str(userinfo["sub"])

    if provider == "xing":
        resp = await client.get("users/me", token=token)
        resp.raise_for_status()
        return str(resp.json()["users"][0]["id"])

    raise UnknownProvider(provider)
