"""FastAPI application factory: session middleware plus the OAuth2 router."""

import os
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from .config import ProviderConfig, load_provider_config
from .protocol import IdentityProvider
from .provider import OAuth2Provider
from .router import create_oauth2_router
from .session import has_token

SESSION_COOKIE = "session"


def create_app(
    config: Optional[ProviderConfig] = None,
    session_secret: Optional[str] = None,
    provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """
    Build the app. Without arguments the provider config comes from the environment
    (ConfigError aborts startup) and the session secret from SESSION_KEY.
    """
    if provider is None:
        provider = OAuth2Provider(config or load_provider_config())
    if session_secret is None:
        # Default is for local development only.
        session_secret = os.getenv("SESSION_KEY", "change-me")

    app = FastAPI(title="SimpleAuthWeb")
    app.add_middleware(SessionMiddleware, secret_key=session_secret, session_cookie=SESSION_COOKIE)
    app.include_router(create_oauth2_router(provider))

    @app.get("/")
    async def home(request: Request):
        return {"signed_in": has_token(request.session), "provider": provider.name}

    return app
