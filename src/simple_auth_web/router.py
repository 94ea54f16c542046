"""
FastAPI OAuth2 router: authorize, callback, success, failure, token, logout.

Builds an APIRouter around one identity provider. Provider failures end in a
redirect to /oauth2/failure; a missing session token sends the user back to /
to sign in again.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from .callback import FAILURE_URL, CallbackOrchestrator
from .errors import OAuth2ClientError, SessionError
from .protocol import IdentityProvider
from .session import clear_token, load_token, require_token
from .token import TokenEntity

logger = logging.getLogger(__name__)


def create_oauth2_router(provider: IdentityProvider) -> APIRouter:
    """Create an APIRouter with the /oauth2/* endpoints and /logout."""
    orchestrator = CallbackOrchestrator(provider)
    router = APIRouter()

    @router.get("/oauth2/authorize")
    async def authorize():
        """Redirect the user to the provider's authorization endpoint."""
        return provider.login_redirect()

    @router.get("/oauth2/callback", name="oauth2_callback")
    async def callback(request: Request):
        """Exchange the code for a token, store it in the session, redirect to success or failure."""
        result = await orchestrator.handle(request.query_params, request.session)
        return RedirectResponse(url=result.redirect_url, status_code=302)

    @router.get("/oauth2/success")
    async def success(request: Request):
        """Fetch and return the signed-in user's profile."""
        try:
            token = load_token(request.session)
        except SessionError as e:
            logger.info("No usable token in session: %s", e)
            return RedirectResponse(url="/", status_code=302)

        try:
            profile = await provider.fetch_profile(token)
        except OAuth2ClientError as e:
            logger.warning("Failed to get user profile from %s: %s", provider.name, e)
            return RedirectResponse(url=FAILURE_URL, status_code=302)

        return {"provider": provider.name, "profile": profile.model_dump()}

    @router.get("/oauth2/failure")
    async def failure():
        return {"ok": False, "provider": provider.name, "message": "Sign-in failed; please try again."}

    @router.get("/oauth2/token")
    async def token_info(token: TokenEntity = Depends(require_token)):
        """Non-secret details of the stored token."""
        return {
            "token_type": token.token_type,
            "scope": token.scope,
            "expires_in": token.expires_in,
            "expiry": token.expiry.isoformat() if token.expiry else None,
            "has_refresh_token": bool(token.refresh_token),
        }

    @router.get("/logout")
    async def logout(request: Request):
        """Drop the token from the session and redirect to home."""
        clear_token(request.session)
        return RedirectResponse(url="/", status_code=302)

    return router
