"""
OAuth2 provider bound to one ProviderConfig.

The same class serves Google, Microsoft Entra (tenant-scoped, profile from
Microsoft Graph /me) and generic OIDC servers; only the config differs.
"""

import asyncio
from typing import Optional

import httpx
from starlette.responses import RedirectResponse

from .config import ProviderConfig
from .oauth2 import AuthorizationURLBuilder, TokenExchanger, UserProfileFetcher
from .profile import UserProfile
from .token import TokenEntity


class OAuth2Provider:
    """Builds the login redirect, exchanges codes and fetches profiles for the active provider."""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.name = config.name
        self.config = config
        self.url_builder = AuthorizationURLBuilder(config)
        self.exchanger = TokenExchanger(config, transport=transport)
        self.fetcher = UserProfileFetcher(config, transport=transport)

    def authorization_url(self) -> str:
        return self.url_builder.build(self.config.scopes)

    def login_redirect(self) -> RedirectResponse:
        """Return a 302 to the IdP."""
        return RedirectResponse(self.authorization_url(), status_code=302)

    async def exchange_code(
        self, code: str, timeout: Optional[float] = None, cancel: Optional[asyncio.Event] = None
    ) -> TokenEntity:
        return await self.exchanger.exchange_code(code, timeout=timeout, cancel=cancel)

    async def fetch_profile(
        self, token: TokenEntity, timeout: Optional[float] = None, cancel: Optional[asyncio.Event] = None
    ) -> UserProfile:
        return await self.fetcher.fetch_profile(token, timeout=timeout, cancel=cancel)
