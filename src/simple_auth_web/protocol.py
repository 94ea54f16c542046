"""
Protocol for the identity provider used by the callback orchestrator and router.

OAuth2Provider is the implementation; tests substitute their own fakes.
"""

import asyncio
from typing import Optional, Protocol, runtime_checkable

from starlette.responses import RedirectResponse

from .profile import UserProfile
from .token import TokenEntity


@runtime_checkable
class IdentityProvider(Protocol):
    """An OAuth2 identity provider (Google, Microsoft Entra, a generic OIDC server)."""

    name: str

    def login_redirect(self) -> RedirectResponse:
        """Redirect the user to the provider's authorization endpoint."""
        ...

    async def exchange_code(
        self, code: str, timeout: Optional[float] = None, cancel: Optional[asyncio.Event] = None
    ) -> TokenEntity:
        """Trade an authorization code for a token."""
        ...

    async def fetch_profile(
        self, token: TokenEntity, timeout: Optional[float] = None, cancel: Optional[asyncio.Event] = None
    ) -> UserProfile:
        """Return the signed-in user's profile."""
        ...
