"""
OAuth2 authorization-code grant client.

AuthorizationURLBuilder builds the redirect to the provider's authorization
endpoint, TokenExchanger trades the returned code for a token over the back
channel, and UserProfileFetcher reads the signed-in user's profile with that
token. All three are parameterized by one ProviderConfig; none of them retries.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence
from urllib.parse import quote_plus

import httpx
from authlib.common.urls import url_encode
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from pydantic import ValidationError

from .config import ProviderConfig, validate_endpoint
from .errors import ProtocolError
from .profile import UserProfile, profile_schema_for
from .provider_http import JSON_MEDIA_TYPE, read_json, send
from .token import TokenEntity, TokenResponse, utcnow

logger = logging.getLogger(__name__)


class AuthorizationURLBuilder:
    def __init__(self, config: ProviderConfig):
        self.config = config

    def build(self, scopes: Sequence[str]) -> str:
        """Return the authorization endpoint URL with client_id, redirect_uri, response_type=code and scope."""
        scopes = list(scopes)
        if not scopes:
            raise ValueError("at least one scope is required")
        endpoint = validate_endpoint("authorization_endpoint", self.config.authorization_endpoint)
        return prepare_grant_uri(
            endpoint,
            self.config.client_id,
            "code",
            redirect_uri=self.config.redirect_uri,
            scope=scopes,
        )


class TokenExchanger:
    """Back-channel POST to the token endpoint (grant_type=authorization_code)."""

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config
        self.transport = transport
        self.clock = clock

    def _client_auth(self) -> httpx.BasicAuth:
        # Credentials are URL-escaped before base64, as RFC 6749 section 2.3.1 asks.
        return httpx.BasicAuth(quote_plus(self.config.client_id), quote_plus(self.config.client_secret))

    def _request_body(self, code: str) -> str:
        # Client credentials go in the body too; providers accept one or the other.
        fields = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.config.redirect_uri,
        }
        return url_encode(sorted(fields.items()))

    async def exchange_code(
        self,
        code: str,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> TokenEntity:
        """
        Exchange an authorization code for a token.

        Raises ProviderError on a non-2xx response, ProtocolError on a non-JSON or
        undecodable response and TransportError on network failure, timeout or
        cancellation. Expiry is set to now + expires_in when expires_in is non-zero.
        """
        if not code:
            raise ValueError("authorization code must not be empty")
        if timeout is None:
            timeout = self.config.http_timeout

        async with httpx.AsyncClient(
            auth=self._client_auth(),
            timeout=httpx.Timeout(timeout),
            transport=self.transport,
        ) as client:
            request = client.build_request(
                "POST",
                self.config.token_endpoint,
                content=self._request_body(code),
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Accept": JSON_MEDIA_TYPE,
                },
            )
            response = await send(client, request, timeout, cancel)

        payload = read_json(response, "oauth2: token request")
        try:
            parsed = TokenResponse.model_validate(payload)
        except ValidationError as e:
            raise ProtocolError(f"oauth2: token response does not match the token schema: {e}") from e

        try:
            token = TokenEntity.from_response(parsed, now=self.clock())
        except OverflowError as e:
            raise ProtocolError(f"oauth2: expires_in out of range: {parsed.expires_in}") from e
        logger.info(
            "Token exchange succeeded for %s (token_type=%s, expires_in=%s)",
            self.config.name,
            token.token_type,
            token.expires_in,
        )
        return token


class UserProfileFetcher:
    """Authenticated GET to the provider's profile endpoint, decoded with the provider's schema."""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport
        self.schema = profile_schema_for(config.kind)

    async def fetch_profile(
        self,
        token: TokenEntity,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> UserProfile:
        if timeout is None:
            timeout = self.config.http_timeout

        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=self.transport) as client:
            request = client.build_request(
                "GET",
                self.config.profile_endpoint,
                headers={
                    "Accept": JSON_MEDIA_TYPE,
                    "Authorization": token.authorization_header(),
                },
            )
            response = await send(client, request, timeout, cancel)

        payload = read_json(response, "oauth2: profile request")
        if isinstance(payload, dict):
            # "provider" is our variant tag, not a provider claim
            payload = {k: v for k, v in payload.items() if k != "provider"}
        try:
            return self.schema.model_validate(payload)
        except ValidationError as e:
            raise ProtocolError(f"oauth2: profile response does not match the {self.config.name} schema: {e}") from e
