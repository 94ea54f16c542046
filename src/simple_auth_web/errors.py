"""
Error kinds raised by the OAuth2 client.

ConfigError is fatal at startup. ProviderError, TransportError and ProtocolError
come from talking to the identity provider and are turned into a redirect to the
failure page by the router. SessionError means the session holds no usable token
and the user should sign in again.
"""

from typing import Optional


class OAuth2ClientError(Exception):
    """Base class for every error raised by the sign-in flow."""


class ConfigError(OAuth2ClientError):
    """Malformed provider configuration (unknown provider, bad endpoint, missing credential)."""


class ProviderError(OAuth2ClientError):
    """The provider reported an error, either in the callback or as a non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.error_code = error_code


class TransportError(OAuth2ClientError):
    """Network failure, timeout or cancellation while calling the provider."""


class ProtocolError(OAuth2ClientError):
    """Wrong Content-Type or an undecodable body in a provider response."""


class SessionError(OAuth2ClientError):
    """The session is missing token fields or holds malformed ones."""
