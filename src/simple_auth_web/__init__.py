"""
OAuth2 sign-in for the SimpleAuthWeb demo front end.

Exposes the provider config loader, the OAuth2 client components
(AuthorizationURLBuilder, TokenExchanger, UserProfileFetcher), session token
helpers, the callback orchestrator, the FastAPI router factory and the app factory.
"""

from .app import create_app
from .callback import CallbackOrchestrator, CallbackResult, CallbackState
from .config import ProviderConfig, ProviderKind, load_provider_config
from .errors import (
    ConfigError,
    OAuth2ClientError,
    ProtocolError,
    ProviderError,
    SessionError,
    TransportError,
)
from .oauth2 import AuthorizationURLBuilder, TokenExchanger, UserProfileFetcher
from .profile import GoogleProfile, MicrosoftProfile, OidcProfile, UserProfile
from .protocol import IdentityProvider
from .provider import OAuth2Provider
from .router import create_oauth2_router
from .session import clear_token, has_token, load_token, persist_token, require_token
from .token import TokenEntity

__all__ = [
    "create_app",
    "create_oauth2_router",
    "CallbackOrchestrator",
    "CallbackResult",
    "CallbackState",
    "ProviderConfig",
    "ProviderKind",
    "load_provider_config",
    "ConfigError",
    "OAuth2ClientError",
    "ProtocolError",
    "ProviderError",
    "SessionError",
    "TransportError",
    "AuthorizationURLBuilder",
    "TokenExchanger",
    "UserProfileFetcher",
    "GoogleProfile",
    "MicrosoftProfile",
    "OidcProfile",
    "UserProfile",
    "IdentityProvider",
    "OAuth2Provider",
    "persist_token",
    "load_token",
    "has_token",
    "clear_token",
    "require_token",
    "TokenEntity",
]
