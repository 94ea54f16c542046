"""
Provider configuration for the OAuth2 client.

One provider is active per deployment. Its endpoints and credentials are read
from the environment once at startup into an immutable ProviderConfig, which is
then handed to every component. Requires OAUTH2_CLIENT_ID, OAUTH2_CLIENT_SECRET
and OAUTH2_REDIRECT_URL; OAUTH2_PROVIDER selects the provider (default google).

Endpoint defaults may contain a "{tenant}" placeholder (Microsoft Entra); it is
filled from OAUTH2_TENANT_ID when the config is loaded.
"""

import enum
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
from urllib.parse import urlsplit

from authlib.oauth2.rfc6749.util import scope_to_list

from .errors import ConfigError

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_TENANT = "common"


class ProviderKind(str, enum.Enum):
    """Supported identity providers; also selects the profile schema."""

    GOOGLE = "google"
    MICROSOFT = "microsoft"
    OIDC = "oidc"


@dataclass(frozen=True)
class ProviderDefaults:
    authorization_endpoint: Optional[str]
    token_endpoint: Optional[str]
    profile_endpoint: Optional[str]
    scopes: Tuple[str, ...]


# https://developers.google.com/identity/protocols/oauth2/web-server
# https://learn.microsoft.com/en-us/entra/identity-platform/v2-oauth2-auth-code-flow
# OIDC has no well-known host, every endpoint must be configured.
PROVIDER_DEFAULTS = {
    ProviderKind.GOOGLE: ProviderDefaults(
        authorization_endpoint="https://accounts.google.com/o/oauth2/v2/auth",
        token_endpoint="https://oauth2.googleapis.com/token",
        profile_endpoint="https://www.googleapis.com/oauth2/v2/userinfo",
        scopes=("openid", "email", "profile"),
    ),
    ProviderKind.MICROSOFT: ProviderDefaults(
        authorization_endpoint="https://login.microsoftonline.com/{tenant}/oauth2/v2.0/authorize",
        token_endpoint="https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token",
        profile_endpoint="https://graph.microsoft.com/v1.0/me",
        scopes=("openid", "email", "profile", "User.Read"),
    ),
    ProviderKind.OIDC: ProviderDefaults(
        authorization_endpoint=None,
        token_endpoint=None,
        profile_endpoint=None,
        scopes=("openid", "email", "profile"),
    ),
}


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable endpoint and credential bundle for the active identity provider."""

    kind: ProviderKind
    client_id: str
    client_secret: str
    redirect_uri: str
    authorization_endpoint: str
    token_endpoint: str
    profile_endpoint: str
    scopes: Tuple[str, ...]
    tenant_id: Optional[str] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        if not self.scopes:
            raise ConfigError("at least one scope must be configured")
        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            raise ConfigError(f"http timeout must be a positive finite number, got {self.http_timeout}")
        for name in ("authorization_endpoint", "token_endpoint", "profile_endpoint"):
            validate_endpoint(name, getattr(self, name))

    @property
    def name(self) -> str:
        return self.kind.value


def validate_endpoint(name: str, url: str) -> str:
    """Raise ConfigError unless url is an absolute http(s) URL."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ConfigError(f"{name} is not a valid URL: {url!r} ({e})") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"{name} must be an absolute http(s) URL, got {url!r}")
    return url


def _expand_tenant(name: str, template: str, tenant_id: Optional[str]) -> str:
    if "{tenant}" not in template:
        return template
    if not tenant_id:
        raise ConfigError(f"{name} needs a tenant but OAUTH2_TENANT_ID is not set")
    return template.replace("{tenant}", tenant_id)


def _require(environ: Mapping[str, str], key: str) -> str:
    value = (environ.get(key) or "").strip()
    if not value:
        raise ConfigError(f"{key} is not set")
    return value


def load_provider_config(environ: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """Build the ProviderConfig from environment variables (os.environ by default)."""
    if environ is None:
        environ = os.environ

    raw_kind = (environ.get("OAUTH2_PROVIDER") or ProviderKind.GOOGLE.value).strip().lower()
    try:
        kind = ProviderKind(raw_kind)
    except ValueError:
        choices = ", ".join(k.value for k in ProviderKind)
        raise ConfigError(f"unknown OAUTH2_PROVIDER {raw_kind!r} (expected one of {choices})") from None
    defaults = PROVIDER_DEFAULTS[kind]

    tenant_id = (environ.get("OAUTH2_TENANT_ID") or "").strip() or None
    if kind is ProviderKind.MICROSOFT and tenant_id is None:
        tenant_id = DEFAULT_TENANT

    endpoints = {}
    for field, key in (
        ("authorization_endpoint", "OAUTH2_AUTHORIZATION_ENDPOINT"),
        ("token_endpoint", "OAUTH2_TOKEN_ENDPOINT"),
        ("profile_endpoint", "OAUTH2_PROFILE_ENDPOINT"),
    ):
        template = (environ.get(key) or "").strip() or getattr(defaults, field)
        if not template:
            raise ConfigError(f"{key} must be set for provider {kind.value!r}")
        endpoints[field] = _expand_tenant(key, template, tenant_id)

    raw_scopes = environ.get("OAUTH2_SCOPES")
    if raw_scopes is None:
        scopes = defaults.scopes
    else:
        scopes = tuple(s for s in scope_to_list(raw_scopes) if s)

    raw_timeout = environ.get("OAUTH2_HTTP_TIMEOUT") or str(DEFAULT_HTTP_TIMEOUT)
    try:
        http_timeout = float(raw_timeout)
    except ValueError:
        raise ConfigError(f"OAUTH2_HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from None

    return ProviderConfig(
        kind=kind,
        client_id=_require(environ, "OAUTH2_CLIENT_ID"),
        client_secret=_require(environ, "OAUTH2_CLIENT_SECRET"),
        redirect_uri=validate_endpoint("OAUTH2_REDIRECT_URL", _require(environ, "OAUTH2_REDIRECT_URL")),
        scopes=scopes,
        tenant_id=tenant_id,
        http_timeout=http_timeout,
        **endpoints,
    )
