"""Token returned by the authorization-code exchange."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Upper bound accepted for expires_in (ten years).
MAX_EXPIRES_IN = 10 * 365 * 24 * 3600


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenResponse(BaseModel):
    """Wire shape of a successful token endpoint response."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str
    expires_in: Optional[int] = Field(default=None, ge=0, le=MAX_EXPIRES_IN)
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


@dataclass(frozen=True, repr=False)
class TokenEntity:
    access_token: str
    token_type: str
    expires_in: int = 0
    refresh_token: str = ""
    scope: str = ""
    # Always derived from issuance time + expires_in, never taken from the provider.
    expiry: Optional[datetime] = None

    @classmethod
    def issue(
        cls,
        access_token: str,
        token_type: str,
        expires_in: int = 0,
        refresh_token: str = "",
        scope: str = "",
        now: Optional[datetime] = None,
    ) -> "TokenEntity":
        """Create a token whose expiry counts from now (left unset when expires_in is 0)."""
        expiry = None
        if expires_in:
            expiry = (now or utcnow()) + timedelta(seconds=expires_in)
        return cls(
            access_token=access_token,
            token_type=token_type,
            expires_in=expires_in,
            refresh_token=refresh_token,
            scope=scope,
            expiry=expiry,
        )

    @classmethod
    def from_response(cls, response: TokenResponse, now: Optional[datetime] = None) -> "TokenEntity":
        return cls.issue(
            access_token=response.access_token,
            token_type=response.token_type,
            expires_in=response.expires_in or 0,
            refresh_token=response.refresh_token or "",
            scope=response.scope or "",
            now=now,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expiry is None:
            return False
        return (now or utcnow()) >= self.expiry

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks.
        return (
            f"TokenEntity(token_type={self.token_type!r}, expires_in={self.expires_in}, "
            f"scope={self.scope!r}, expiry={self.expiry!r})"
        )
