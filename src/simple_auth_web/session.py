"""
Token persistence in the user's session, plus a FastAPI dependency.

The session (request.session from Starlette's SessionMiddleware) only ever holds
five string entries for the token; expiry is not stored and is recomputed from
the current time on every load. The middleware commits the session to the
cookie when the response is sent.
"""

import logging
from datetime import datetime, timedelta
from typing import MutableMapping, Optional

from fastapi import HTTPException, Request

from .errors import SessionError
from .token import TokenEntity, utcnow

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "oauth2_access_token"
EXPIRES_IN_KEY = "oauth2_expires_in"
REFRESH_TOKEN_KEY = "oauth2_refresh_token"
SCOPE_KEY = "oauth2_scope"
TOKEN_TYPE_KEY = "oauth2_token_type"

TOKEN_KEYS = (ACCESS_TOKEN_KEY, EXPIRES_IN_KEY, REFRESH_TOKEN_KEY, SCOPE_KEY, TOKEN_TYPE_KEY)


def persist_token(session: MutableMapping, token: TokenEntity) -> None:
    """Write the token's scalar fields into the session (expiry is not stored)."""
    # NOTE: stored in plaintext; protecting the cookie is the session layer's job.
    session[ACCESS_TOKEN_KEY] = token.access_token
    session[EXPIRES_IN_KEY] = str(token.expires_in)
    session[REFRESH_TOKEN_KEY] = token.refresh_token
    session[SCOPE_KEY] = token.scope
    session[TOKEN_TYPE_KEY] = token.token_type


def _read_str(session: MutableMapping, key: str) -> str:
    if key not in session:
        raise SessionError("no token in session")
    value = session[key]
    if not isinstance(value, str):
        raise SessionError(f"session entry {key} is not a string")
    return value


def load_token(session: MutableMapping, now: Optional[datetime] = None) -> TokenEntity:
    """
    Rebuild the token stored by persist_token.

    Raises SessionError if any entry is missing or malformed. Expiry is always
    now (or the given time) + expires_in, even when expires_in is 0, and does not
    count from when the token was issued.
    """
    values = {key: _read_str(session, key) for key in TOKEN_KEYS}
    try:
        expires_in = int(values[EXPIRES_IN_KEY])
    except ValueError:
        raise SessionError(f"session entry {EXPIRES_IN_KEY} is not an integer") from None

    try:
        expiry = (now or utcnow()) + timedelta(seconds=expires_in)
    except OverflowError:
        raise SessionError(f"session entry {EXPIRES_IN_KEY} is out of range") from None

    return TokenEntity(
        access_token=values[ACCESS_TOKEN_KEY],
        token_type=values[TOKEN_TYPE_KEY],
        expires_in=expires_in,
        refresh_token=values[REFRESH_TOKEN_KEY],
        scope=values[SCOPE_KEY],
        expiry=expiry,
    )


def has_token(session: MutableMapping) -> bool:
    return all(key in session for key in TOKEN_KEYS)


def clear_token(session: MutableMapping) -> None:
    for key in TOKEN_KEYS:
        session.pop(key, None)


async def require_token(request: Request) -> TokenEntity:
    """Dependency: the session must hold a token. Use as: Depends(require_token)."""
    try:
        return load_token(request.session)
    except SessionError as e:
        logger.info("Rejecting request to %s: %s", request.url.path, e)
        raise HTTPException(status_code=401, detail="Not signed in; please sign in again") from e
