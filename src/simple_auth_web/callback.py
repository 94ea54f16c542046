"""
Handling of the provider's redirect back to /oauth2/callback.

AWAITING_CALLBACK -> ERROR_FROM_PROVIDER | MISSING_CODE | EXCHANGING_TOKEN
                  -> AUTHENTICATED | FAILED

The token is persisted only after a successful exchange, and the success
redirect is issued only after it has been persisted. Nothing is retried.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Mapping, MutableMapping, Optional, Tuple

from .errors import OAuth2ClientError, ProviderError
from .protocol import IdentityProvider
from .session import persist_token

logger = logging.getLogger(__name__)

SUCCESS_URL = "/oauth2/success"
FAILURE_URL = "/oauth2/failure"


class CallbackState(str, enum.Enum):
    AWAITING_CALLBACK = "awaiting_callback"
    ERROR_FROM_PROVIDER = "error_from_provider"
    MISSING_CODE = "missing_code"
    EXCHANGING_TOKEN = "exchanging_token"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class CallbackResult:
    state: CallbackState
    redirect_url: str
    path: Tuple[CallbackState, ...]
    error: Optional[Exception] = None

    @property
    def authenticated(self) -> bool:
        return self.state is CallbackState.AUTHENTICATED


class CallbackOrchestrator:
    def __init__(
        self,
        provider: IdentityProvider,
        success_url: str = SUCCESS_URL,
        failure_url: str = FAILURE_URL,
        exchange_timeout: Optional[float] = None,
    ):
        self.provider = provider
        self.success_url = success_url
        self.failure_url = failure_url
        self.exchange_timeout = exchange_timeout

    def _failed(self, path, error: Exception) -> CallbackResult:
        return CallbackResult(
            state=CallbackState.FAILED,
            redirect_url=self.failure_url,
            path=tuple(path) + (CallbackState.FAILED,),
            error=error,
        )

    async def handle(self, params: Mapping[str, str], session: MutableMapping) -> CallbackResult:
        """Process one callback request; params are its query parameters."""
        path = [CallbackState.AWAITING_CALLBACK]

        error_code = params.get("error")
        if error_code:
            path.append(CallbackState.ERROR_FROM_PROVIDER)
            logger.warning("Error returned from %s: %s", self.provider.name, error_code)
            return self._failed(
                path, ProviderError(f"provider returned error {error_code!r}", error_code=error_code)
            )

        code = params.get("code")
        if not code:
            path.append(CallbackState.MISSING_CODE)
            logger.warning("Empty code returned from %s", self.provider.name)
            return self._failed(path, ProviderError("callback carried no authorization code"))

        path.append(CallbackState.EXCHANGING_TOKEN)
        try:
            token = await self.provider.exchange_code(code, timeout=self.exchange_timeout)
        except OAuth2ClientError as e:
            logger.warning("Failed to exchange OAuth2 code with %s: %s", self.provider.name, e)
            return self._failed(path, e)

        persist_token(session, token)
        path.append(CallbackState.AUTHENTICATED)
        return CallbackResult(
            state=CallbackState.AUTHENTICATED,
            redirect_url=self.success_url,
            path=tuple(path),
        )
