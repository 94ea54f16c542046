"""
Back-channel HTTP helpers shared by the token exchange and the profile fetch.

Both calls are bounded by a deadline covering the whole request and can be
aborted through an asyncio.Event; either way the in-flight request is cancelled
and a TransportError is raised. Responses must be 2xx with a JSON media type.
"""

import asyncio
import logging
import re
from typing import Any, Optional

import httpx

from .errors import ProtocolError, ProviderError, TransportError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


async def send(
    client: httpx.AsyncClient,
    request: httpx.Request,
    timeout: float,
    cancel: Optional[asyncio.Event] = None,
) -> httpx.Response:
    """Send request; raise TransportError on network failure, timeout or cancellation."""
    sending = asyncio.ensure_future(client.send(request))
    waiters = {sending}
    cancelled = None
    if cancel is not None:
        cancelled = asyncio.ensure_future(cancel.wait())
        waiters.add(cancelled)

    try:
        done, pending = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        for task in waiters:
            task.cancel()
        raise

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    if sending in done:
        try:
            response = sending.result()
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e!r}") from e
        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return response
    if cancelled is not None and cancelled in done:
        raise TransportError(f"{request.method} {request.url} cancelled")
    raise TransportError(f"{request.method} {request.url} timed out after {timeout}s")


# RFC 2045 token: printable ASCII without spaces or tspecials
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MEDIA_TYPE_RE = re.compile(rf"^\s*({_TOKEN}/{_TOKEN})\s*$")
_PARAM_RE = re.compile(rf'^\s*{_TOKEN}\s*=\s*({_TOKEN}|"(?:[^"\\]|\\.)*")\s*$')


def media_type(content_type: str) -> str:
    """
    Return the lower-cased media type of a Content-Type header, parameters dropped.

    Raises ValueError on a malformed header: a bad type/subtype or a parameter
    that is not name=value. A trailing ";" is allowed.
    """
    head, _, rest = content_type.partition(";")
    match = _MEDIA_TYPE_RE.match(head)
    if match is None:
        raise ValueError(f"malformed media type {head!r}")
    params = rest.split(";") if rest else []
    if params and not params[-1].strip():
        params.pop()
    for param in params:
        if not _PARAM_RE.match(param):
            raise ValueError(f"malformed media type parameter {param.strip()!r}")
    return match.group(1).lower()


def read_json(response: httpx.Response, what: str) -> Any:
    """
    Validate a provider response and return its decoded JSON body.

    Checks, in order: 2xx status (ProviderError with status and raw body), a
    Content-Type of exactly application/json (ProtocolError), a decodable JSON
    body (ProtocolError).
    """
    status = response.status_code
    if not 200 <= status < 300:
        raise ProviderError(
            f"{what} failed: status_code={status} body={response.text}",
            status_code=status,
            body=response.text,
        )

    content_type = response.headers.get("content-type", "")
    if not content_type:
        raise ProtocolError(f"{what}: response has no Content-Type")
    try:
        parsed_type = media_type(content_type)
    except ValueError as e:
        raise ProtocolError(f"{what}: unparseable Content-Type in response: {content_type}") from e
    if parsed_type != JSON_MEDIA_TYPE:
        raise ProtocolError(f"{what}: invalid Content-Type in response: {content_type}")

    try:
        return response.json()
    except ValueError as e:
        raise ProtocolError(f"{what}: response body is not valid JSON: {e}") from e
