"""HTTP transport for the spreadsheet script endpoint.

Reads are ``GET {url}?op=fetch&password=...&view=...``; writes are a
``POST`` whose JSON body carries ``op``, the payload and the secret.
Writes use ``text/plain`` so a browser would not send a CORS preflight,
which the script endpoint cannot answer.

Every response body goes through :func:`parse_script_response` which puts
it in one of four buckets: success envelope, error envelope, HTML page,
or garbage.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol
from urllib.parse import urlencode

import aiohttp

from sheetcrm._constants import (
    BODY_EXCERPT_CHARS,
    BUSY_MESSAGE_MARKERS,
    HTML_MARKERS,
    NOT_FOUND_MARKER,
    SIGN_IN_MARKER,
    WRITE_CONTENT_TYPE,
)
from sheetcrm._redact import redact_for_log, redact_url
from sheetcrm.config import RetryPolicy
from sheetcrm.exceptions import (
    AuthMisconfiguredError,
    EndpointNotFoundError,
    HtmlResponseError,
    MalformedResponseError,
    NetworkUnreachableError,
    RemoteLogicError,
    ServerBusyError,
)

_logger = logging.getLogger(__name__)

_FETCH_OP = "fetch"


class Transport(Protocol):
    """Structural transport interface used by the endpoint helpers.

    ``payload=None`` means a read.  Implementations return the decoded
    success envelope (``{"status": "success", "data": ...}``) or raise a
    :class:`~sheetcrm.exceptions.TransportError`.
    """

    async def send(
        self,
        endpoint_url: str,
        payload: Mapping[str, Any] | None,
        secret: str,
        attempts: int | None = None,
        *,
        view: str | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        ...


def is_busy_message(message: str) -> bool:
    """Whether a remote error message reports lock contention."""
    lowered = message.lower()
    return any(marker in lowered for marker in BUSY_MESSAGE_MARKERS)


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:512].lower()
    return any(marker in head for marker in HTML_MARKERS)


def parse_script_response(text: str, *, op: str = "") -> dict[str, Any]:
    """Decode a raw response body into a status envelope.

    Returns the parsed object when it carries ``status`` ``"success"`` or
    ``"error"``; the caller decides what an error envelope means.

    Raises
    ------
    EndpointNotFoundError
        HTML "Page Not Found" page (incomplete or mistyped URL).
    AuthMisconfiguredError
        HTML sign-in page (deployment not open to "Anyone").
    HtmlResponseError
        Any other HTML page.
    MalformedResponseError
        Everything else that is not a status envelope.
    """
    excerpt = text[:BODY_EXCERPT_CHARS]
    try:
        parsed: Any = json.loads(text)
    except json.JSONDecodeError:
        if _looks_like_html(text):
            if NOT_FOUND_MARKER in text:
                raise EndpointNotFoundError(
                    "URL Not Found (404). Your URL might be incomplete or missing characters.",
                    op=op,
                    body=excerpt,
                ) from None
            if SIGN_IN_MARKER in text:
                raise AuthMisconfiguredError(
                    "Auth Failed. Script deployment access must be set to 'Anyone', "
                    "not 'Anyone with Google Account'.",
                    op=op,
                    body=excerpt,
                ) from None
            raise HtmlResponseError(
                "Received HTML error page instead of JSON. Check your deployment settings.",
                op=op,
                body=excerpt,
            ) from None
        raise MalformedResponseError(f"Invalid server response: {excerpt}...", op=op, body=excerpt) from None

    if isinstance(parsed, dict) and parsed.get("status") in ("success", "error"):
        return parsed
    raise MalformedResponseError(f"Invalid server response: {excerpt}...", op=op, body=excerpt)


def build_read_url(endpoint_url: str, secret: str, *, view: str | None = None, token: str | None = None) -> str:
    """Append the fetch query parameters, keeping any query already present."""
    params: dict[str, str] = {"op": _FETCH_OP, "password": secret}
    if view:
        params["view"] = view
    if token:
        params["token"] = token
    separator = "&" if "?" in endpoint_url else "?"
    return f"{endpoint_url}{separator}{urlencode(params)}"


class ScriptTransport:
    """aiohttp transport with the endpoint's retry rules.

    Network failures and lock-contention replies share one attempt budget
    (``RetryPolicy.attempts``).  Network failures wait a flat delay;
    contention waits ``busy_delay`` plus up to ``busy_jitter`` random
    seconds.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        retry: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Callable[[], float] = random.random,
    ) -> None:
        self._http = http_session
        self._retry = retry or RetryPolicy()
        self._sleep = sleep
        self._jitter = jitter

    async def _request(
        self,
        endpoint_url: str,
        payload: Mapping[str, Any] | None,
        secret: str,
        *,
        view: str | None,
        token: str | None,
    ) -> str:
        if payload is None:
            url = build_read_url(endpoint_url, secret, view=view, token=token)
            _logger.debug("GET %s", redact_url(url))
            async with self._http.get(url) as resp:
                text = await resp.text(errors="replace")
                _logger.debug("HTTP %s (%d chars)", resp.status, len(text))
                return text

        body: dict[str, Any] = {**payload, "password": secret}
        if token:
            body["token"] = token
        _logger.debug("POST %s body=%s", endpoint_url, redact_for_log(body))
        async with self._http.post(
            endpoint_url,
            data=json.dumps(body),
            headers={"Content-Type": WRITE_CONTENT_TYPE},
        ) as resp:
            text = await resp.text(errors="replace")
            _logger.debug("HTTP %s (%d chars)", resp.status, len(text))
            return text

    async def send(
        self,
        endpoint_url: str,
        payload: Mapping[str, Any] | None,
        secret: str,
        attempts: int | None = None,
        *,
        view: str | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the success envelope.

        Parameters
        ----------
        endpoint_url
            Deployed script URL.
        payload
            ``None`` for a read; otherwise the write body without the secret
            (``{"op": ..., "data": ...}`` or ``{"op": ..., "id": ...}``).
        secret
            Shared secret sent as ``password``.
        attempts
            Attempt budget; defaults to the retry policy.
        view
            Read view name (ignored for writes).
        token
            Optional identity token forwarded as ``token``.
        """
        op = str(payload.get("op", "")) if payload is not None else _FETCH_OP
        budget = self._retry.attempts if attempts is None else max(1, attempts)

        for attempt in range(1, budget + 1):
            remaining = budget - attempt
            try:
                text = await self._request(endpoint_url, payload, secret, view=view, token=token)
            except (aiohttp.ClientError, TimeoutError) as exc:
                if remaining > 0:
                    _logger.warning("Network error on %s, retrying... (%d left): %s", op, remaining, exc)
                    await self._sleep(self._retry.network_delay)
                    continue
                raise NetworkUnreachableError(
                    "Network Error: Is the URL correct? (CORS check failed)",
                    op=op,
                ) from exc

            envelope = parse_script_response(text, op=op)
            if envelope["status"] == "success":
                return envelope

            message = str(envelope.get("message") or "")
            if is_busy_message(message):
                if remaining > 0:
                    _logger.warning("Server busy (lock held) on %s, retrying... (%d left)", op, remaining)
                    await self._sleep(self._retry.busy_delay + self._jitter() * self._retry.busy_jitter)
                    continue
                raise ServerBusyError(
                    f"Server is busy: gave up on {op} after {budget} attempts",
                    op=op,
                )
            raise RemoteLogicError(
                message or f"{op} failed without a message",
                op=op,
                remote_message=message,
            )

        raise AssertionError("unreachable: retry loop always returns or raises")  # pragma: no cover
