"""Custom exception hierarchy for sheetcrm."""

from __future__ import annotations


class SheetCrmError(Exception):
    """Base exception for all sheetcrm errors."""


class ConfigError(SheetCrmError):
    """Invalid or missing configuration."""


class TransportError(SheetCrmError):
    """Failure talking to the script endpoint."""

    def __init__(self, message: str, *, op: str = "") -> None:
        self.op = op
        super().__init__(message)


class NetworkUnreachableError(TransportError):
    """Connection-level failure that persisted through every retry.

    Covers refused connections, DNS failures and (in a browser) CORS
    rejections: anything that prevented a response body from arriving.
    """


class ServerBusyError(TransportError):
    """The script kept reporting lock contention after all retries."""


class RemoteLogicError(TransportError):
    """The script answered ``{"status": "error"}`` with a non-retryable message."""

    def __init__(self, message: str, *, op: str = "", remote_message: str = "") -> None:
        self.remote_message = remote_message
        super().__init__(message, op=op)


class MalformedResponseError(TransportError):
    """The response body was not a usable JSON envelope."""

    def __init__(self, message: str, *, op: str = "", body: str = "") -> None:
        self.body = body
        super().__init__(message, op=op)


class HtmlResponseError(MalformedResponseError):
    """An HTML page came back instead of JSON (usually a deployment problem)."""


class EndpointNotFoundError(HtmlResponseError):
    """The deployment URL does not exist (Drive "Page Not Found" page)."""


class AuthMisconfiguredError(HtmlResponseError):
    """A sign-in page came back.

    The web app must be deployed with access set to "Anyone", not
    "Anyone with Google account".
    """


class StorageError(SheetCrmError):
    """Locally persisted data (mock mode) could not be read back."""
