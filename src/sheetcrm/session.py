"""Scoped identity credential forwarded to the script endpoint."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Default credential time-to-live in seconds (one hour, the lifetime of
#: an OAuth access token issued by the browser token client).
DEFAULT_CREDENTIAL_TTL: float = 3600


class Credential(BaseModel):
    """An identity token owned by one store instance.

    Parameters
    ----------
    access_token : str
        Bearer token obtained by an external sign-in flow.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the token was issued.
    ttl : float
        Time-to-live in seconds.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    access_token: str
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = DEFAULT_CREDENTIAL_TTL

    @property
    def is_expired(self) -> bool:
        """Whether the token has exceeded its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl

    @property
    def age(self) -> float:
        """Seconds since the token was issued."""
        return time.monotonic() - self.created_at

    def usable_token(self) -> str | None:
        """The token if it is still valid, else ``None``."""
        if not self.access_token or self.is_expired:
            return None
        return self.access_token
