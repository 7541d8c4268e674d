"""Client configuration for sheetcrm."""

from __future__ import annotations

import dataclasses
import json
import os
from typing import Any

from sheetcrm._constants import (
    BUSY_RETRY_DELAY_S,
    BUSY_RETRY_JITTER_S,
    CONFIG_KEY,
    DEFAULT_ATTEMPTS,
    ENDPOINT_SUFFIX,
    MOCK_DELAY_RANGE_S,
    NETWORK_RETRY_DELAY_S,
)
from sheetcrm.blobs import BlobStore
from sheetcrm.exceptions import ConfigError


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Retry and pacing knobs for the transport and mock mode.

    Parameters
    ----------
    attempts : int
        Total attempts per request (first try included) for both
        network failures and lock contention.
    network_delay : float
        Flat delay in seconds between attempts after a network failure.
    busy_delay : float
        Base delay in seconds after a lock-contention response.
    busy_jitter : float
        Upper bound of the random extra delay added to ``busy_delay``.
    mock_delay : tuple[float, float]
        Range (seconds) of the artificial latency applied to mock-mode writes.
    """

    attempts: int = DEFAULT_ATTEMPTS
    network_delay: float = NETWORK_RETRY_DELAY_S
    busy_delay: float = BUSY_RETRY_DELAY_S
    busy_jitter: float = BUSY_RETRY_JITTER_S
    mock_delay: tuple[float, float] = MOCK_DELAY_RANGE_S

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigError(f"attempts must be >= 1, got {self.attempts}")
        low, high = self.mock_delay
        if low < 0 or high < low:
            raise ConfigError(f"invalid mock_delay range: {self.mock_delay}")


def validate_endpoint_url(url: str) -> str:
    """Return the stripped endpoint URL or raise :class:`ConfigError`.

    An empty URL is valid and selects mock mode.  Anything else must be
    the deployed web-app URL, which always ends in ``/exec`` (editor and
    ``/dev`` URLs do not serve anonymous requests).
    """
    cleaned = (url or "").strip()
    if cleaned and not cleaned.endswith(ENDPOINT_SUFFIX):
        raise ConfigError(
            f"Invalid URL. Use the web app URL ending in '{ENDPOINT_SUFFIX}' from the Deploy dialog, "
            "not the editor URL."
        )
    return cleaned


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Where the artist sheet lives and how to reach it.

    Parameters
    ----------
    endpoint_url : str
        Deployed script URL.  Empty selects mock mode.
    access_secret : str
        Shared secret sent as ``password`` with every request.
    retry : RetryPolicy
        Retry budget and delays.
    """

    endpoint_url: str = ""
    access_secret: str = ""
    retry: RetryPolicy = dataclasses.field(default_factory=RetryPolicy)

    @property
    def is_mock(self) -> bool:
        return not self.endpoint_url.strip()

    def validated(self) -> SyncConfig:
        """Return a copy with a checked, stripped endpoint URL."""
        return dataclasses.replace(self, endpoint_url=validate_endpoint_url(self.endpoint_url))

    def to_json(self) -> str:
        return json.dumps({"endpointUrl": self.endpoint_url, "accessSecret": self.access_secret})

    @classmethod
    def from_json(cls, text: str, **overrides: Any) -> SyncConfig:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Stored configuration is not JSON: {text[:64]}") from exc
        if not isinstance(data, dict):
            raise ConfigError("Stored configuration must be a JSON object")
        kwargs: dict[str, Any] = {
            "endpoint_url": str(data.get("endpointUrl") or ""),
            "access_secret": str(data.get("accessSecret") or ""),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``SHEETCRM_ENDPOINT_URL``, ``SHEETCRM_ACCESS_SECRET`` and
        ``SHEETCRM_RETRY_ATTEMPTS``.  Explicit keyword arguments override
        environment values.
        """
        env = os.environ
        kwargs: dict[str, Any] = {}

        _ENV_CONFIG_MAP = {
            "SHEETCRM_ENDPOINT_URL": "endpoint_url",
            "SHEETCRM_ACCESS_SECRET": "access_secret",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                kwargs[field_name] = val

        attempts_env = env.get("SHEETCRM_RETRY_ATTEMPTS")
        if attempts_env is not None and "retry" not in overrides:
            try:
                attempts = int(attempts_env)
            except ValueError as exc:
                raise ConfigError(f"SHEETCRM_RETRY_ATTEMPTS must be an integer, got {attempts_env!r}") from exc
            kwargs["retry"] = RetryPolicy(attempts=attempts)

        kwargs.update(overrides)
        return cls(**kwargs)


def load_config(blobs: BlobStore) -> SyncConfig:
    """Load the persisted configuration (defaults to mock mode when absent)."""
    stored = blobs.get(CONFIG_KEY)
    if stored is None:
        return SyncConfig()
    return SyncConfig.from_json(stored)


def save_config(blobs: BlobStore, config: SyncConfig) -> SyncConfig:
    """Validate and persist *config*; nothing is written when it is invalid."""
    checked = config.validated()
    blobs.set(CONFIG_KEY, checked.to_json())
    return checked
