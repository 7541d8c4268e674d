"""High-level async facade over the artist sheet.

One interface, two backends: with an endpoint URL configured every call
goes to the remote script (with reconciliation for writes); without one
the store runs in mock mode against a local blob store.  Every write
returns the full refreshed roster rather than a delta.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from sheetcrm import reconcile
from sheetcrm._api._common import Mutation, SheetView
from sheetcrm._api.sheet import fetch_artists, fetch_dashboard, send_mutation
from sheetcrm._transport import ScriptTransport, Transport
from sheetcrm.blobs import BlobStore, MemoryBlobStore
from sheetcrm.config import SyncConfig, load_config, save_config
from sheetcrm.exceptions import SheetCrmError
from sheetcrm.mock import MockSheet
from sheetcrm.models.artist import Artist
from sheetcrm.models.dashboard import DashboardStats
from sheetcrm.models.touchpoint import Touchpoint
from sheetcrm.session import Credential

_logger = logging.getLogger(__name__)


class ArtistStore:
    """Async store for the artist roster.

    Usage::

        async with ArtistStore(config) as store:
            artists = await store.fetch()
            artists = await store.update(edited_artist)

    Cancelling an awaiting caller stops the local sequence at its next
    await, but a write already sent may still land on the sheet; the next
    fetch is the source of truth.
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        blobs: BlobStore | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        credential: Credential | None = None,
        refresh_view: SheetView = SheetView.ASSIGNED,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config.validated()
        self._blobs: BlobStore = blobs if blobs is not None else MemoryBlobStore()
        self._mock = MockSheet(self._blobs)
        self._external_session = session is not None
        self._http_session = session
        self._injected_transport = transport
        self._transport: Transport | None = transport
        self._credential = credential
        if refresh_view == SheetView.DASHBOARD:
            raise ValueError("refresh_view must be a roster view, not the dashboard")
        self._refresh_view = refresh_view
        self._sleep = sleep
        self._rng = rng or random.Random()

    @classmethod
    def from_blobs(cls, blobs: BlobStore, **kwargs: Any) -> ArtistStore:
        """Build a store from the configuration persisted in *blobs*."""
        return cls(load_config(blobs), blobs=blobs, **kwargs)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ArtistStore:
        if self._transport is None and self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = self._injected_transport

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def is_mock(self) -> bool:
        return self._config.is_mock

    def save_config(self, config: SyncConfig) -> SyncConfig:
        """Validate, persist and switch to *config*.

        Raises :class:`~sheetcrm.exceptions.ConfigError` (and keeps the
        current config) when the endpoint URL is not a deployed ``/exec`` URL.
        """
        checked = save_config(self._blobs, config)
        self._config = checked
        if self._injected_transport is None:
            self._transport = None
        _logger.info("Configuration saved (mode=%s)", "mock" if checked.is_mock else "remote")
        return checked

    def set_credential(self, credential: Credential | None) -> None:
        self._credential = credential

    def _token(self) -> str | None:
        if self._credential is None:
            return None
        return self._credential.usable_token()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            if self._http_session is None:
                raise SheetCrmError("Store not initialized. Use 'async with ArtistStore(...) as store:'")
            self._transport = ScriptTransport(self._http_session, retry=self._config.retry)
        return self._transport

    async def _mock_latency(self) -> None:
        low, high = self._config.retry.mock_delay
        if high > 0:
            await self._sleep(self._rng.uniform(low, high))

    async def _refetch(self) -> list[Artist]:
        return await fetch_artists(self._require_transport(), self._config, self._refresh_view, token=self._token())

    async def _mutate(self, mutation: Mutation) -> dict[str, Any]:
        return await send_mutation(self._require_transport(), self._config, mutation, token=self._token())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch(self, view: SheetView = SheetView.ASSIGNED) -> list[Artist]:
        """Fetch the roster for *view*."""
        if view == SheetView.DASHBOARD:
            raise ValueError("The dashboard view holds no artists; use fetch_dashboard()")
        if self.is_mock:
            _logger.debug("Using mock data (no endpoint URL)")
            return self._mock.load()
        _logger.debug("Fetching %s from script", view.value)
        return await fetch_artists(self._require_transport(), self._config, view, token=self._token())

    async def fetch_dashboard(self) -> DashboardStats:
        """Fetch the dashboard summary (computed locally in mock mode)."""
        if self.is_mock:
            return self._mock.dashboard()
        return await fetch_dashboard(self._require_transport(), self._config, token=self._token())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, artist: Artist) -> list[Artist]:
        """Add a new artist (and its profiles); returns the refreshed roster."""
        if self.is_mock:
            await self._mock_latency()
            return self._mock.create(artist)
        return await reconcile.apply_create(artist, self._refetch, self._mutate)

    async def update(self, artist: Artist) -> list[Artist]:
        """Save an edited artist, syncing added/removed profiles; returns the refreshed roster."""
        if self.is_mock:
            await self._mock_latency()
            return self._mock.update(artist)
        return await reconcile.apply_update(artist, self._refetch, self._mutate)

    async def log_interaction(self, touchpoint: Touchpoint) -> list[Artist]:
        """Append a touchpoint; returns the refreshed roster."""
        if self.is_mock:
            await self._mock_latency()
            return self._mock.append_touchpoint(touchpoint)
        return await reconcile.append_touchpoint(touchpoint, self._refetch, self._mutate)
