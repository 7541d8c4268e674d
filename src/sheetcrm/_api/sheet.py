"""Sheet endpoint calls: fetch views and send mutations."""

from __future__ import annotations

import logging
from typing import Any

from sheetcrm._api._common import Mutation, SheetView
from sheetcrm._transport import Transport
from sheetcrm.config import SyncConfig
from sheetcrm.ingestion.artists import parse_fetch_data
from sheetcrm.ingestion.dashboard import parse_dashboard_sections
from sheetcrm.models.artist import Artist
from sheetcrm.models.dashboard import DashboardStats

_logger = logging.getLogger(__name__)


def _data(envelope: dict[str, Any]) -> dict[str, Any]:
    data = envelope.get("data")
    return data if isinstance(data, dict) else {}


async def fetch_artists(
    transport: Transport,
    config: SyncConfig,
    view: SheetView = SheetView.ASSIGNED,
    *,
    token: str | None = None,
) -> list[Artist]:
    """Read one roster view and parse it into artists."""
    envelope = await transport.send(
        config.endpoint_url,
        None,
        config.access_secret,
        config.retry.attempts,
        view=view.value,
        token=token,
    )
    artists = parse_fetch_data(_data(envelope))
    _logger.debug("Fetched %d artists (view=%s)", len(artists), view.value)
    return artists


async def fetch_dashboard(
    transport: Transport,
    config: SyncConfig,
    *,
    token: str | None = None,
) -> DashboardStats:
    """Read the summary tab (``view=dashboard``)."""
    envelope = await transport.send(
        config.endpoint_url,
        None,
        config.access_secret,
        config.retry.attempts,
        view=SheetView.DASHBOARD.value,
        token=token,
    )
    return parse_dashboard_sections(_data(envelope).get("stats"))


async def send_mutation(
    transport: Transport,
    config: SyncConfig,
    mutation: Mutation,
    *,
    token: str | None = None,
) -> dict[str, Any]:
    """Send one write and return the success envelope."""
    _logger.debug("Mutation %s target=%s", mutation.op.value, mutation.target_id or mutation.data.get("id"))
    return await transport.send(
        config.endpoint_url,
        mutation.to_payload(),
        config.access_secret,
        config.retry.attempts,
        token=token,
    )
