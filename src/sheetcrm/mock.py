"""Local-only artist sheet used when no endpoint URL is configured.

Artists live as a JSON list under ``sheetcrm_data`` and logged
touchpoints as a separate append-only JSON list under
``sheetcrm_touchpoints``; both keys stay absent until the first write.
Until then reads return a small built-in roster.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from sheetcrm._constants import DATA_KEY, TOUCHPOINTS_KEY
from sheetcrm._ids import new_artist_id, new_touch_id
from sheetcrm.blobs import BlobStore
from sheetcrm.exceptions import StorageError
from sheetcrm.models.artist import Artist
from sheetcrm.models.dashboard import DashboardStats
from sheetcrm.models.touchpoint import Touchpoint
from sheetcrm.reconcile import assign_pending_profile_ids

_logger = logging.getLogger(__name__)

_ARTISTS = TypeAdapter(list[Artist])
_TOUCHPOINTS = TypeAdapter(list[Touchpoint])

SEED_ARTISTS: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "name": "Sarah Chen",
        "artType": "Illustration",
        "industry": "Game Dev",
        "persona": "Professional",
        "timezone": "PST",
        "influenceScore": 85,
        "fitScore": 5,
        "status": "Engaged",
        "owner": "You",
        "notes": "Key prospect for Q3",
        "lastTouched": "2023-10-01",
        "doNotContact": False,
        "profiles": [{"id": "p1", "platform": "ArtStation", "handle": "schen_art", "url": "https://artstation.com"}],
    },
    {
        "id": "2",
        "name": "Mike Ross",
        "artType": "3D",
        "industry": "Film",
        "persona": "Mid",
        "timezone": "EST",
        "influenceScore": 60,
        "fitScore": 3,
        "status": "Discovered",
        "owner": "Unassigned",
        "notes": "",
        "lastTouched": "2023-09-15",
        "doNotContact": False,
        "profiles": [],
    },
)


class MockSheet:
    """Blob-backed stand-in for the remote sheet."""

    def __init__(self, blobs: BlobStore) -> None:
        self._blobs = blobs

    def _read(self, key: str, adapter: TypeAdapter[Any]) -> Any | None:
        stored = self._blobs.get(key)
        if stored is None:
            return None
        try:
            return adapter.validate_json(stored)
        except ValidationError as exc:
            raise StorageError(f"Local data under {key!r} is unreadable: {exc.error_count()} errors") from exc

    def _stored_artists(self) -> list[Artist]:
        artists = self._read(DATA_KEY, _ARTISTS)
        if artists is None:
            return _ARTISTS.validate_python([dict(seed) for seed in SEED_ARTISTS])
        return artists

    def _stored_touchpoints(self) -> list[Touchpoint]:
        touchpoints = self._read(TOUCHPOINTS_KEY, _TOUCHPOINTS)
        return [] if touchpoints is None else touchpoints

    def _write_artists(self, artists: list[Artist]) -> None:
        # Touchpoints are kept in their own log, never inside the artist list.
        payload = [a.to_wire(exclude={"touchpoints"}) for a in artists]
        self._blobs.set(DATA_KEY, json.dumps(payload))

    def load(self) -> list[Artist]:
        """Current roster with logged touchpoints attached to their artists."""
        artists = self._stored_artists()
        by_artist: dict[str, list[Touchpoint]] = {}
        for touchpoint in self._stored_touchpoints():
            by_artist.setdefault(touchpoint.artist_id, []).append(touchpoint)
        for artist in artists:
            artist.touchpoints = by_artist.get(artist.id, [])
        return artists

    def create(self, artist: Artist) -> list[Artist]:
        current = self._stored_artists()
        taken = {a.id for a in current}
        if artist.id in taken:
            _logger.debug("Artist id %s already taken; assigning a new one", artist.id)
        while not artist.id or artist.id in taken:
            artist.id = new_artist_id()
        assign_pending_profile_ids(artist)
        self._write_artists([artist.model_copy(deep=True), *current])
        return self.load()

    def update(self, artist: Artist) -> list[Artist]:
        assign_pending_profile_ids(artist)
        current = self._stored_artists()
        if not any(a.id == artist.id for a in current):
            _logger.warning("Artist %s not found in local data; nothing updated", artist.id)
        self._write_artists([artist.model_copy(deep=True) if a.id == artist.id else a for a in current])
        return self.load()

    def append_touchpoint(self, touchpoint: Touchpoint) -> list[Artist]:
        if not touchpoint.touch_id:
            touchpoint.touch_id = new_touch_id()
        log = [*self._stored_touchpoints(), touchpoint]
        self._blobs.set(TOUCHPOINTS_KEY, json.dumps([t.to_wire() for t in log]))
        return self.load()

    def dashboard(self) -> DashboardStats:
        return DashboardStats.from_artists(self._stored_artists())
