"""Artist, profile and touchpoint row parsing.

Malformed rows are dropped with a DEBUG log and never raise: the sheet
routinely carries blank trailing rows and half-filled lines.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from sheetcrm._constants import MIN_CHILD_ROW_CELLS, UNASSIGNED, UNKNOWN, UNKNOWN_ARTIST
from sheetcrm._ids import new_artist_id
from sheetcrm.ingestion.normalize import cell_bool, cell_int, cell_text, is_blank, today_iso
from sheetcrm.ingestion.rows import RawRow, RowKind, to_raw_rows
from sheetcrm.models.artist import Artist, LifecycleStage
from sheetcrm.models.profile import PlatformProfile
from sheetcrm.models.touchpoint import Touchpoint

_logger = logging.getLogger(__name__)


def _child_row_usable(row: RawRow) -> bool:
    if row.populated < MIN_CHILD_ROW_CELLS:
        _logger.debug("Dropping %s row %d: fewer than %d cells", row.kind, row.index, MIN_CHILD_ROW_CELLS)
        return False
    return True


def group_profiles(rows: Any) -> dict[str, list[PlatformProfile]]:
    """Parse Profiles rows and group them by owning artist id, keeping sheet order."""
    grouped: dict[str, list[PlatformProfile]] = {}
    for row in to_raw_rows(RowKind.PROFILE, rows):
        if not _child_row_usable(row):
            continue
        try:
            profile = PlatformProfile(
                id=row.get("id"),
                platform=row.get("platform"),
                handle=row.get("handle"),
                url=row.get("url"),
                followers=row.get("followers"),
            )
        except ValidationError:
            _logger.debug("Dropping profile row %d", row.index, exc_info=True)
            continue
        grouped.setdefault(cell_text(row.get("artist_id")), []).append(profile)
    return grouped


def group_touchpoints(rows: Any) -> dict[str, list[Touchpoint]]:
    """Parse Touchpoints rows and group them by owning artist id, keeping sheet order."""
    grouped: dict[str, list[Touchpoint]] = {}
    for row in to_raw_rows(RowKind.TOUCHPOINT, rows):
        if not _child_row_usable(row):
            continue
        try:
            touchpoint = Touchpoint.model_validate(row.named())
        except ValidationError:
            _logger.debug("Dropping touchpoint row %d", row.index, exc_info=True)
            continue
        grouped.setdefault(touchpoint.artist_id, []).append(touchpoint)
    return grouped


def _artist_from_row(
    row: RawRow,
    profiles_by_artist: Mapping[str, Sequence[PlatformProfile]],
    touchpoints_by_artist: Mapping[str, Sequence[Touchpoint]],
) -> Artist | None:
    if row.is_empty:
        return None
    raw_id = row.get("id")
    raw_name = row.get("name")
    if is_blank(raw_id) and is_blank(raw_name):
        return None

    name = cell_text(raw_name, UNKNOWN_ARTIST)
    if name == UNKNOWN_ARTIST:
        return None

    artist_id = cell_text(raw_id) or new_artist_id()
    try:
        return Artist(
            id=artist_id,
            name=name,
            art_type=cell_text(row.get("art_type"), UNKNOWN),
            industry=cell_text(row.get("industry")),
            persona=cell_text(row.get("persona"), UNKNOWN),
            timezone=cell_text(row.get("timezone")),
            influence_score=cell_int(row.get("influence_score")),
            fit_score=cell_int(row.get("fit_score")),
            status=cell_text(row.get("status"), LifecycleStage.DISCOVERED.value),
            owner=cell_text(row.get("owner"), UNASSIGNED),
            notes=cell_text(row.get("notes")),
            last_touched=cell_text(row.get("last_touched")) or today_iso(),
            do_not_contact=cell_bool(row.get("do_not_contact")),
            profiles=[p.model_copy() for p in profiles_by_artist.get(artist_id, ())],
            touchpoints=[t.model_copy() for t in touchpoints_by_artist.get(artist_id, ())],
        )
    except ValidationError:
        _logger.debug("Dropping artist row %d", row.index, exc_info=True)
        return None


def parse_artists(
    rows: Any,
    profiles_by_artist: Mapping[str, Sequence[PlatformProfile]] | None = None,
    touchpoints_by_artist: Mapping[str, Sequence[Touchpoint]] | None = None,
) -> list[Artist]:
    """Turn Artists rows into :class:`Artist` records with their children attached.

    Rows that are empty, have neither id nor name, or whose name is blank
    (reads as the ``Unknown Artist`` placeholder) are skipped.  A later row
    repeating an id already seen is skipped too, so ids are unique.
    """
    profiles_by_artist = profiles_by_artist or {}
    touchpoints_by_artist = touchpoints_by_artist or {}

    artists: list[Artist] = []
    seen: set[str] = set()
    for row in to_raw_rows(RowKind.ARTIST, rows):
        artist = _artist_from_row(row, profiles_by_artist, touchpoints_by_artist)
        if artist is None:
            continue
        if artist.id in seen:
            _logger.debug("Dropping artist row %d: duplicate id %s", row.index, artist.id)
            continue
        seen.add(artist.id)
        artists.append(artist)
    return artists


def parse_fetch_data(data: Any) -> list[Artist]:
    """Parse the ``data`` object of a fetch response (``artists``/``profiles``/``touchpoints``)."""
    if not isinstance(data, Mapping):
        return []
    return parse_artists(
        data.get("artists"),
        group_profiles(data.get("profiles")),
        group_touchpoints(data.get("touchpoints")),
    )
