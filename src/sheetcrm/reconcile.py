"""Read-compare-write reconciliation against the sheet.

The script offers no "replace children" call and no diff endpoint, so
moving the sheet to a desired artist state is done with plain mutations
and full re-fetches:

1. push the artist's scalar fields,
2. create every profile that has no id yet, assigning its id locally just
   before its own ``addProfile`` so step 3 sees it as current (a failed
   create takes the id back, leaving the profile pending),
3. re-fetch, then delete every remote profile id the desired artist no
   longer carries,
4. re-fetch again and hand that snapshot back as the authoritative result.

All mutations are awaited one at a time.  The sheet holds a single write
lock, so concurrent writes from one client would only contend with each
other.  Two clients editing the same artist between the re-fetches are
not detected; the last write wins.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sheetcrm._api._common import Mutation, ScriptOp
from sheetcrm._ids import new_artist_id, new_profile_id, new_touch_id
from sheetcrm.models.artist import Artist
from sheetcrm.models.profile import PlatformProfile
from sheetcrm.models.touchpoint import Touchpoint

_logger = logging.getLogger(__name__)

SnapshotFetcher = Callable[[], Awaitable[list[Artist]]]
Mutate = Callable[[Mutation], Awaitable[Any]]


def find_artist(artists: list[Artist], artist_id: str) -> Artist | None:
    for artist in artists:
        if artist.id == artist_id:
            return artist
    return None


def assign_pending_profile_ids(artist: Artist) -> list[PlatformProfile]:
    """Give every id-less profile a fresh id, in place; return those profiles."""
    assigned: list[PlatformProfile] = []
    for profile in artist.profiles:
        if profile.is_pending:
            profile.id = new_profile_id()
            assigned.append(profile)
    return assigned


def profiles_to_delete(remote: Artist | None, desired: Artist) -> list[str]:
    """Remote profile ids absent from *desired*, in remote order."""
    if remote is None:
        return []
    current = set(desired.profile_ids)
    stale: list[str] = []
    for profile_id in remote.profile_ids:
        if profile_id not in current and profile_id not in stale:
            stale.append(profile_id)
    return stale


async def _add_profile(profile: PlatformProfile, artist_id: str, mutate: Mutate) -> bool:
    """Send ``addProfile``, assigning an id first when the profile has none.

    Returns whether an id was assigned.  If the send fails, that id is
    taken back so the profile stays pending for the next attempt.
    """
    assigned = profile.is_pending
    if assigned:
        profile.id = new_profile_id()
    try:
        await mutate(Mutation(ScriptOp.ADD_PROFILE, profile.wire_payload(artist_id)))
    except Exception:
        if assigned:
            profile.id = None
        raise
    return assigned


async def apply_create(artist: Artist, fetch_snapshot: SnapshotFetcher, mutate: Mutate) -> list[Artist]:
    """Create a new artist and each of its profiles, then re-fetch."""
    if not artist.id:
        artist.id = new_artist_id()

    await mutate(Mutation(ScriptOp.ADD_ARTIST, artist.wire_payload()))
    for profile in artist.profiles:
        await _add_profile(profile, artist.id, mutate)

    _logger.info("Created artist %s with %d profiles", artist.id, len(artist.profiles))
    return await fetch_snapshot()


async def apply_update(desired: Artist, fetch_snapshot: SnapshotFetcher, mutate: Mutate) -> list[Artist]:
    """Move the sheet's copy of an existing artist to *desired*.

    *desired* is modified in place: profiles created here get their new
    ids written back onto it, one at a time as each ``addProfile`` is
    sent.  A profile whose create fails is left without an id.
    """
    await mutate(Mutation(ScriptOp.UPDATE_ARTIST, desired.wire_payload()))

    created = 0
    for profile in desired.profiles:
        if profile.is_pending:
            created += await _add_profile(profile, desired.id, mutate)

    live = find_artist(await fetch_snapshot(), desired.id)
    if live is None:
        _logger.warning("Artist %s missing from re-fetch; skipping profile deletions", desired.id)
    stale = profiles_to_delete(live, desired)
    for profile_id in stale:
        await mutate(Mutation(ScriptOp.DELETE_PROFILE, target_id=profile_id))

    _logger.info(
        "Updated artist %s: %d profiles created, %d deleted",
        desired.id,
        created,
        len(stale),
    )
    return await fetch_snapshot()


async def append_touchpoint(touchpoint: Touchpoint, fetch_snapshot: SnapshotFetcher, mutate: Mutate) -> list[Artist]:
    """Log one touchpoint (append-only, never diffed), then re-fetch."""
    if not touchpoint.touch_id:
        touchpoint.touch_id = new_touch_id()
    await mutate(Mutation(ScriptOp.ADD_TOUCHPOINT, touchpoint.to_wire()))
    return await fetch_snapshot()
