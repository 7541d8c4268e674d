from __future__ import annotations

import copy
import json
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from sheetcrm import (
    Artist,
    ArtistStore,
    ConfigError,
    Credential,
    LifecycleStage,
    MemoryBlobStore,
    PlatformProfile,
    SheetCrmError,
    SheetView,
    StorageError,
    SyncConfig,
    Touchpoint,
)
from sheetcrm._constants import CONFIG_KEY, DATA_KEY, TOUCHPOINTS_KEY
from sheetcrm.exceptions import RemoteLogicError

URL = "https://script.google.com/macros/s/abc/exec"
SECRET = "s3cret"

ARTIST_KEYS = (
    "id",
    "name",
    "artType",
    "industry",
    "persona",
    "timezone",
    "influenceScore",
    "fitScore",
    "status",
    "owner",
    "notes",
    "lastTouched",
    "doNotContact",
)
PROFILE_KEYS = ("id", "artistId", "platform", "followers", "handle", "url")
TOUCH_KEYS = ("touchId", "artistId", "platform", "type", "messageText", "sentAt", "outcome", "linkId")


def _row(data: Mapping[str, Any], keys: tuple[str, ...]) -> list[Any]:
    return [data.get(key) for key in keys]


@dataclass
class FakeSheetBackend:
    """Transport double holding the sheet as positional rows, like the script does."""

    artists: list[list[Any]] = field(
        default_factory=lambda: [
            ["a1", "Sarah Chen", "Illustration", "Game Dev", "Professional", "PST", 85, 5, "Engaged", "You", "",
             "2023-10-01", False],
            ["a2", "Mike Ross", "3D", "Film", "Mid", "EST", 60, 3, "Discovered", "", "", "2023-09-15", False],
        ]
    )
    profiles: list[list[Any]] = field(
        default_factory=lambda: [
            ["p1", "a1", "ArtStation", 1200, "schen_art", ""],
            ["p2", "a1", "Instagram", 800, "@schen", ""],
        ]
    )
    touchpoints: list[list[Any]] = field(default_factory=list)
    stats: list[list[Any]] = field(
        default_factory=lambda: [
            ["Dashboard", "Param", "Total Roster", "Engaged", "Fit Score", "High Impact"],
            ["", "", 2, 1, 4, 1],
        ]
    )
    calls: dict[str, int] = field(default_factory=dict)
    views: list[str | None] = field(default_factory=list)
    tokens: list[str | None] = field(default_factory=list)

    def _record_call(self, op: str) -> None:
        self.calls[op] = self.calls.get(op, 0) + 1

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
        assert endpoint_url == URL
        assert attempts == 3
        self.tokens.append(token)
        if secret != SECRET:
            raise RemoteLogicError("Unauthorized", op="fetch", remote_message="Unauthorized")

        if payload is None:
            self._record_call("fetch")
            self.views.append(view)
            if view == SheetView.DASHBOARD:
                return {"status": "success", "data": {"stats": copy.deepcopy(self.stats)}}
            data = {"artists": self.artists, "profiles": self.profiles, "touchpoints": self.touchpoints}
            return {"status": "success", "data": copy.deepcopy(data)}

        op = payload["op"]
        self._record_call(op)
        data = payload.get("data", {})
        if op == "addArtist":
            self.artists.insert(0, _row(data, ARTIST_KEYS))
        elif op == "updateArtist":
            self.artists = [_row(data, ARTIST_KEYS) if r[0] == data["id"] else r for r in self.artists]
        elif op == "addProfile":
            self.profiles.append(_row(data, PROFILE_KEYS))
        elif op == "deleteProfile":
            self.profiles = [r for r in self.profiles if r[0] != payload["id"]]
        elif op == "addTouchpoint":
            self.touchpoints.append(_row(data, TOUCH_KEYS))
        else:
            raise AssertionError(f"Unexpected op in fake backend: {op}")
        return {"status": "success", "data": {}}


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(endpoint_url=URL, access_secret=SECRET)


@pytest.fixture
def backend() -> FakeSheetBackend:
    return FakeSheetBackend()


@pytest.fixture
def delays() -> list[float]:
    return []


@pytest.fixture
def mock_store(delays: list[float]) -> ArtistStore:
    async def record_sleep(delay: float) -> None:
        delays.append(delay)

    return ArtistStore(SyncConfig(), blobs=MemoryBlobStore(), sleep=record_sleep, rng=random.Random(7))


def _by_id(artists: list[Artist], artist_id: str) -> Artist:
    return next(a for a in artists if a.id == artist_id)


# ------------------------------------------------------------------
# Remote mode
# ------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_remote_fetch_update_and_log(config: SyncConfig, backend: FakeSheetBackend) -> None:
    async with ArtistStore(config, transport=backend) as store:
        assert store.is_mock is False

        artists = await store.fetch()
        assert [a.name for a in artists] == ["Sarah Chen", "Mike Ross"]
        sarah = _by_id(artists, "a1")
        assert sarah.profile_ids == ["p1", "p2"]
        assert _by_id(artists, "a2").owner == "Unassigned"

        sarah.status = LifecycleStage.SIGNED_UP
        sarah.profiles = [sarah.profiles[0], PlatformProfile(platform="Cara", handle="schen")]
        artists = await store.update(sarah)

        refreshed = _by_id(artists, "a1")
        assert refreshed.status is LifecycleStage.SIGNED_UP
        assert refreshed.profile_ids == ["p1", sarah.profiles[1].id]

        artists = await store.log_interaction(
            Touchpoint(artist_id="a2", platform="Instagram", type="dm", message_text="Love your work")
        )
        [touch] = _by_id(artists, "a2").touchpoints
        assert touch.message_text == "Love your work"
        assert touch.touch_id.startswith("t")

    assert backend.calls == {"fetch": 4, "updateArtist": 1, "addProfile": 1, "deleteProfile": 1, "addTouchpoint": 1}
    assert set(backend.views) == {"assigned"}


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_remote_create(config: SyncConfig, backend: FakeSheetBackend) -> None:
    async with ArtistStore(config, transport=backend) as store:
        artists = await store.create(
            Artist(id="", name="Nova", art_type="Video", profiles=[PlatformProfile(platform="TikTok", handle="@nova")])
        )

    assert artists[0].name == "Nova"
    assert artists[0].id.startswith("a")
    assert len(artists[0].profiles) == 1
    assert artists[0].profiles[0].link == "https://tiktok.com/@nova"


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_remote_dashboard(config: SyncConfig, backend: FakeSheetBackend) -> None:
    async with ArtistStore(config, transport=backend) as store:
        stats = await store.fetch_dashboard()

    assert stats.total_artists == 2
    assert stats.avg_fit_score == 4.0
    assert backend.views == ["dashboard"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_unassigned_view_is_forwarded(config: SyncConfig, backend: FakeSheetBackend) -> None:
    async with ArtistStore(config, transport=backend) as store:
        await store.fetch(SheetView.UNASSIGNED)

    assert backend.views == ["unassigned"]


@pytest.mark.asyncio
async def test_fetch_rejects_dashboard_view(config: SyncConfig, backend: FakeSheetBackend) -> None:
    store = ArtistStore(config, transport=backend)

    with pytest.raises(ValueError, match="fetch_dashboard"):
        await store.fetch(SheetView.DASHBOARD)

    assert backend.calls == {}
    with pytest.raises(ValueError):
        ArtistStore(config, transport=backend, refresh_view=SheetView.DASHBOARD)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_wrong_secret_surfaces_remote_error(backend: FakeSheetBackend) -> None:
    config = SyncConfig(endpoint_url=URL, access_secret="nope")

    async with ArtistStore(config, transport=backend) as store:
        with pytest.raises(RemoteLogicError, match="Unauthorized"):
            await store.fetch()


@pytest.mark.asyncio
async def test_credential_forwarded_only_while_valid(config: SyncConfig, backend: FakeSheetBackend) -> None:
    store = ArtistStore(config, transport=backend, credential=Credential(access_token="tok"))
    await store.fetch()

    store.set_credential(Credential(access_token="tok", ttl=0))
    await store.fetch()

    store.set_credential(None)
    await store.fetch()

    assert backend.tokens == ["tok", None, None]


@pytest.mark.asyncio
async def test_remote_store_requires_context_manager(config: SyncConfig) -> None:
    store = ArtistStore(config)

    with pytest.raises(SheetCrmError, match="not initialized"):
        await store.fetch()


@pytest.mark.asyncio
async def test_context_manager_owns_its_http_session(config: SyncConfig) -> None:
    store = ArtistStore(config)

    async with store:
        assert store._http_session is not None
        session = store._http_session

    assert session.closed
    assert store._http_session is None


# ------------------------------------------------------------------
# Mock mode
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_mock_fetch_returns_seed_without_writing(mock_store: ArtistStore, delays: list[float]) -> None:
    artists = await mock_store.fetch()

    assert mock_store.is_mock
    assert [a.name for a in artists] == ["Sarah Chen", "Mike Ross"]
    assert artists[0].profile_ids == ["p1"]
    assert delays == []
    assert mock_store._blobs.get(DATA_KEY) is None  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_mock_writes_are_delayed_and_persisted(mock_store: ArtistStore, delays: list[float]) -> None:
    artists = await mock_store.create(Artist(id="", name="Nova", profiles=[PlatformProfile(platform="Cara")]))

    assert [a.name for a in artists] == ["Nova", "Sarah Chen", "Mike Ross"]
    assert artists[0].id.startswith("a")
    assert artists[0].profiles[0].id is not None
    assert len(delays) == 1
    assert 0.3 <= delays[0] <= 0.5

    stored = json.loads(mock_store._blobs.get(DATA_KEY))  # type: ignore[attr-defined]
    assert stored[0]["name"] == "Nova"
    assert "touchpoints" not in stored[0]


@pytest.mark.asyncio
async def test_mock_create_never_duplicates_an_id(mock_store: ArtistStore) -> None:
    artists = await mock_store.create(Artist(id="1", name="Dup"))

    ids = [a.id for a in artists]
    assert len(ids) == 3
    assert len(set(ids)) == 3
    assert artists[0].name == "Dup"
    assert artists[0].id != "1"
    assert _by_id(artists, "1").name == "Sarah Chen"


@pytest.mark.asyncio
async def test_mock_update_and_log_interaction(mock_store: ArtistStore, delays: list[float]) -> None:
    sarah = _by_id(await mock_store.fetch(), "1")
    sarah.status = LifecycleStage.ACTIVE
    sarah.profiles = []
    artists = await mock_store.update(sarah)
    assert _by_id(artists, "1").status is LifecycleStage.ACTIVE
    assert _by_id(artists, "1").profiles == []

    artists = await mock_store.log_interaction(Touchpoint(artist_id="1", platform="Email", type="email"))
    assert [t.type for t in _by_id(artists, "1").touchpoints] == ["email"]
    assert _by_id(artists, "2").touchpoints == []

    log = json.loads(mock_store._blobs.get(TOUCHPOINTS_KEY))  # type: ignore[attr-defined]
    assert log[0]["artistId"] == "1"
    assert len(delays) == 2


@pytest.mark.asyncio
async def test_mock_dashboard_is_derived_from_roster(mock_store: ArtistStore) -> None:
    stats = await mock_store.fetch_dashboard()

    assert stats.total_artists == 2
    assert stats.engaged == 1
    assert stats.high_influence == 1
    assert stats.avg_fit_score == 4.0


@pytest.mark.asyncio
async def test_mock_corrupt_data_raises_storage_error() -> None:
    store = ArtistStore(SyncConfig(), blobs=MemoryBlobStore({DATA_KEY: json.dumps([{"name": 5}])}))

    with pytest.raises(StorageError):
        await store.fetch()


@pytest.mark.asyncio
async def test_mock_and_remote_return_same_shape(config: SyncConfig, backend: FakeSheetBackend) -> None:
    async def no_sleep(_delay: float) -> None:
        return None

    def new_artist() -> Artist:
        return Artist(id="", name="Parity", status="Qualified", profiles=[PlatformProfile(platform="Behance")])

    mock = ArtistStore(SyncConfig(), sleep=no_sleep)
    remote = ArtistStore(config, transport=backend)

    from_mock = await mock.create(new_artist())
    from_remote = await remote.create(new_artist())

    for roster in (from_mock, from_remote):
        assert all(isinstance(a, Artist) for a in roster)
        created = next(a for a in roster if a.name == "Parity")
        assert created.status is LifecycleStage.QUALIFIED
        assert len(created.profiles) == 1
        assert created.profiles[0].id is not None


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


def test_invalid_config_rejected_at_construction() -> None:
    with pytest.raises(ConfigError):
        ArtistStore(SyncConfig(endpoint_url="https://script.google.com/macros/s/abc/edit"))


def test_save_config_rejects_editor_url_without_writing() -> None:
    blobs = MemoryBlobStore()
    store = ArtistStore(SyncConfig(), blobs=blobs)

    with pytest.raises(ConfigError, match="/exec"):
        store.save_config(SyncConfig(endpoint_url="https://script.google.com/macros/s/abc/dev"))

    assert blobs.get(CONFIG_KEY) is None
    assert store.is_mock


def test_save_config_switches_mode_and_persists() -> None:
    blobs = MemoryBlobStore()
    store = ArtistStore(SyncConfig(), blobs=blobs)

    saved = store.save_config(SyncConfig(endpoint_url=f"  {URL}  ", access_secret=SECRET))

    assert saved.endpoint_url == URL
    assert store.is_mock is False
    reloaded = ArtistStore.from_blobs(blobs)
    assert reloaded.config.endpoint_url == URL
    assert reloaded.config.access_secret == SECRET
