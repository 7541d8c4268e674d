"""Platform profile model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from sheetcrm.ingestion.normalize import safe_int
from sheetcrm.models._base import SheetBaseModel
from sheetcrm.platforms import platform_color, resolve_profile_url


class PlatformProfile(SheetBaseModel):
    """One social/portfolio presence of an artist.

    ``id`` is ``None`` until the profile has been created remotely; such a
    profile is a pending create.
    """

    id: str | None = None
    """Profile ID (``None`` until persisted)."""
    platform: str = ""
    """Free-text platform name (``"ArtStation"``, ``"IG"``...)."""
    handle: str = ""
    url: str = ""
    followers: int | None = None

    @property
    def is_pending(self) -> bool:
        """Whether this profile still needs an ``addProfile`` call."""
        return not self.id

    @property
    def link(self) -> str:
        """Clickable profile URL derived from ``url`` or ``handle``."""
        return resolve_profile_url(self.platform, self.url or self.handle)

    @property
    def color(self) -> str:
        return platform_color(self.platform)

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_is_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("platform", "handle", "url", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("followers", mode="before")
    @classmethod
    def _coerce_followers(cls, value: Any) -> int | None:
        return safe_int(value)

    def wire_payload(self, artist_id: str) -> dict[str, Any]:
        """Body ``data`` of an ``addProfile`` call."""
        payload = self.to_wire()
        payload["artistId"] = artist_id
        return payload


PROFILE_ROW_FIELDS: tuple[str, ...] = ("id", "artist_id", "platform", "followers", "handle", "url")
"""Column order of the Profiles sheet."""
