"""Artist model and its classification enums."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from sheetcrm._constants import UNASSIGNED
from sheetcrm.ingestion.normalize import cell_bool, safe_int
from sheetcrm.models._base import SheetBaseModel, SheetEnum
from sheetcrm.models.profile import PlatformProfile
from sheetcrm.models.touchpoint import Touchpoint


class LifecycleStage(SheetEnum):
    """Outreach pipeline stage, declared in funnel order."""

    DISCOVERED = "Discovered"
    QUALIFIED = "Qualified"
    ASSIGNED = "Assigned"
    MESSAGED = "Messaged"
    ENGAGED = "Engaged"
    CLICKED = "Clicked"
    SIGNED_UP = "Signed Up"
    FIRST_MARK = "1st Mark"
    INSTALLED = "Installed"
    ACTIVE = "Active"
    ADVOCATE = "Advocate"

    CLOSED_NOT_FIT = "Closed: Not a fit"
    CLOSED_NO_RESPONSE = "Closed: No response"
    CLOSED_HOSTILE = "Closed: Hostile / do-not-contact / Later"

    @property
    def is_closed(self) -> bool:
        return self.value.startswith("Closed")

    @property
    def order(self) -> int:
        """Position in the funnel (0 = Discovered)."""
        return list(LifecycleStage).index(self)

    @classmethod
    def active_stages(cls) -> list[LifecycleStage]:
        return [stage for stage in cls if not stage.is_closed]


class ArtType(SheetEnum):
    THREE_D = "3D"
    ILLUSTRATION = "Illustration"
    VIDEO = "Video"
    PHOTOGRAPHY = "Photography"
    OTHER = "Other"
    UNKNOWN = "Unknown"


class Persona(SheetEnum):
    STUDENT = "Student"
    MID = "Mid"
    PROFESSIONAL = "Professional"
    INFLUENCER = "Influencer"
    UNKNOWN = "Unknown"


class Artist(SheetBaseModel):
    """An artist on the outreach roster.

    Field names map to the camelCase keys used by the script endpoint
    (``artType``, ``fitScore``, ``doNotContact``...).  The artist owns its
    ``profiles`` and ``touchpoints``; children only point back through
    their ``artist_id`` on the wire.
    """

    id: str
    """Artist ID (stable; sheet- or client-assigned)."""
    name: str
    art_type: ArtType = ArtType.UNKNOWN
    industry: str = ""
    persona: Persona = Persona.UNKNOWN
    timezone: str = ""
    influence_score: int = 0
    """Influence score, 0-100."""
    fit_score: int = 0
    """Fit score, 1-5 (0 when never scored)."""
    status: LifecycleStage = LifecycleStage.DISCOVERED
    owner: str = UNASSIGNED
    notes: str = ""
    last_touched: str = ""
    """ISO date of the last outreach."""
    do_not_contact: bool = False
    profiles: list[PlatformProfile] = Field(default_factory=list)
    touchpoints: list[Touchpoint] = Field(default_factory=list)

    @property
    def profile_ids(self) -> list[str]:
        """IDs of persisted profiles, in order."""
        return [p.id for p in self.profiles if p.id]

    @property
    def primary_profile(self) -> PlatformProfile | None:
        return self.profiles[0] if self.profiles else None

    @field_validator("id", "name", "industry", "timezone", "notes", "last_touched", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("owner", mode="before")
    @classmethod
    def _coerce_owner(cls, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        return text or UNASSIGNED

    @field_validator("influence_score", "fit_score", mode="before")
    @classmethod
    def _coerce_scores(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None else parsed

    @field_validator("do_not_contact", mode="before")
    @classmethod
    def _coerce_dnc(cls, value: Any) -> bool:
        return cell_bool(value)

    @field_validator("art_type", mode="before")
    @classmethod
    def _coerce_art_type(cls, value: Any) -> ArtType:
        return ArtType.coerce(value, ArtType.UNKNOWN)  # type: ignore[return-value]

    @field_validator("persona", mode="before")
    @classmethod
    def _coerce_persona(cls, value: Any) -> Persona:
        return Persona.coerce(value, Persona.UNKNOWN)  # type: ignore[return-value]

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> LifecycleStage:
        return LifecycleStage.coerce(value, LifecycleStage.DISCOVERED)  # type: ignore[return-value]

    def wire_payload(self) -> dict[str, Any]:
        """Body ``data`` of ``addArtist``/``updateArtist``: scalar fields only."""
        return self.to_wire(exclude={"profiles", "touchpoints"})


ARTIST_ROW_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "art_type",
    "industry",
    "persona",
    "timezone",
    "influence_score",
    "fit_score",
    "status",
    "owner",
    "notes",
    "last_touched",
    "do_not_contact",
)
"""Column order of the Artists sheet."""
