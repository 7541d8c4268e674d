"""Touchpoint (outreach log entry) model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from sheetcrm.models._base import SheetBaseModel, SheetEnum


class TouchpointType(SheetEnum):
    """Channel used for an outreach message."""

    DM = "dm"
    COMMENT = "comment"
    EMAIL = "email"

    @classmethod
    def _missing_(cls, value: object) -> TouchpointType | None:
        if isinstance(value, str):
            compact = "".join(ch for ch in value.casefold() if ch.isalpha())
            if compact in {"dm", "dms", "directmessage", "message"}:
                return cls.DM
            if compact in {"comment", "comments", "reply"}:
                return cls.COMMENT
            if compact in {"email", "emails", "mail"}:
                return cls.EMAIL
        found = super()._missing_(value)
        return found if isinstance(found, TouchpointType) else None


class Touchpoint(SheetBaseModel):
    """An append-only outreach record.  Never edited once logged."""

    touch_id: str = ""
    artist_id: str = ""
    platform: str = ""
    type: TouchpointType = TouchpointType.DM
    message_text: str = ""
    sent_at: str = ""
    outcome: str | None = None
    link_id: str | None = None

    @field_validator("touch_id", "artist_id", "platform", "message_text", "sent_at", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("outcome", "link_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> TouchpointType:
        # Unmatched channel text raises, which drops the row at the parse boundary.
        return value if isinstance(value, TouchpointType) else TouchpointType(str(value).strip())


TOUCHPOINT_ROW_FIELDS: tuple[str, ...] = (
    "touch_id",
    "artist_id",
    "platform",
    "type",
    "message_text",
    "sent_at",
    "outcome",
    "link_id",
)
"""Column order of the Touchpoints sheet."""
