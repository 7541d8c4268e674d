"""Shared vocabulary for script endpoint calls.

It is internal to sheetcrm and may change at any time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ScriptOp(StrEnum):
    """Operation names understood by the script's ``doPost`` handler."""

    ADD_ARTIST = "addArtist"
    UPDATE_ARTIST = "updateArtist"
    ADD_PROFILE = "addProfile"
    DELETE_PROFILE = "deleteProfile"
    ADD_TOUCHPOINT = "addTouchpoint"


class SheetView(StrEnum):
    """Read views understood by the script's ``doGet`` handler."""

    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    DASHBOARD = "dashboard"


@dataclass(frozen=True, slots=True)
class Mutation:
    """One write against the sheet.

    Exactly one of ``data`` (create/update payload) or ``target_id``
    (delete) is meaningful for a given op.
    """

    op: ScriptOp
    data: dict[str, Any] = field(default_factory=dict)
    target_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Write body without the secret."""
        payload: dict[str, Any] = {"op": self.op.value}
        if self.target_id is not None:
            payload["id"] = self.target_id
        else:
            payload["data"] = self.data
        return payload
