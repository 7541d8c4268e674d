"""Base model and enum for sheet-backed records.

Every record model inherits from :class:`SheetBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys used on the wire and
  in mock storage map to snake_case fields.
* ``populate_by_name`` so Python callers can use field names.
* :meth:`SheetBaseModel.to_wire` producing the camelCase dict the script
  endpoint expects.

Enums inherit from :class:`SheetEnum`: a ``StrEnum`` whose lookup is
case- and whitespace-insensitive and which resolves unmatched text to an
``UNKNOWN`` member when the subclass defines one.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SheetEnum(enum.StrEnum):
    """Base for enums read from free-text spreadsheet cells."""

    @classmethod
    def _missing_(cls, value: object) -> SheetEnum | None:
        if isinstance(value, str):
            wanted = " ".join(value.split()).casefold()
            for member in cls:
                if member.value.casefold() == wanted or member.name.casefold() == wanted:
                    return member
        # noinspection PyUnresolvedReferences
        if hasattr(cls, "UNKNOWN"):
            unknown: SheetEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return None

    @classmethod
    def coerce(cls, value: Any, default: SheetEnum) -> SheetEnum:
        """Like ``cls(value)`` but blank or unmatched input yields *default*."""
        if isinstance(value, cls):
            return value
        if value is None or str(value).strip() == "":
            return default
        try:
            return cls(str(value).strip())
        except ValueError:
            return default


class SheetBaseModel(BaseModel):
    """Base for artist, profile and touchpoint records."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """camelCase, JSON-safe dict (enums as their text values)."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)
