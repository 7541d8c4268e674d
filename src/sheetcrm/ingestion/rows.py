"""Tagged raw rows.

The script returns each tab as a list of positional cell lists.  Wrapping
them in :class:`RawRow` records which tab a row came from so the parsers
can address cells by column name instead of bare indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sheetcrm.ingestion.normalize import populated_cells
from sheetcrm.models.artist import ARTIST_ROW_FIELDS
from sheetcrm.models.profile import PROFILE_ROW_FIELDS
from sheetcrm.models.touchpoint import TOUCHPOINT_ROW_FIELDS


class RowKind(StrEnum):
    ARTIST = "artist"
    PROFILE = "profile"
    TOUCHPOINT = "touchpoint"
    STATS = "stats"


_COLUMNS: dict[RowKind, tuple[str, ...]] = {
    RowKind.ARTIST: ARTIST_ROW_FIELDS,
    RowKind.PROFILE: PROFILE_ROW_FIELDS,
    RowKind.TOUCHPOINT: TOUCHPOINT_ROW_FIELDS,
    RowKind.STATS: (),
}


@dataclass(frozen=True, slots=True)
class RawRow:
    kind: RowKind
    index: int
    cells: tuple[Any, ...]

    @property
    def populated(self) -> int:
        return populated_cells(self.cells)

    @property
    def is_empty(self) -> bool:
        return not self.cells

    def cell(self, position: int) -> Any:
        return self.cells[position] if 0 <= position < len(self.cells) else None

    def get(self, column: str) -> Any:
        """Cell for a named column of this row's tab (``None`` past the end)."""
        columns = _COLUMNS[self.kind]
        try:
            position = columns.index(column)
        except ValueError as exc:
            raise KeyError(f"{self.kind} rows have no column {column!r}") from exc
        return self.cell(position)

    def named(self) -> dict[str, Any]:
        return {column: self.cell(i) for i, column in enumerate(_COLUMNS[self.kind])}


def to_raw_rows(kind: RowKind, rows: Any) -> list[RawRow]:
    """Tag every row of a tab; anything that is not a list of lists yields no rows."""
    if not isinstance(rows, (list, tuple)):
        return []
    tagged: list[RawRow] = []
    for index, row in enumerate(rows):
        cells = tuple(row) if isinstance(row, (list, tuple)) else ()
        tagged.append(RawRow(kind=kind, index=index, cells=cells))
    return tagged
