"""Normalization helpers.

Tolerant parsing of individual spreadsheet cells.  Cells arrive as
whatever the script serialised: strings, numbers, booleans, ``null`` or
ISO date strings.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "" or value == "--":
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def is_blank(value: Any) -> bool:
    """Empty cell: ``None`` or whitespace-only text."""
    return value is None or (isinstance(value, str) and not value.strip())


def cell_text(value: Any, default: str = "") -> str:
    """Cell as stripped text, *default* when blank."""
    text = safe_str(value)
    return default if text is None else text


def cell_int(value: Any) -> int:
    """Cell as an integer; blank or non-numeric reads as ``0``."""
    parsed = safe_int(value)
    return 0 if parsed is None else parsed


def cell_bool(value: Any) -> bool:
    """Checkbox cell: a real boolean or the literal text ``TRUE``."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value == "TRUE"


def populated_cells(row: Any) -> int:
    if not isinstance(row, (list, tuple)):
        return 0
    return sum(1 for cell in row if not is_blank(cell))


def today_iso() -> str:
    return datetime.now(UTC).isoformat()
