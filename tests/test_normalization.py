from __future__ import annotations

import math
from datetime import datetime

from sheetcrm.ingestion.normalize import (
    cell_bool,
    cell_int,
    cell_text,
    is_blank,
    populated_cells,
    safe_float,
    safe_int,
    safe_str,
    today_iso,
)


def test_safe_float_rejects_non_numeric_cells() -> None:
    assert safe_float(None) is None
    assert safe_float("") is None
    assert safe_float("  ") is None
    assert safe_float("--") is None
    assert safe_float("abc") is None
    assert safe_float(True) is None
    assert safe_float(math.nan) is None
    assert safe_float(math.inf) is None


def test_safe_float_and_int_parse_numbers_and_numeric_text() -> None:
    assert safe_float(" 3.8 ") == 3.8
    assert safe_float(12) == 12.0
    assert safe_int("4.0") == 4
    assert safe_int(4.9) == 4
    assert safe_int("n/a") is None


def test_text_cells() -> None:
    assert safe_str("  x ") == "x"
    assert safe_str("   ") is None
    assert cell_text(None, "fallback") == "fallback"
    assert cell_text(" Sarah ") == "Sarah"
    assert cell_text(42) == "42"
    assert is_blank(None)
    assert is_blank(" \t")
    assert not is_blank(0)


def test_cell_int_reads_blank_as_zero() -> None:
    assert cell_int("") == 0
    assert cell_int("abc") == 0
    assert cell_int("85") == 85


def test_cell_bool_accepts_booleans_and_true_text_only() -> None:
    assert cell_bool(True) is True
    assert cell_bool("TRUE") is True
    assert cell_bool("true") is False
    assert cell_bool(" TRUE ") is False
    assert cell_bool("yes") is False
    assert cell_bool(1) is False
    assert cell_bool(None) is False


def test_populated_cells_ignores_blanks() -> None:
    assert populated_cells(["p1", "", None, "  ", 0]) == 2
    assert populated_cells("not a row") == 0


def test_today_iso_is_parseable() -> None:
    assert datetime.fromisoformat(today_iso()).tzinfo is not None
