"""Dashboard tab parsing.

The summary tab is laid out as labelled blocks::

    Dashboard | Param   | Total Roster | Engaged | ...
              | Artists | 42           | 7       | ...

Column 0 holds the section title, column 1 a row label, and metric names
start at column 2.  The row right below a title row carries the values.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sheetcrm.ingestion.normalize import cell_text
from sheetcrm.ingestion.rows import RowKind, to_raw_rows
from sheetcrm.models.dashboard import DASHBOARD_SECTIONS, DashboardStats

_FIRST_METRIC_COLUMN = 2


def find_section(rows: Any, title: str) -> dict[str, Any]:
    """Metric name -> value for the first block titled *title* (``{}`` if absent)."""
    tagged = to_raw_rows(RowKind.STATS, rows)
    for position, header in enumerate(tagged):
        if cell_text(header.cell(0)) != title or position + 1 >= len(tagged):
            continue
        values = tagged[position + 1]
        metrics: dict[str, Any] = {}
        for column in range(_FIRST_METRIC_COLUMN, len(header.cells)):
            key = cell_text(header.cell(column))
            if key:
                metrics[key] = values.cell(column)
        return metrics
    return {}


def parse_dashboard_sections(rows: Any, titles: Iterable[str] = DASHBOARD_SECTIONS) -> DashboardStats:
    """Read every known section; missing sections come back as empty maps."""
    return DashboardStats(sections={title: find_section(rows, title) for title in titles})
