"""Ingestion layer.

The single boundary where untyped spreadsheet rows become typed records.
Nothing outside this package handles raw rows.
"""

__all__: list[str] = []
