#!/usr/bin/env python3
"""Dump what the sheetcrm library reads from a deployed sheet.

Fetches one roster view (or the dashboard) and prints the parsed records
so you can check the column mapping against the real sheet.

Usage
-----
Set environment variables and run::

    export SHEETCRM_ENDPOINT_URL="https://script.google.com/macros/s/.../exec"
    export SHEETCRM_ACCESS_SECRET="your-shared-secret"
    python scripts/dump_sheet.py

Without ``SHEETCRM_ENDPOINT_URL`` the built-in mock roster is printed.

Options::

    --view assigned|unassigned|dashboard   View to fetch (default: assigned)
    --json                                 Output as machine-readable JSON
    --output FILE                          Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from sheetcrm import ArtistStore, SheetView, SyncConfig  # noqa: E402
from sheetcrm.models import Artist, DashboardStats  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_artist(artist: Artist) -> list[str]:
    lines = [
        f"  {artist.id:<12} {artist.name}",
        f"      status={artist.status.value}  owner={artist.owner}  fit={artist.fit_score}  "
        f"influence={artist.influence_score}  dnc={artist.do_not_contact}",
    ]
    for profile in artist.profiles:
        lines.append(f"      profile {profile.id or '<pending>'}: {profile.platform} {profile.link}")
    for touch in artist.touchpoints:
        lines.append(f"      touch {touch.touch_id}: {touch.type.value} @ {touch.sent_at} -> {touch.outcome or '-'}")
    return lines


def _format_stats(stats: DashboardStats) -> list[str]:
    lines = [
        f"  total roster : {stats.total_artists}",
        f"  engaged      : {stats.engaged}",
        f"  avg fit      : {stats.avg_fit_score}",
        f"  high impact  : {stats.high_influence}",
    ]
    for title, rows in (
        ("pipeline", stats.pipeline),
        ("platforms", stats.platforms),
        ("art types", stats.art_types),
        ("personas", stats.personas),
    ):
        lines.append(f"  {title}:")
        lines.extend(f"    {row.name:<40} {row.count}" for row in rows)
    return lines


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump the parsed contents of the artist sheet for debugging / development.",
    )
    parser.add_argument("--view", choices=[v.value for v in SheetView], default=SheetView.ASSIGNED.value)
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SyncConfig.from_env()
    view = SheetView(args.view)
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "mode": "mock" if config.is_mock else "remote",
        "view": view.value,
    }

    out: list[str] = [_section(f"sheetcrm dump_sheet ({result['mode']}, view={view.value})")]

    async with ArtistStore(config) as store:
        if view is SheetView.DASHBOARD:
            stats = await store.fetch_dashboard()
            result["stats"] = stats.sections
            out.extend(_format_stats(stats))
        else:
            artists = await store.fetch(view)
            result["artists"] = [a.to_wire() for a in artists]
            out.append(f"  {len(artists)} artists")
            for artist in artists:
                out.extend(_format_artist(artist))

    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    else:
        payload = "\n".join(out)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
