"""Dashboard statistics read from the summary tab."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sheetcrm.ingestion.normalize import safe_float, safe_int
from sheetcrm.models.artist import Artist, LifecycleStage

SECTION_DASHBOARD = "Dashboard"
SECTION_PIPELINE = "Pipeline Stages"
SECTION_PLATFORMS = "Platforms"
SECTION_ART_TYPES = "Art Types"
SECTION_PERSONAS = "Persona Mix"

DASHBOARD_SECTIONS: tuple[str, ...] = (
    SECTION_DASHBOARD,
    SECTION_PIPELINE,
    SECTION_PLATFORMS,
    SECTION_ART_TYPES,
    SECTION_PERSONAS,
)

CLOSED_BUCKET = "Closed"
HIGH_INFLUENCE_THRESHOLD = 80


class MetricCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    count: int = 0


def _count(value: Any) -> int:
    parsed = safe_int(value)
    return 0 if parsed is None else parsed


class DashboardStats(BaseModel):
    """Metric maps keyed by section title.

    A section missing from the sheet is simply an empty map; every derived
    figure then reads as zero.
    """

    model_config = ConfigDict(frozen=True)

    sections: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def section(self, title: str) -> dict[str, Any]:
        return dict(self.sections.get(title, {}))

    @property
    def total_artists(self) -> int:
        return _count(self.section(SECTION_DASHBOARD).get("Total Roster"))

    @property
    def engaged(self) -> int:
        return _count(self.section(SECTION_DASHBOARD).get("Engaged"))

    @property
    def avg_fit_score(self) -> float:
        parsed = safe_float(self.section(SECTION_DASHBOARD).get("Fit Score"))
        return 0.0 if parsed is None else parsed

    @property
    def high_influence(self) -> int:
        return _count(self.section(SECTION_DASHBOARD).get("High Impact"))

    @property
    def pipeline(self) -> list[MetricCount]:
        """Active stages in funnel order, then one aggregated ``Closed`` bucket."""
        stats = self.section(SECTION_PIPELINE)
        rows = [
            MetricCount(name=stage.value, count=_count(stats.get(stage.value)))
            for stage in LifecycleStage.active_stages()
        ]
        rows.append(MetricCount(name=CLOSED_BUCKET, count=_count(stats.get(CLOSED_BUCKET))))
        return rows

    @property
    def platforms(self) -> list[MetricCount]:
        """Platform counts, most common first."""
        rows = [MetricCount(name=k, count=_count(v)) for k, v in self.section(SECTION_PLATFORMS).items()]
        return sorted(rows, key=lambda row: row.count, reverse=True)

    @property
    def art_types(self) -> list[MetricCount]:
        return [MetricCount(name=k, count=_count(v)) for k, v in self.section(SECTION_ART_TYPES).items()]

    @property
    def personas(self) -> list[MetricCount]:
        return [MetricCount(name=k, count=_count(v)) for k, v in self.section(SECTION_PERSONAS).items()]

    @classmethod
    def from_artists(cls, artists: Iterable[Artist]) -> DashboardStats:
        """Compute the same sections locally (mock mode has no summary tab)."""
        roster = list(artists)
        pipeline: Counter[str] = Counter()
        platforms: Counter[str] = Counter()
        art_types: Counter[str] = Counter()
        personas: Counter[str] = Counter()
        for artist in roster:
            pipeline[CLOSED_BUCKET if artist.status.is_closed else artist.status.value] += 1
            art_types[artist.art_type.value] += 1
            personas[artist.persona.value] += 1
            for profile in artist.profiles:
                if profile.platform:
                    platforms[profile.platform] += 1

        engaged_floor = LifecycleStage.ENGAGED.order
        engaged = sum(1 for a in roster if not a.status.is_closed and a.status.order >= engaged_floor)
        scored = [a.fit_score for a in roster if a.fit_score > 0]
        avg_fit = round(sum(scored) / len(scored), 1) if scored else 0.0

        return cls(
            sections={
                SECTION_DASHBOARD: {
                    "Total Roster": len(roster),
                    "Engaged": engaged,
                    "Fit Score": avg_fit,
                    "High Impact": sum(1 for a in roster if a.influence_score >= HIGH_INFLUENCE_THRESHOLD),
                },
                SECTION_PIPELINE: dict(pipeline),
                SECTION_PLATFORMS: dict(platforms),
                SECTION_ART_TYPES: dict(art_types),
                SECTION_PERSONAS: dict(personas),
            }
        )
