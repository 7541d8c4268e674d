"""Typed records for the artist sheet."""

from sheetcrm.models._base import SheetBaseModel, SheetEnum
from sheetcrm.models.artist import ARTIST_ROW_FIELDS, Artist, ArtType, LifecycleStage, Persona
from sheetcrm.models.dashboard import DASHBOARD_SECTIONS, DashboardStats, MetricCount
from sheetcrm.models.profile import PROFILE_ROW_FIELDS, PlatformProfile
from sheetcrm.models.touchpoint import TOUCHPOINT_ROW_FIELDS, Touchpoint, TouchpointType

__all__ = [
    "ARTIST_ROW_FIELDS",
    "ArtType",
    "Artist",
    "DASHBOARD_SECTIONS",
    "DashboardStats",
    "LifecycleStage",
    "MetricCount",
    "PROFILE_ROW_FIELDS",
    "Persona",
    "PlatformProfile",
    "SheetBaseModel",
    "SheetEnum",
    "TOUCHPOINT_ROW_FIELDS",
    "Touchpoint",
    "TouchpointType",
]
