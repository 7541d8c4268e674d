"""Known social/portfolio platforms: profile URL building and brand colours.

Platform names in the sheet are free text, so matching is a
case-insensitive substring test against each entry's keywords.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_COLOR = "#6b7280"

_URL_HINTS = ("/", "com", "net", "app")
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class KnownPlatform:
    name: str
    keywords: tuple[str, ...]
    url_template: str
    color: str = DEFAULT_COLOR

    def matches(self, platform: str) -> bool:
        lowered = platform.lower()
        return any(keyword in lowered for keyword in self.keywords)


KNOWN_PLATFORMS: tuple[KnownPlatform, ...] = (
    KnownPlatform("ArtStation", ("artstation",), "https://www.artstation.com/{handle}", "#13aff0"),
    KnownPlatform("Behance", ("behance",), "https://www.behance.net/{handle}", "#0057ff"),
    KnownPlatform("Instagram", ("instagram",), "https://instagram.com/{handle}", "#d62976"),
    KnownPlatform("Twitter", ("twitter", "x.com"), "https://twitter.com/{handle}", "#1d9bf0"),
    KnownPlatform("TikTok", ("tiktok",), "https://tiktok.com/@{handle}"),
    KnownPlatform("GitHub", ("github",), "https://github.com/{handle}"),
    KnownPlatform("Dribbble", ("dribbble",), "https://dribbble.com/{handle}"),
    KnownPlatform("LinkedIn", ("linkedin",), "https://linkedin.com/in/{handle}", "#0a66c2"),
    KnownPlatform("Cara", ("cara",), "https://cara.app/{handle}", "#d9313a"),
    KnownPlatform("500px", ("500px",), "https://500px.com/p/{handle}", "#000000"),
)


def find_platform(platform: str) -> KnownPlatform | None:
    """Return the first known platform whose keywords appear in *platform*."""
    for known in KNOWN_PLATFORMS:
        if known.matches(platform):
            return known
    return None


def _looks_like_url(value: str) -> bool:
    return "." in value and any(hint in value for hint in _URL_HINTS)


def resolve_profile_url(platform: str, handle_or_url: str) -> str:
    """Build a clickable profile URL from a handle or a bare/partial URL.

    Values that already look like URLs only get an ``https://`` scheme
    added when missing.  Handles lose a leading ``@`` and are slotted into
    the platform's URL pattern; unknown platforms fall back to
    ``https://<platform>.com/<handle>``.
    """
    value = (handle_or_url or "").strip()
    if not value:
        return ""
    if _looks_like_url(value):
        return value if _SCHEME.match(value) else f"https://{value}"

    handle = value.removeprefix("@")
    known = find_platform(platform or "")
    if known is not None:
        return known.url_template.format(handle=handle)
    slug = (platform or "").strip().lower().replace(" ", "")
    if not slug:
        return ""
    return f"https://{slug}.com/{handle}"


def platform_color(platform: str) -> str:
    known = find_platform(platform or "")
    return known.color if known is not None else DEFAULT_COLOR
