from __future__ import annotations

import pytest

from sheetcrm.platforms import DEFAULT_COLOR, find_platform, platform_color, resolve_profile_url


@pytest.mark.parametrize(
    ("platform", "value", "expected"),
    [
        ("Instagram", "@schen", "https://instagram.com/schen"),
        ("ArtStation", "schen_art", "https://www.artstation.com/schen_art"),
        ("TikTok", "@dance", "https://tiktok.com/@dance"),
        ("x.com", "jack", "https://twitter.com/jack"),
        ("ArtStation", "artstation.com/schen", "https://artstation.com/schen"),
        ("Cara", "https://cara.app/schen", "https://cara.app/schen"),
        ("Mastodon Social", "bob", "https://mastodonsocial.com/bob"),
    ],
)
def test_resolve_profile_url(platform: str, value: str, expected: str) -> None:
    assert resolve_profile_url(platform, value) == expected


def test_resolve_profile_url_blank_inputs() -> None:
    assert resolve_profile_url("Instagram", "  ") == ""
    assert resolve_profile_url("", "bob") == ""


def test_platform_matching_is_substring_and_case_insensitive() -> None:
    known = find_platform("my INSTAGRAM (alt)")
    assert known is not None
    assert known.name == "Instagram"
    assert find_platform("Myspace") is None


def test_platform_color() -> None:
    assert platform_color("LinkedIn") == "#0a66c2"
    assert platform_color("GitHub") == DEFAULT_COLOR
    assert platform_color("Myspace") == DEFAULT_COLOR
