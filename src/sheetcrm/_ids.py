"""Client-side identifiers for records created before the sheet sees them."""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase


def _token(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def new_profile_id() -> str:
    return f"p{_token(9)}"


def new_artist_id() -> str:
    return f"a{_token(9)}"


def new_touch_id() -> str:
    return f"t{_token(9)}"
