"""Key type detection and masked previews for display.

classify() and mask() are total: they accept None or any string and never
raise. matches_key_pattern() is a format heuristic only, not a security check.
"""

import re
from typing import Optional

KEY_TYPES = ("prod", "stg", "dev")
CUSTOM = "custom"
MASK_LENGTH = 30
CUSTOM_VISIBLE_CHARS = 4

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_SK_RE = re.compile(r"^sk-[a-zA-Z0-9]{32,}$")
_JWT_RE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$")
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_MIN_TOKEN_LENGTH = 20


def classify(value: Optional[str]) -> str:
    """Return 'prod', 'stg', 'dev' or 'custom' from the literal key prefix."""
    value = value or ""
    for key_type in KEY_TYPES:
        if value.startswith(f"{key_type}_"):
            return key_type
    return CUSTOM


def mask(value: Optional[str]) -> str:
    """Redacted preview: 'prod-' + 30 stars, or the first 4 chars + 30 stars."""
    value = value or ""
    key_type = classify(value)
    prefix = value[:CUSTOM_VISIBLE_CHARS] if key_type == CUSTOM else f"{key_type}-"
    return prefix + "*" * MASK_LENGTH


def matches_key_pattern(value: str) -> bool:
    return bool(
        _UUID_RE.match(value)
        or _SK_RE.match(value)
        or _JWT_RE.match(value)
        or (len(value) >= _MIN_TOKEN_LENGTH and _TOKEN_RE.match(value))
    )
