"""
Store name sanitizer used for Drive folder names and photo file names.
"""
import re

MAX_NAME_LENGTH = 80
FALLBACK_NAME = "Store"

_DISALLOWED = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_store_name(raw: str) -> str:
    """
    Turn a free-text store name into a filesystem-safe name.

    Keeps letters, digits, underscores, whitespace and hyphens, collapses
    whitespace to single spaces, trims and caps the result at
    MAX_NAME_LENGTH characters. Falls back to "Store" when nothing is left.

    Examples:
        "Metro #83!"  -> "Metro 83"
        "A&B  Foods"  -> "AB Foods"
        "!!!"         -> "Store"
    """
    cleaned = _DISALLOWED.sub("", raw or "")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    cleaned = cleaned[:MAX_NAME_LENGTH].strip()
    return cleaned or FALLBACK_NAME
