"""File name sanitization for interaction and archive names."""

import re

# Windows-reserved characters are a superset of the POSIX ones ("/" and NUL)
_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_RESERVED_NAMES = {
    "CON",
    "PRN",
    "AUX",
    "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def sanitize_file_name(text: str, replacement: str = "_") -> str:
    """Replace every character that is illegal in a file name with ``replacement``."""
    cleaned = _INVALID_CHARS.sub(replacement, text)
    stripped = cleaned.rstrip(". ")
    if stripped != cleaned:
        cleaned = stripped + replacement * (len(cleaned) - len(stripped))
    if not cleaned:
        return replacement
    if cleaned.split(".")[0].upper() in _RESERVED_NAMES:
        cleaned = replacement + cleaned
    return cleaned
