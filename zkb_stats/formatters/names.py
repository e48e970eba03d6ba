"""
Character display name cleanup.
"""

import re

_TRAILING_ID = re.compile(r"^(.+?)\s*\((\d+)\)$")
_NEWLINES = re.compile(r"[\r\n]+")


def display_name(full_name: str) -> str:
    """
    Strip a trailing ' (<id>)' and collapse newlines for table output.

    Examples:
        'Jane Doe (12345)' -> 'Jane Doe'
        'Character_12345' -> 'Character_12345'
    """
    cleaned = _NEWLINES.sub(" ", full_name or "").strip()
    if not cleaned:
        return "Unknown"
    match = _TRAILING_ID.match(cleaned)
    return match.group(1).strip() if match else cleaned


def escape_cell(text: str) -> str:
    """Escape a value for use inside a Markdown table cell."""
    return text.replace("|", "\\|")
