"""Utility for reading a document title from its first level-one heading."""

import re

TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def extract_title(text: str, fallback: str = "Untitled") -> str:
    """Return the text of the first '# ' heading, or fallback."""
    m = TITLE_RE.search(text)
    if not m:
        return fallback
    return m.group(1).strip() or fallback
