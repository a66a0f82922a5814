"""Logic for finding cross-reference markers in documentation source text."""

import re
from collections.abc import Iterator

from docxref.cross_reference import CrossReference
from docxref.ref_kind import RefKind

FENCE = "```"
MARKER_RE = re.compile(
    r"\[([^\]]+)\]\((" + "|".join(k.value for k in RefKind) + r"):([^)]*)\)"
)  # [Text](kind:Target)


def iter_marker_matches(text: str) -> Iterator[tuple[int, re.Match[str]]]:
    """Yield (line index, match) for every marker outside fenced code blocks.

    Fence lines themselves are never scanned. Matches with an empty target are
    skipped. Line indexes refer to ``text.split("\\n")``.
    """
    in_fence = False
    for index, line in enumerate(text.split("\n")):
        if line.strip().startswith(FENCE):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        for m in MARKER_RE.finditer(line):
            if m.group(3):
                yield index, m


def scan_references(text: str) -> list[CrossReference]:
    """Return the cross-references in ``text`` in document order."""
    if not text:
        return []
    return [
        CrossReference(
            kind=RefKind(m.group(2)),
            target=m.group(3),
            display_text=m.group(1),
            line_number=index + 1,
        )
        for index, m in iter_marker_matches(text)
    ]
