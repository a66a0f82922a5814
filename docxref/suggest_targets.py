"""Logic for suggesting close matches for a broken cross-reference target."""

import difflib
import re
from collections.abc import Iterable

SEGMENT_SPLIT_RE = re.compile(r"[./]")


def last_segment(target: str) -> str:
    """Return the last dotted or slashed segment of a target."""
    parts = [p for p in SEGMENT_SPLIT_RE.split(target) if p]
    return parts[-1] if parts else target


def suggest_targets(
    target: str,
    candidates: Iterable[str],
    limit: int = 3,
    cutoff: float = 0.6,
) -> list[str]:
    """Return up to ``limit`` candidates resembling target, best first.

    Ranking:
    1. Candidates containing the target's last segment (case-insensitive),
       closest overall similarity first.
    2. Candidates whose difflib ratio against the target is at least cutoff.
    """
    if not target or limit <= 0:
        return []
    pool = sorted({c for c in candidates if c and c != target})
    if not pool:
        return []

    needle = last_segment(target).lower()
    lowered = target.lower()

    def ratio(candidate: str) -> float:
        return difflib.SequenceMatcher(None, lowered, candidate.lower()).ratio()

    contains = [c for c in pool if needle and needle in c.lower()]
    contains.sort(key=lambda c: (-ratio(c), c))

    seen = set(contains)
    close = [c for c in pool if c not in seen and ratio(c) >= cutoff]
    close.sort(key=lambda c: (-ratio(c), c))

    return (contains + close)[:limit]
