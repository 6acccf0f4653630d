# agentflow/validator/suggest.py
"""Edit-distance suggestions for misspelled engine names and frontmatter keys."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate Levenshtein edit distance between two strings.

    Used for typo detection in engine ids, safe-output kinds and field names.
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row: List[int] = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row: List[int] = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def rank_suggestions(
    name: str,
    candidates: Iterable[str],
    limit: int = 3,
    max_dist: Optional[int] = None,
) -> List[str]:
    """
    Rank candidates by edit distance to ``name``.

    Ties are broken alphabetically. With ``max_dist`` unset every candidate
    is eligible, so the closest known name is always offered.
    """
    scored: List[Tuple[int, str]] = []
    for candidate in candidates:
        dist = levenshtein_distance(name.lower(), candidate.lower())
        if max_dist is None or dist <= max_dist:
            scored.append((dist, candidate))

    scored.sort(key=lambda x: (x[0], x[1]))
    return [s[1] for s in scored[:limit]]


def suggest_typos(name: str, candidates: Iterable[str], max_dist: int = 2) -> List[str]:
    """Suggest up to 3 near misses within ``max_dist`` edits."""
    return rank_suggestions(name, candidates, limit=3, max_dist=max_dist)


def did_you_mean(suggestions: List[str]) -> str:
    """Render the trailing hint for an error message, or an empty string."""
    if not suggestions:
        return ""
    return f" Did you mean: {', '.join(suggestions)}?"
