"""Confidence heuristic for repository matches.

The repository is a word/phrase level terminology lookup rather than a
translation memory, so the score is deliberately coarse: exact match,
case-insensitive match, or a flat default. An edit-distance or alignment based
metric would be the production replacement; callers only rely on the score
being a number in [0, 100].
"""

from __future__ import annotations

import unicodedata
from typing import Callable

EXACT_MATCH = 100.0
CASE_INSENSITIVE_MATCH = 95.0
# Hosts filter translate results at 75 and suggest results at 50 by default,
# so the flat default keeps suggestions visible and drops them from translate.
DEFAULT_MATCH = 50.0
NO_MATCH = 0.0

Scorer = Callable[[str, str], float]


def _normalize(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def score(original: str, candidate: str) -> float:
    original = _normalize(original)
    candidate = _normalize(candidate)
    if original == candidate:
        return EXACT_MATCH
    if original.casefold() == candidate.casefold():
        return CASE_INSENSITIVE_MATCH
    return DEFAULT_MATCH
