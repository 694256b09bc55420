from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable
from xml.etree.ElementTree import Element

from .errors import InvalidArgument
from .models import (
    METADATA_FIELDS,
    CandidateSegment,
    ScoredResult,
    SegmentMetadata,
    TranslationState,
)
from .scoring import EXACT_MATCH, NO_MATCH, Scorer, score

logger = logging.getLogger(__name__)

NO_MATCH_DETAIL = "no match found"


def _metadata_item(segment: Element, element_name: str) -> str | None:
    container = segment.find(element_name)
    if container is None:
        return None
    name = container.find("name")
    if name is None:
        return None
    return name.text or ""


def extract_metadata(segment: Element) -> SegmentMetadata:
    """Read the optional ``<field><name>value</name></field>`` entries of a segment."""
    values = {attr: _metadata_item(segment, element_name) for attr, element_name, _ in METADATA_FIELDS}
    return SegmentMetadata(**values)


def no_match_result(*, request_id: str | None = None) -> ScoredResult:
    return ScoredResult(
        source="",
        target="",
        confidence=NO_MATCH,
        state=TranslationState.NO_MATCH,
        state_detail=NO_MATCH_DETAIL,
        request_id=request_id,
    )


def _scored(
    candidate: CandidateSegment,
    confidence: float,
    state: TranslationState,
    provider_name: str,
    request_id: str | None = None,
) -> ScoredResult:
    return ScoredResult(
        source=candidate.source,
        target=candidate.target,
        confidence=confidence,
        state=state,
        provider_name=provider_name,
        metadata=candidate.metadata,
        request_id=request_id,
    )


def best_match(
    query_text: str,
    candidates: Iterable[CandidateSegment],
    *,
    provider_name: str,
    scorer: Scorer = score,
    request_id: str | None = None,
) -> ScoredResult:
    """
    Pick the single best candidate for a translate request.

    Candidates are consumed in response order. A candidate replaces the running
    best only when it scores strictly higher. As soon as the best reaches an
    exact match it is marked translated and no further candidates are pulled.

    Returns:
        The best ScoredResult, or a no-match result when there are no candidates.
    """
    best = no_match_result(request_id=request_id)
    for candidate in candidates:
        confidence = scorer(query_text, candidate.source)
        if confidence > best.confidence:
            best = _scored(candidate, confidence, TranslationState.NEEDS_REVIEW, provider_name, request_id)

        if best.confidence == EXACT_MATCH:
            best = replace(best, state=TranslationState.TRANSLATED)
            break
    return best


def rank_suggestions(
    query_text: str,
    candidates: Iterable[CandidateSegment],
    max_results: int,
    *,
    provider_name: str,
    scorer: Scorer = score,
) -> list[ScoredResult]:
    """
    Collect up to ``max_results`` suggestions, then order them by confidence.

    The first ``max_results`` candidates in response order are kept; later
    candidates are not pulled. Sorting happens after truncation.
    """
    if max_results < 1:
        raise InvalidArgument(f"max_results must be positive, got {max_results}")

    collected: list[ScoredResult] = []
    for candidate in candidates:
        confidence = scorer(query_text, candidate.source)
        collected.append(_scored(candidate, confidence, TranslationState.NEEDS_REVIEW, provider_name))
        if len(collected) >= max_results:
            break
    logger.debug("Collected %d suggestions (max %d)", len(collected), max_results)
    return sort_by_confidence(collected)


@dataclass(slots=True, frozen=True, order=True)
class RankKey:
    """Sort key: present results first, then by descending confidence."""

    absent: bool
    descending_confidence: float

    @classmethod
    def of(cls, result: ScoredResult | None) -> "RankKey":
        if result is None:
            return cls(absent=True, descending_confidence=0.0)
        return cls(absent=False, descending_confidence=-result.confidence)


def rank_key(result: ScoredResult | None) -> RankKey:
    return RankKey.of(result)


def compare_by_confidence(left: ScoredResult | None, right: ScoredResult | None) -> int:
    left_key, right_key = rank_key(left), rank_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sort_by_confidence(results: Iterable[ScoredResult | None]) -> list[ScoredResult | None]:
    return sorted(results, key=rank_key)
