"""Deduplication and ranking of email candidates."""

from collections.abc import Iterable

from mailfinder.models import CandidateStats, ConfidenceTier, EmailCandidate

HIGH_CONFIDENCE_THRESHOLD = 75
MEDIUM_CONFIDENCE_THRESHOLD = 50
LOW_CONFIDENCE_THRESHOLD = 25


def rank_candidates(candidates: Iterable[EmailCandidate]) -> list[EmailCandidate]:
    """
    Sort by confidence descending and drop duplicate emails.

    The sort is stable, so equal confidences keep their input order. On a
    duplicate email the first occurrence after sorting, which is the
    highest-confidence one, is kept. Ranking an already ranked list
    returns an equal list.
    """
    ordered = sorted(candidates, key=lambda c: -c.confidence)

    ranked: list[EmailCandidate] = []
    seen: set[str] = set()
    for candidate in ordered:
        if candidate.email in seen:
            continue
        seen.add(candidate.email)
        ranked.append(candidate)

    return ranked


def confidence_tier(confidence: int) -> ConfidenceTier:
    """Map a confidence score onto its reporting band."""
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.HIGH
    if confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.MEDIUM
    if confidence >= LOW_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.LOW
    return ConfidenceTier.ADVANCED


def summarize(
    candidates: list[EmailCandidate],
    processing_time_ms: float | None = None,
) -> CandidateStats:
    """Count candidates per tier and average their confidence."""
    tiers = {tier: 0 for tier in ConfidenceTier}
    for candidate in candidates:
        tiers[confidence_tier(candidate.confidence)] += 1

    total = len(candidates)
    # Halves round up
    average = int(sum(c.confidence for c in candidates) / total + 0.5) if total else 0

    return CandidateStats(
        total=total,
        unique=len({c.email for c in candidates}),
        average_confidence=average,
        high=tiers[ConfidenceTier.HIGH],
        medium=tiers[ConfidenceTier.MEDIUM],
        low=tiers[ConfidenceTier.LOW],
        advanced=tiers[ConfidenceTier.ADVANCED],
        processing_time_ms=processing_time_ms,
    )


def filter_candidates(
    candidates: list[EmailCandidate],
    min_confidence: int | None = None,
    domain: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[EmailCandidate]:
    """View-level filtering of a ranked list; order is preserved."""
    filtered = candidates
    if min_confidence is not None:
        filtered = [c for c in filtered if c.confidence >= min_confidence]
    if domain:
        domain = domain.lower()
        filtered = [c for c in filtered if c.domain.lower() == domain]

    filtered = filtered[offset:]
    if limit is not None:
        filtered = filtered[:limit]
    return filtered
