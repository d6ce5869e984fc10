"""Candidate aggregation service for combining candidates from multiple sources.

Two named generation modes live here:

* ``aggregate`` - AI-sourced mode. Names (typically resolved executives)
  go through the full pattern catalog; custom names are emitted verbatim
  at fixed confidence.
* ``generate_personal_candidates`` - personal-info mode. Form fields
  (first/middle/last/nick names) drive a smaller, separate catalog.

Both hand their output to the ranking engine.
"""

import logging
import random

from mailfinder.models import DiscoveryOptions, EmailCandidate, GenerationMethod, PersonalInfo
from mailfinder.services.pattern_generator import generate_candidates, normalize_name_part
from mailfinder.services.ranking import rank_candidates

logger = logging.getLogger(__name__)

CUSTOM_NAME_CONFIDENCE = 95

# Personal-info mode scores
PERSONAL_CUSTOM_CONFIDENCE = 90
PERSONAL_FULL_NAME_PATTERNS: tuple[tuple[str, int], ...] = (
    ("first.last", 85),
    ("firstlast", 80),
    ("flast", 75),
    ("first_last", 70),
)
PERSONAL_MIDDLE_NAME_CONFIDENCE = 65
PERSONAL_FIRST_ONLY_CONFIDENCE = 60
PERSONAL_LAST_ONLY_CONFIDENCE = 55
NICKNAME_CONFIDENCE = 70
NICKNAME_LAST_CONFIDENCE = 65
PERSONAL_ADVANCED_PATTERNS: tuple[tuple[str, int], ...] = (
    ("first-last", 70),
    ("firstl", 65),
    ("f.last", 75),
)
# (pattern, numeric suffix, confidence)
PERSONAL_ADVANCED_FIRST_PATTERNS: tuple[tuple[str, str, int], ...] = (
    ("first1", "1", 50),
    ("first2", "2", 45),
)


class CandidateAggregator:
    """Combines name-derived and custom candidates into one ranked set."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng

    def aggregate(self, options: DiscoveryOptions, domain: str) -> list[EmailCandidate]:
        """
        Build the ranked candidate set for one domain.

        Args:
            options: Names, custom names and feature flags.
            domain: Cleaned domain.

        Returns:
            Ranked, deduplicated candidates.
        """
        collected: list[EmailCandidate] = []

        for full_name in options.names:
            collected.extend(
                generate_candidates(
                    full_name,
                    domain,
                    options.use_advanced_patterns,
                    rng=self._rng,
                )
            )

        if options.use_custom_names:
            collected.extend(self._custom_candidates(options.custom_names, domain))

        ranked = rank_candidates(collected)
        logger.debug(
            f"Aggregated {len(collected)} candidates into {len(ranked)} for {domain}"
        )
        return ranked

    def generate_personal_candidates(
        self,
        info: PersonalInfo,
        domain: str,
    ) -> list[EmailCandidate]:
        """Build the ranked candidate set for the personal-info mode."""
        first = normalize_name_part(info.first_name)
        last = normalize_name_part(info.last_name)
        middle = normalize_name_part(info.middle_name)
        nick = normalize_name_part(info.nick_name)
        collected: list[EmailCandidate] = []

        def add(local_part: str, confidence: int, pattern: str, method: GenerationMethod) -> None:
            collected.append(
                EmailCandidate(
                    email=f"{local_part}@{domain}",
                    confidence=confidence,
                    pattern=pattern,
                    generation_method=method,
                )
            )

        if info.use_personal_info:
            if first and last:
                parts = {"first.last": f"{first}.{last}", "firstlast": f"{first}{last}",
                         "flast": f"{first[0]}{last}", "first_last": f"{first}_{last}"}
                for pattern, confidence in PERSONAL_FULL_NAME_PATTERNS:
                    add(parts[pattern], confidence, pattern, GenerationMethod.PERSONAL_INFO)
            if first:
                add(first, PERSONAL_FIRST_ONLY_CONFIDENCE, "first", GenerationMethod.PERSONAL_INFO)
            if last:
                add(last, PERSONAL_LAST_ONLY_CONFIDENCE, "last", GenerationMethod.PERSONAL_INFO)
            if first and middle and last:
                add(f"{first}.{middle}.{last}", PERSONAL_MIDDLE_NAME_CONFIDENCE,
                    "first.middle.last", GenerationMethod.PERSONAL_INFO)

        if info.use_nick_name and nick:
            add(nick, NICKNAME_CONFIDENCE, "nick", GenerationMethod.NICKNAME)
            if last:
                add(f"{nick}.{last}", NICKNAME_LAST_CONFIDENCE, "nick.last", GenerationMethod.NICKNAME)

        if info.use_custom_names and info.custom_name:
            add(info.custom_name.lower(), PERSONAL_CUSTOM_CONFIDENCE, "custom",
                GenerationMethod.CUSTOM_NAMES)

        for selected in info.selected_custom_names:
            local_part = selected.strip().lower()
            if local_part:
                add(local_part, PERSONAL_CUSTOM_CONFIDENCE, "custom", GenerationMethod.CUSTOM_NAMES)

        if info.use_advanced_emails:
            if first and last:
                parts = {"first-last": f"{first}-{last}", "firstl": f"{first}{last[0]}",
                         "f.last": f"{first[0]}.{last}"}
                for pattern, confidence in PERSONAL_ADVANCED_PATTERNS:
                    add(parts[pattern], confidence, pattern, GenerationMethod.ADVANCED_PATTERNS)
            if first:
                for pattern, suffix, confidence in PERSONAL_ADVANCED_FIRST_PATTERNS:
                    add(f"{first}{suffix}", confidence, pattern,
                        GenerationMethod.ADVANCED_PATTERNS)

        return rank_candidates(collected)

    def _custom_candidates(self, custom_names: list[str], domain: str) -> list[EmailCandidate]:
        """Custom local parts bypass the pattern catalog."""
        candidates: list[EmailCandidate] = []
        for custom_name in custom_names:
            local_part = custom_name.strip().lower()
            if not local_part:
                continue
            candidates.append(
                EmailCandidate(
                    email=f"{local_part}@{domain}",
                    confidence=CUSTOM_NAME_CONFIDENCE,
                    pattern="custom",
                    generation_method=GenerationMethod.CUSTOM_NAMES,
                )
            )
        return candidates


# Singleton instance
_candidate_aggregator: CandidateAggregator | None = None


def get_candidate_aggregator() -> CandidateAggregator:
    """Get the singleton CandidateAggregator instance."""
    global _candidate_aggregator
    if _candidate_aggregator is None:
        _candidate_aggregator = CandidateAggregator()
    return _candidate_aggregator


def aggregate_candidates(options: DiscoveryOptions, domain: str) -> list[EmailCandidate]:
    """Convenience function to aggregate candidates for one domain."""
    return get_candidate_aggregator().aggregate(options, domain)


def generate_personal_candidates(info: PersonalInfo, domain: str) -> list[EmailCandidate]:
    """Convenience function for the personal-info mode."""
    return get_candidate_aggregator().generate_personal_candidates(info, domain)
