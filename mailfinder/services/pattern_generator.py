"""Email pattern generation from person names.

Maps a normalized name plus a domain onto a fixed catalog of local-part
patterns, each carrying a hand-assigned confidence score.
"""

import logging
import random
import re
from collections.abc import Callable
from dataclasses import dataclass

from mailfinder.models import ConfidenceTier, EmailCandidate, GenerationMethod
from mailfinder.services.validation_service import sanitize_for_log

logger = logging.getLogger(__name__)

# first, last, first initial, last initial -> local part
LocalPartBuilder = Callable[[str, str, str, str], str]

# Letter or digit first, then letters, digits, apostrophes, dots, hyphens, underscores
LOCAL_PART_TOKEN_PATTERN = re.compile(r"^[^\W_][\w'.-]*$")

# Punctuation trimmed from both ends of a name token before it is checked
TOKEN_TRIM_CHARS = ".,;:\"()"


def name_tokens(text: str | None) -> list[str]:
    """Lower-cased tokens of a name, ready to go into a local part.

    A name holding a token that cannot appear in a local part (an address,
    angle brackets, slashes) is malformed and yields no tokens.
    """
    tokens: list[str] = []
    for raw in (text or "").split():
        token = raw.strip(TOKEN_TRIM_CHARS).lower()
        if not token:
            continue
        if not LOCAL_PART_TOKEN_PATTERN.match(token):
            logger.debug(f"Skipping malformed name: {sanitize_for_log(text)}")
            return []
        tokens.append(token)
    return tokens


def normalize_name_part(value: str | None) -> str | None:
    """Collapse one name field (first, last, nick...) into a single token."""
    return "".join(name_tokens(value)) or None


@dataclass(frozen=True)
class PersonName:
    """A full name split into lower-cased first/last tokens.

    A slot is either a non-empty string or ``None``.
    """

    first: str | None = None
    last: str | None = None

    @classmethod
    def from_full_name(cls, full_name: str | None) -> "PersonName":
        """Split on whitespace: leading token is first, trailing token is last.

        A single token only fills ``first``. A malformed name is empty.
        """
        tokens = name_tokens(full_name)
        if not tokens:
            return cls()
        last = tokens[-1] if len(tokens) > 1 else None
        return cls(first=tokens[0], last=last)

    @classmethod
    def from_parts(cls, first: str | None, last: str | None) -> "PersonName":
        """Build from separate fields; a malformed field makes the whole name empty."""
        first_token = normalize_name_part(first)
        last_token = normalize_name_part(last)
        for raw, token in ((first, first_token), (last, last_token)):
            if raw and raw.strip() and token is None:
                return cls()
        return cls(first=first_token, last=last_token)

    @property
    def first_initial(self) -> str | None:
        return self.first[0] if self.first else None

    @property
    def last_initial(self) -> str | None:
        return self.last[0] if self.last else None

    @property
    def is_empty(self) -> bool:
        return self.first is None and self.last is None

    @property
    def is_complete(self) -> bool:
        return self.first is not None and self.last is not None


@dataclass(frozen=True)
class PatternSpec:
    """One catalog entry."""

    key: str
    tier: ConfidenceTier
    confidence: int
    build: LocalPartBuilder


PATTERN_CATALOG: tuple[PatternSpec, ...] = (
    # High
    PatternSpec("first.last", ConfidenceTier.HIGH, 95, lambda fn, ln, fi, li: f"{fn}.{ln}"),
    PatternSpec("first", ConfidenceTier.HIGH, 90, lambda fn, ln, fi, li: fn),
    PatternSpec("firstlast", ConfidenceTier.HIGH, 85, lambda fn, ln, fi, li: f"{fn}{ln}"),
    PatternSpec("flast", ConfidenceTier.HIGH, 80, lambda fn, ln, fi, li: f"{fi}{ln}"),
    PatternSpec("last", ConfidenceTier.HIGH, 75, lambda fn, ln, fi, li: ln),
    # Medium
    PatternSpec("first-last", ConfidenceTier.MEDIUM, 70, lambda fn, ln, fi, li: f"{fn}-{ln}"),
    PatternSpec("first_last", ConfidenceTier.MEDIUM, 65, lambda fn, ln, fi, li: f"{fn}_{ln}"),
    PatternSpec("f.last", ConfidenceTier.MEDIUM, 60, lambda fn, ln, fi, li: f"{fi}.{ln}"),
    PatternSpec("fl", ConfidenceTier.MEDIUM, 55, lambda fn, ln, fi, li: f"{fi}{li}"),
    PatternSpec("firstf", ConfidenceTier.MEDIUM, 50, lambda fn, ln, fi, li: f"{fn}{fi}"),
    # Low
    PatternSpec("f-last", ConfidenceTier.LOW, 45, lambda fn, ln, fi, li: f"{fi}-{ln}"),
    PatternSpec("f_last", ConfidenceTier.LOW, 40, lambda fn, ln, fi, li: f"{fi}_{ln}"),
    PatternSpec("firstl", ConfidenceTier.LOW, 35, lambda fn, ln, fi, li: f"{fn}{li}"),
    PatternSpec("lastf", ConfidenceTier.LOW, 30, lambda fn, ln, fi, li: f"{ln}{fi}"),
    PatternSpec("f.f", ConfidenceTier.LOW, 25, lambda fn, ln, fi, li: f"{fi}.{fi}"),
)

ADVANCED_PATTERNS: tuple[PatternSpec, ...] = (
    PatternSpec("firstlastf", ConfidenceTier.ADVANCED, 20, lambda fn, ln, fi, li: f"{fn}{ln}{fi}"),
    PatternSpec("lastfirst", ConfidenceTier.ADVANCED, 15, lambda fn, ln, fi, li: f"{ln}{fn}"),
    PatternSpec("flastl", ConfidenceTier.ADVANCED, 10, lambda fn, ln, fi, li: f"{fi}{ln}{li}"),
)

# firstlast followed by a random 0-99 suffix; not reproducible
RANDOM_SUFFIX_PATTERN = "firstlastNN"
RANDOM_SUFFIX_CONFIDENCE = 5
RANDOM_SUFFIX_MAX = 99

# Reduced set for names missing one token
PARTIAL_FIRST_CONFIDENCE = 60
PARTIAL_LAST_CONFIDENCE = 55


def _candidate(
    local_part: str,
    domain: str,
    confidence: int,
    pattern: str,
    method: GenerationMethod,
) -> EmailCandidate:
    return EmailCandidate(
        email=f"{local_part}@{domain}",
        confidence=confidence,
        pattern=pattern,
        generation_method=method,
    )


def generate_candidates(
    name: PersonName | str,
    domain: str,
    advanced_enabled: bool = False,
    *,
    rng: random.Random | None = None,
) -> list[EmailCandidate]:
    """
    Generate catalog candidates for one name at one domain.

    Args:
        name: A PersonName or a free-text full name.
        domain: Cleaned domain; its casing is kept as given.
        advanced_enabled: Also emit the advanced patterns.
        rng: Random source for the random-suffix advanced pattern.
            Defaults to the module-level ``random`` functions.

    Returns:
        Candidates in catalog order (high, medium, low, then advanced).
        A name with no tokens yields an empty list.

    Raises:
        TypeError: If ``name`` is neither a PersonName nor a string.
        ValueError: If ``domain`` is empty.
    """
    if isinstance(name, str):
        name = PersonName.from_full_name(name)
    elif not isinstance(name, PersonName):
        raise TypeError(f"Expected PersonName or str, got {type(name).__name__}")

    if not domain:
        raise ValueError("domain is required")

    if name.is_empty:
        return []

    if not name.is_complete:
        return _generate_partial(name, domain)

    fn, ln = name.first, name.last
    fi, li = name.first_initial, name.last_initial

    candidates = [
        _candidate(spec.build(fn, ln, fi, li), domain, spec.confidence, spec.key,
                   GenerationMethod.PATTERN_CATALOG)
        for spec in PATTERN_CATALOG
    ]

    if advanced_enabled:
        candidates.extend(
            _candidate(spec.build(fn, ln, fi, li), domain, spec.confidence, spec.key,
                       GenerationMethod.ADVANCED_PATTERNS)
            for spec in ADVANCED_PATTERNS
        )
        suffix = (rng or random).randint(0, RANDOM_SUFFIX_MAX)
        candidates.append(
            _candidate(f"{fn}{ln}{suffix}", domain, RANDOM_SUFFIX_CONFIDENCE,
                       RANDOM_SUFFIX_PATTERN, GenerationMethod.ADVANCED_PATTERNS)
        )

    return candidates


def _generate_partial(name: PersonName, domain: str) -> list[EmailCandidate]:
    """Reduced candidate set for a name with only one usable token."""
    candidates: list[EmailCandidate] = []
    if name.first:
        candidates.append(
            _candidate(name.first, domain, PARTIAL_FIRST_CONFIDENCE, "first",
                       GenerationMethod.PATTERN_CATALOG)
        )
    if name.last:
        candidates.append(
            _candidate(name.last, domain, PARTIAL_LAST_CONFIDENCE, "last",
                       GenerationMethod.PATTERN_CATALOG)
        )
    logger.debug(f"Partial name for {domain}: {len(candidates)} candidates")
    return candidates
