"""Tests for name normalization and the email pattern catalog."""

import random

import pytest

from mailfinder.models import GenerationMethod
from mailfinder.services.pattern_generator import (
    ADVANCED_PATTERNS,
    PATTERN_CATALOG,
    RANDOM_SUFFIX_CONFIDENCE,
    PersonName,
    generate_candidates,
)


JOHN_DOE_CATALOG = [
    ("john.doe@example.com", 95),
    ("john@example.com", 90),
    ("johndoe@example.com", 85),
    ("jdoe@example.com", 80),
    ("doe@example.com", 75),
    ("john-doe@example.com", 70),
    ("john_doe@example.com", 65),
    ("j.doe@example.com", 60),
    ("jd@example.com", 55),
    ("johnj@example.com", 50),
    ("j-doe@example.com", 45),
    ("j_doe@example.com", 40),
    ("johnd@example.com", 35),
    ("doej@example.com", 30),
    ("j.j@example.com", 25),
]


class TestPersonName:
    """Test full-name splitting."""

    def test_first_and_last_tokens(self):
        """Test leading and trailing tokens become first and last."""
        name = PersonName.from_full_name("  John   Michael Doe ")
        assert name.first == "john"
        assert name.last == "doe"
        assert name.first_initial == "j"
        assert name.last_initial == "d"
        assert name.is_complete is True

    def test_single_token_fills_first_only(self):
        """Test a one-word name has no last name."""
        name = PersonName.from_full_name("Cher")
        assert name.first == "cher"
        assert name.last is None
        assert name.last_initial is None
        assert name.is_complete is False

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_name(self, raw):
        """Test empty input yields an empty name."""
        assert PersonName.from_full_name(raw).is_empty is True

    def test_from_parts_treats_blank_as_absent(self):
        """Test blank parts become None."""
        name = PersonName.from_parts("John", "  ")
        assert name.first == "john"
        assert name.last is None

    @pytest.mark.parametrize(
        "raw",
        ["Jane Smith <jane@acme.com>", "a@b c", "John/Doe", "Jane <Smith>"],
    )
    def test_malformed_name_is_empty(self, raw):
        """Test a token that cannot sit in a local part empties the name."""
        assert PersonName.from_full_name(raw).is_empty is True
        assert generate_candidates(raw, "example.com") == []

    def test_surrounding_punctuation_trimmed(self):
        """Test commas and quotes around tokens are dropped."""
        name = PersonName.from_full_name('"Doe, John" (CEO).')
        assert name.first == "doe"
        assert name.last == "ceo"

    def test_apostrophe_and_hyphen_kept(self):
        """Test characters valid in a local part survive."""
        name = PersonName.from_full_name("Mary-Jane O'Brien")
        assert name.first == "mary-jane"
        assert name.last == "o'brien"

    def test_from_parts_malformed_field(self):
        """Test a malformed field empties the whole name."""
        assert PersonName.from_parts("John", "doe@acme.com").is_empty is True


class TestCatalog:
    """Test the full pattern catalog."""

    def test_catalog_completeness(self):
        """Test john doe at example.com yields exactly the 15 catalog entries."""
        candidates = generate_candidates(PersonName("john", "doe"), "example.com")

        assert [(c.email, c.confidence) for c in candidates] == JOHN_DOE_CATALOG
        assert candidates[0].email == "john.doe@example.com"
        assert candidates[0].confidence == 95

    def test_catalog_order_is_confidence_descending(self):
        """Test generation order already runs high to low."""
        confidences = [spec.confidence for spec in PATTERN_CATALOG]
        assert confidences == sorted(confidences, reverse=True)
        assert len(PATTERN_CATALOG) == 15

    def test_full_name_string_accepted(self):
        """Test a free-text name goes through normalization."""
        candidates = generate_candidates("John Doe", "example.com")
        assert len(candidates) == 15
        assert candidates[0].email == "john.doe@example.com"

    def test_local_part_is_lower_case(self):
        """Test mixed-case names produce lower-case local parts."""
        candidates = generate_candidates("JOHN DOE", "example.com")
        assert all(c.local_part == c.local_part.lower() for c in candidates)

    def test_domain_casing_kept(self):
        """Test the domain is used exactly as supplied."""
        candidates = generate_candidates("John Doe", "Example.com")
        assert candidates[0].email == "john.doe@Example.com"

    def test_candidates_tagged_with_pattern(self):
        """Test each candidate carries its catalog key."""
        candidates = generate_candidates("John Doe", "example.com")
        assert candidates[0].pattern == "first.last"
        assert all(c.generation_method == GenerationMethod.PATTERN_CATALOG for c in candidates)


class TestAdvancedPatterns:
    """Test the optional advanced patterns."""

    def test_advanced_patterns_appended(self):
        """Test advanced mode adds four low-confidence candidates."""
        candidates = generate_candidates(
            "John Doe", "example.com", advanced_enabled=True, rng=random.Random(7)
        )

        assert len(candidates) == 19
        advanced = candidates[15:]
        assert [(c.email, c.confidence) for c in advanced[:3]] == [
            ("johndoej@example.com", 20),
            ("doejohn@example.com", 15),
            ("jdoed@example.com", 10),
        ]
        assert advanced[3].confidence == RANDOM_SUFFIX_CONFIDENCE
        assert all(c.generation_method == GenerationMethod.ADVANCED_PATTERNS for c in advanced)

    def test_random_suffix_in_range(self):
        """Test the random suffix is a number from 0 to 99."""
        candidates = generate_candidates(
            "John Doe", "example.com", advanced_enabled=True, rng=random.Random(1)
        )
        local_part = candidates[-1].local_part
        assert local_part.startswith("johndoe")
        assert 0 <= int(local_part[len("johndoe"):]) <= 99

    def test_seeded_rng_is_reproducible(self):
        """Test the same seed gives the same random suffix."""
        first = generate_candidates("John Doe", "example.com", True, rng=random.Random(42))
        second = generate_candidates("John Doe", "example.com", True, rng=random.Random(42))
        assert first == second

    def test_advanced_disabled_by_default(self):
        """Test no advanced patterns without the flag."""
        candidates = generate_candidates("John Doe", "example.com")
        keys = {spec.key for spec in ADVANCED_PATTERNS}
        assert not any(c.pattern in keys for c in candidates)


class TestPartialNames:
    """Test names missing a token degrade to a reduced set."""

    def test_first_only(self):
        """Test a missing last name yields only first@domain at 60."""
        candidates = generate_candidates(PersonName.from_parts("john", ""), "example.com")
        assert [(c.email, c.confidence) for c in candidates] == [("john@example.com", 60)]

    def test_last_only(self):
        """Test a missing first name yields only last@domain at 55."""
        candidates = generate_candidates(PersonName(first=None, last="doe"), "example.com")
        assert [(c.email, c.confidence) for c in candidates] == [("doe@example.com", 55)]

    def test_partial_ignores_advanced(self):
        """Test advanced mode does not apply to partial names."""
        candidates = generate_candidates("John", "example.com", advanced_enabled=True)
        assert len(candidates) == 1

    def test_empty_name_yields_nothing(self):
        """Test an all-empty name produces no candidates."""
        assert generate_candidates(PersonName(), "example.com") == []
        assert generate_candidates("   ", "example.com") == []


class TestContractViolations:
    """Test invalid arguments raise."""

    def test_non_name_raises_type_error(self):
        """Test a non-name argument raises TypeError."""
        with pytest.raises(TypeError):
            generate_candidates(123, "example.com")

    def test_empty_domain_raises_value_error(self):
        """Test an empty domain raises ValueError."""
        with pytest.raises(ValueError):
            generate_candidates("John Doe", "")
