"""Tests for the InputValidator and domain helpers.

Tests cover:
- Domain cleaning and validation
- Domain list parsing
- Custom name and person field validation
- Log sanitization
"""

import pytest

from mailfinder.exceptions import InvalidDomainError
from mailfinder.services.validation_service import (
    InputValidator,
    clean_domain,
    parse_domain_list,
    require_domain,
    sanitize_for_log,
    validator,
)


class TestCleanDomain:
    """Test domain cleaning."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("example.com", "example.com"),
            ("  Example.COM  ", "example.com"),
            ("https://www.example.com/", "example.com"),
            ("http://example.com/about?x=1", "example.com"),
            ("www.example.co.uk", "example.co.uk"),
            ("example.com:8080", "example.com"),
            ("example.com.", "example.com"),
            ("", ""),
        ],
    )
    def test_clean(self, raw, expected):
        """Test scheme, www prefix and path are stripped."""
        assert clean_domain(raw) == expected


class TestValidateDomain:
    """Test domain validation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.validator = InputValidator()

    @pytest.mark.parametrize("domain", ["example.com", "sub.example.co.uk", "my-company.io", "a1.b2"])
    def test_valid(self, domain):
        """Test well-formed domains pass."""
        is_valid, reason = self.validator.validate_domain(domain)
        assert is_valid is True
        assert "valid" in reason.lower()

    def test_reject_empty(self):
        """Test empty domains are rejected."""
        is_valid, reason = self.validator.validate_domain("")
        assert is_valid is False
        assert "empty" in reason.lower()

    def test_reject_no_dot(self):
        """Test single-label hosts are rejected."""
        is_valid, reason = self.validator.validate_domain("localhost")
        assert is_valid is False
        assert "dot" in reason.lower()

    @pytest.mark.parametrize("domain", ["-bad.com", "bad-.com", "ex ample.com", "a..com", "ex_ample.com"])
    def test_reject_bad_labels(self, domain):
        """Test malformed labels are rejected."""
        is_valid, _ = self.validator.validate_domain(domain)
        assert is_valid is False

    def test_reject_too_long(self):
        """Test domains over 253 characters are rejected."""
        domain = ".".join(["a" * 60] * 5)
        is_valid, reason = self.validator.validate_domain(domain)
        assert is_valid is False
        assert "too long" in reason.lower()

    def test_require_domain(self):
        """Test require_domain cleans or raises."""
        assert require_domain("https://www.example.com/") == "example.com"
        with pytest.raises(InvalidDomainError):
            require_domain("not a domain")


class TestParseDomainList:
    """Test uploaded domain list parsing."""

    def test_parse(self):
        """Test comments, blanks and duplicates are dropped."""
        text = "\n".join([
            "# prospects",
            "example.com",
            "",
            "https://www.Acme.io/",
            "localhost",
            "EXAMPLE.com",
            "   other.org   ",
        ])
        assert parse_domain_list(text) == ["example.com", "acme.io", "other.org"]

    def test_invalid_lines_dropped(self):
        """Test lines that do not clean to a valid domain are skipped."""
        assert parse_domain_list("bad domain.com\n-x.com\nok.com") == ["ok.com"]

    def test_empty(self):
        """Test empty text yields no domains."""
        assert parse_domain_list("") == []


class TestValidateCustomName:
    """Test custom local-part validation."""

    def test_valid(self):
        """Test a plain local part passes."""
        is_valid, _ = validator.validate_custom_name("j.doe")
        assert is_valid is True

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_reject_empty(self, name):
        """Test empty names are rejected."""
        is_valid, reason = validator.validate_custom_name(name)
        assert is_valid is False
        assert "empty" in reason.lower()

    def test_reject_whitespace(self):
        """Test inner whitespace is rejected."""
        is_valid, reason = validator.validate_custom_name("j doe")
        assert is_valid is False
        assert "whitespace" in reason.lower()

    def test_reject_at_sign(self):
        """Test a full address is rejected."""
        is_valid, _ = validator.validate_custom_name("jdoe@example.com")
        assert is_valid is False

    def test_reject_too_long(self):
        """Test names over 50 characters are rejected."""
        is_valid, reason = validator.validate_custom_name("x" * 51)
        assert is_valid is False
        assert "too long" in reason.lower()


class TestValidatePersonField:
    """Test optional person name field validation."""

    def test_valid(self):
        """Test a normal name passes."""
        assert validator.validate_person_field("Mary Ann")[0] is True

    def test_reject_too_long(self):
        """Test fields over 50 characters are rejected."""
        assert validator.validate_person_field("x" * 51)[0] is False

    def test_reject_non_string(self):
        """Test non-strings are rejected."""
        assert validator.validate_person_field(42)[0] is False


class TestSanitizeForLog:
    """Test log sanitization."""

    def test_control_characters_replaced(self):
        """Test newlines cannot forge log lines."""
        assert sanitize_for_log("a.com\nINFO fake") == "a.com INFO fake"

    def test_truncated(self):
        """Test long values are truncated."""
        assert sanitize_for_log("x" * 20, max_length=5) == "xxxxx..."
