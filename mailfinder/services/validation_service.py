"""
Input validation service.

Validates and cleans domains and user-supplied name fields before they
reach candidate generation.
"""

import re

from mailfinder.exceptions import InvalidDomainError

# One DNS label: alphanumeric ends, hyphens allowed inside
DOMAIN_LABEL_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://")


class InputValidator:
    """Validates domains and name fields received at the API boundary."""

    MAX_DOMAIN_LENGTH = 253
    MAX_CUSTOM_NAME_LENGTH = 50
    MAX_PERSON_FIELD_LENGTH = 50

    def validate_domain(self, domain: str) -> tuple[bool, str]:
        """
        Validate an already cleaned domain.

        Returns:
            tuple[bool, str]: (is_valid, reason)
        """
        if not domain or not isinstance(domain, str):
            return False, "Domain is empty or not a string"

        if len(domain) > self.MAX_DOMAIN_LENGTH:
            return False, f"Domain too long (max {self.MAX_DOMAIN_LENGTH} characters)"

        if "." not in domain:
            return False, "Domain must contain at least one dot"

        for label in domain.lower().split("."):
            if not DOMAIN_LABEL_PATTERN.match(label):
                return False, f"Invalid domain label: {label!r}"

        return True, "Valid domain"

    def validate_custom_name(self, name: str) -> tuple[bool, str]:
        """Validate a user-supplied local part."""
        if not name or not isinstance(name, str) or not name.strip():
            return False, "Custom name is empty"

        name = name.strip()
        if len(name) > self.MAX_CUSTOM_NAME_LENGTH:
            return False, f"Custom name too long (max {self.MAX_CUSTOM_NAME_LENGTH} characters)"

        if any(c.isspace() for c in name):
            return False, "Custom name must not contain whitespace"

        if "@" in name:
            return False, "Custom name must be a local part without '@'"

        return True, "Valid custom name"

    def validate_person_field(self, value: str) -> tuple[bool, str]:
        """Validate an optional first/last/middle/nick name field."""
        if not isinstance(value, str):
            return False, "Name field must be a string"

        if len(value.strip()) > self.MAX_PERSON_FIELD_LENGTH:
            return False, f"Name field too long (max {self.MAX_PERSON_FIELD_LENGTH} characters)"

        return True, "Valid name field"


def clean_domain(raw: str) -> str:
    """Normalize a user-entered domain or URL to a bare lower-case host.

    ``"https://www.Example.com/about"`` becomes ``"example.com"``.
    """
    value = (raw or "").strip().lower()
    value = SCHEME_PATTERN.sub("", value)
    for separator in ("/", "?", "#"):
        value = value.split(separator, 1)[0]
    # Drop a port
    value = value.split(":", 1)[0]
    if value.startswith("www."):
        value = value[4:]
    return value.rstrip(".")


def require_domain(raw: str) -> str:
    """Clean ``raw`` and raise InvalidDomainError if the result is unusable."""
    domain = clean_domain(raw)
    is_valid, reason = validator.validate_domain(domain)
    if not is_valid:
        raise InvalidDomainError(f"{sanitize_for_log(raw)}: {reason}")
    return domain


def parse_domain_list(text: str) -> list[str]:
    """Parse an uploaded plain-text domain list.

    One domain per line. Blank lines, ``#`` comments and lines without a
    dot are ignored, as are lines that do not clean to a valid domain.
    Duplicates are removed keeping first-occurrence order.
    """
    domains: list[str] = []
    seen: set[str] = set()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "." not in line:
            continue

        domain = clean_domain(line)
        is_valid, _ = validator.validate_domain(domain)
        if not is_valid or domain in seen:
            continue

        seen.add(domain)
        domains.append(domain)

    return domains


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in str(value))
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized


# Singleton instance for convenience
validator = InputValidator()
