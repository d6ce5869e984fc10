"""Executive name resolution contract.

A name resolver maps a domain to the people worth generating candidates
for, as a mapping of role label to full name (or ``None`` when the role is
unknown). Concrete AI lookups implement ``NameResolver``; this module
ships the response parsing they share and a resolver over caller-supplied
data.
"""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol

from mailfinder.exceptions import NameResolutionError
from mailfinder.services.validation_service import clean_domain, sanitize_for_log

logger = logging.getLogger(__name__)

# Roles requested from executive lookups
EXECUTIVE_ROLES = ("Founder", "CEO", "CTO", "COO")

# Values that mean "unknown" in lookup responses
NULL_MARKERS = {"", "null", "none", "n/a", "unknown"}

# Bookkeeping keys some lookups add next to the roles
METADATA_KEYS = {"note", "error", "raw_response", "source"}


class NameResolver(Protocol):
    """Resolves executive names for a domain."""

    async def resolve(self, domain: str) -> Mapping[str, str | None]:
        """Return role label -> full name or None. Raise on failure."""
        ...


def normalize_role_mapping(data: Mapping[str, Any]) -> dict[str, str | None]:
    """Turn a raw role mapping into explicit optionals.

    Null markers become ``None``; metadata keys and non-string values
    are dropped.
    """
    roles: dict[str, str | None] = {}
    for role, value in data.items():
        if str(role).lower() in METADATA_KEYS:
            continue
        if value is None:
            roles[role] = None
        elif isinstance(value, str):
            value = value.strip()
            roles[role] = None if value.lower() in NULL_MARKERS else value
        else:
            logger.debug(f"Ignoring non-string value for role {sanitize_for_log(str(role))}")
    return roles


def parse_executive_response(text: str) -> dict[str, str | None]:
    """Parse the JSON object returned by an executive lookup.

    Handles markdown code blocks and prose around the object.

    Args:
        text: Raw response text.

    Returns:
        Role label -> full name or None.

    Raises:
        NameResolutionError: If no JSON object can be decoded.
    """
    text = (text or "").strip()

    # Remove markdown code blocks if present
    if "```" in text:
        json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
        if json_match:
            text = json_match.group(1).strip()
        else:
            text = re.sub(r"```(?:json)?", "", text).strip()

    # Find the JSON object in the text
    object_match = re.search(r"\{[\s\S]*\}", text)
    if object_match:
        text = object_match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise NameResolutionError(f"Executive response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise NameResolutionError("Executive response is not a JSON object")

    return normalize_role_mapping(data)


def extract_names(roles: Mapping[str, str | None]) -> list[str]:
    """Non-None names in mapping order, case-insensitive duplicates removed."""
    names: list[str] = []
    seen: set[str] = set()
    for value in roles.values():
        if value is None:
            continue
        name = value.strip()
        key = name.lower()
        if not name or key in seen:
            continue
        seen.add(key)
        names.append(name)
    return names


class StaticNameResolver:
    """Resolver over caller-supplied executive data.

    Each entry is either a role mapping or the raw text an AI lookup
    returned for that domain. Keys are cleaned like any other domain.
    """

    def __init__(self, lookup: Mapping[str, Mapping[str, Any] | str] | None = None) -> None:
        self._lookup = {clean_domain(domain): entry for domain, entry in (lookup or {}).items()}

    async def resolve(self, domain: str) -> dict[str, str | None]:
        entry = self._lookup.get(clean_domain(domain))
        if entry is None:
            raise NameResolutionError(f"No executive data supplied for {sanitize_for_log(domain)}")

        if isinstance(entry, str):
            return parse_executive_response(entry)
        return normalize_role_mapping(entry)
