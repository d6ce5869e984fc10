"""
Shared exception classes for the email discovery service.

Per-domain failures are recovered by the batch orchestrator; only
batch-level failures propagate to the caller.
"""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for email discovery errors."""


class EmptyBatchError(DiscoveryError):
    """
    Raised when a batch is started without any domain.

    This is the only failure that is fatal to a whole batch call.
    """


class NameResolutionError(DiscoveryError):
    """
    Raised when executive names cannot be resolved for a domain.

    Examples:
        - No lookup data supplied for the domain
        - Lookup response is not a JSON object
        - Lookup service unreachable
    """


class InvalidDomainError(DiscoveryError):
    """Raised when a domain string fails boundary validation."""


__all__ = [
    "DiscoveryError",
    "EmptyBatchError",
    "NameResolutionError",
    "InvalidDomainError",
]
