"""Deliverability verification contract.

Ranked candidates are the direct input to an external verifier (an SMTP
or deliverability checking service). Concrete checkers implement
``VerificationCollaborator``; this module picks which candidates they are
given and ships a verifier over caller-supplied verdicts.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from mailfinder.models import EmailCandidate, VerificationResult, VerificationVerdict

logger = logging.getLogger(__name__)

# Candidates handed to a verifier when the caller gives no limit
DEFAULT_VERIFICATION_LIMIT = 10

# Credits charged for one completed check
VERIFICATION_COST = 1


class VerificationCollaborator(Protocol):
    """Checks deliverability of candidate addresses."""

    async def verify(
        self,
        candidates: Sequence[EmailCandidate],
        max_count: int,
    ) -> list[VerificationResult]:
        """Return one verdict per checked email, at most ``max_count``."""
        ...


def select_for_verification(
    ranked: Sequence[EmailCandidate],
    max_count: int = DEFAULT_VERIFICATION_LIMIT,
) -> list[EmailCandidate]:
    """Take the leading ``max_count`` candidates of a ranked list.

    Raises:
        ValueError: If ``max_count`` is negative.
    """
    if max_count < 0:
        raise ValueError("max_count must not be negative")
    return list(ranked[:max_count])


def total_cost(results: Sequence[VerificationResult]) -> int:
    return sum(result.cost for result in results)


async def verify_candidates(
    collaborator: VerificationCollaborator,
    ranked: Sequence[EmailCandidate],
    max_count: int = DEFAULT_VERIFICATION_LIMIT,
) -> list[VerificationResult]:
    """Send the top of a ranked list to a verifier.

    Nothing is sent when the selection is empty.
    """
    selected = select_for_verification(ranked, max_count)
    if not selected:
        return []

    results = await collaborator.verify(selected, len(selected))
    logger.info(
        f"Verified {len(results)} of {len(selected)} candidates "
        f"for {total_cost(results)} credits"
    )
    return results


class StaticVerifier:
    """Verifier over verdicts supplied by the caller.

    Emails with a known verdict cost one credit; the rest are reported
    unknown at no cost.
    """

    def __init__(self, verdicts: Mapping[str, VerificationVerdict | str]):
        self._verdicts = {
            email.lower(): VerificationVerdict(verdict) for email, verdict in verdicts.items()
        }

    async def verify(
        self,
        candidates: Sequence[EmailCandidate],
        max_count: int = DEFAULT_VERIFICATION_LIMIT,
    ) -> list[VerificationResult]:
        results: list[VerificationResult] = []
        for candidate in select_for_verification(candidates, max_count):
            verdict = self._verdicts.get(candidate.email.lower())
            if verdict is None:
                results.append(VerificationResult(email=candidate.email))
            else:
                results.append(
                    VerificationResult(
                        email=candidate.email,
                        verdict=verdict,
                        cost=VERIFICATION_COST,
                    )
                )
        return results
