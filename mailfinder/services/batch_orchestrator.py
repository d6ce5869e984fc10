"""Multi-domain batch orchestration.

Runs the single-domain pipeline (name resolution, then candidate
aggregation) over a list of domains, strictly one domain at a time with
a fixed delay between domains to respect the rate limits of the name
resolution service. A failing domain is recorded and the batch moves on.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from mailfinder.core.config import INTER_DOMAIN_DELAY_SECONDS
from mailfinder.exceptions import EmptyBatchError
from mailfinder.models import (
    BatchResult,
    DiscoveryOptions,
    DomainResult,
    DomainStatus,
    SessionConfig,
)
from mailfinder.services.candidate_aggregator import CandidateAggregator, get_candidate_aggregator
from mailfinder.services.name_resolution import NameResolver, extract_names
from mailfinder.services.ranking import filter_candidates, rank_candidates
from mailfinder.services.validation_service import sanitize_for_log

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

# Called with (domain index, result) on every per-domain state change
ProgressCallback = Callable[[int, DomainResult], None]


class BatchOrchestrator:
    """Processes a batch of domains sequentially."""

    def __init__(
        self,
        name_resolver: NameResolver,
        delay_seconds: float = INTER_DOMAIN_DELAY_SECONDS,
        aggregator: CandidateAggregator | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.name_resolver = name_resolver
        self.delay_seconds = delay_seconds
        self.aggregator = aggregator or get_candidate_aggregator()
        self._sleep = sleep

    async def process_batch(
        self,
        domains: Sequence[str],
        options: DiscoveryOptions,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
        config: SessionConfig | None = None,
    ) -> BatchResult:
        """
        Process every domain and build the global ranked set.

        Args:
            domains: Cleaned domains, processed in the given order.
            options: Names, custom names and feature flags shared by all domains.
            cancel_event: Checked before each domain; once set, remaining
                domains are marked cancelled.
            on_progress: Receives each domain's processing and final state.
            config: Per-domain confidence threshold and candidate cap,
                applied before the global set is built. None keeps every
                candidate.

        Returns:
            BatchResult with one entry per input domain, in input order.

        Raises:
            EmptyBatchError: If ``domains`` is empty.
        """
        if not domains:
            raise EmptyBatchError("At least one domain is required")

        total = len(domains)
        per_domain: list[DomainResult] = []
        cancelled = False

        logger.info(f"Starting batch of {total} domains")

        for index, domain in enumerate(domains):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.warning(
                    f"Batch cancelled after {index}/{total} domains"
                )
                break

            result = await self._process_domain(
                index, total, domain, options, on_progress, config
            )
            per_domain.append(result)
            if on_progress is not None:
                on_progress(index, result)

            is_last = index == total - 1
            if not is_last and self.delay_seconds > 0:
                if cancel_event is not None and cancel_event.is_set():
                    continue
                await self._sleep(self.delay_seconds)

        if cancelled:
            for index in range(len(per_domain), total):
                result = DomainResult(domain=domains[index], status=DomainStatus.CANCELLED)
                per_domain.append(result)
                if on_progress is not None:
                    on_progress(index, result)

        global_candidates = rank_candidates(
            candidate
            for result in per_domain
            if result.status == DomainStatus.COMPLETED
            for candidate in result.candidates
        )

        batch = BatchResult(
            per_domain=per_domain,
            global_candidates=global_candidates,
            cancelled=cancelled,
        )
        logger.info(
            f"Batch finished: {batch.completed_domains} completed, "
            f"{batch.failed_domains} failed, {len(global_candidates)} candidates"
        )
        return batch

    async def _process_domain(
        self,
        index: int,
        total: int,
        domain: str,
        options: DiscoveryOptions,
        on_progress: ProgressCallback | None,
        config: SessionConfig | None = None,
    ) -> DomainResult:
        """Resolve names and aggregate candidates for one domain."""
        started_at = datetime.now(timezone.utc)
        if on_progress is not None:
            on_progress(
                index,
                DomainResult(domain=domain, status=DomainStatus.PROCESSING, started_at=started_at),
            )

        safe_domain = sanitize_for_log(domain)
        logger.info(f"Processing domain {index + 1}/{total}: {safe_domain}")

        try:
            roles = await self.name_resolver.resolve(domain)
            resolved_names = extract_names(roles)
            sources = options.model_copy(update={"names": [*resolved_names, *options.names]})
            candidates = self.aggregator.aggregate(sources, domain)
            if config is not None:
                candidates = filter_candidates(
                    candidates,
                    min_confidence=config.confidence_threshold,
                    limit=config.max_emails_per_domain,
                )
        except Exception as e:
            error_detail = str(e) or e.__class__.__name__
            logger.error(f"Domain {safe_domain} failed: {sanitize_for_log(error_detail, 200)}")
            return DomainResult(
                domain=domain,
                status=DomainStatus.ERROR,
                error_detail=error_detail,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
            )

        logger.info(
            f"Domain {safe_domain} completed: {len(resolved_names)} names, "
            f"{len(candidates)} candidates"
        )
        return DomainResult(
            domain=domain,
            candidates=candidates,
            status=DomainStatus.COMPLETED,
            resolved_names=resolved_names,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )


async def process_batch(
    domains: Sequence[str],
    options: DiscoveryOptions,
    name_resolver: NameResolver,
    delay_seconds: float | None = None,
    cancel_event: asyncio.Event | None = None,
    config: SessionConfig | None = None,
) -> BatchResult:
    """Convenience function to run one batch with a fresh orchestrator."""
    orchestrator = BatchOrchestrator(
        name_resolver,
        delay_seconds=INTER_DOMAIN_DELAY_SECONDS if delay_seconds is None else delay_seconds,
    )
    return await orchestrator.process_batch(
        domains, options, cancel_event=cancel_event, config=config
    )
