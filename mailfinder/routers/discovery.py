"""Discovery router for batch email discovery.

Sessions run the batch orchestrator over a list of domains in a
background task. Sessions live in memory only.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, Path, Query, UploadFile, status

from mailfinder.core.config import INTER_DOMAIN_DELAY_SECONDS, MAX_DOMAIN_FILE_BYTES
from mailfinder.models import (
    DiscoverySession,
    DomainResult,
    DomainStatus,
    EmailCandidate,
    SessionConfig,
    SessionStatus,
)
from mailfinder.schemas.discovery import (
    DomainListResponse,
    SessionEmailsResponse,
    StartDiscoveryRequest,
    StartDiscoveryResponse,
    VerificationCandidatesResponse,
)
from mailfinder.services.batch_orchestrator import BatchOrchestrator
from mailfinder.services.name_resolution import StaticNameResolver
from mailfinder.services.ranking import filter_candidates, rank_candidates
from mailfinder.services.validation_service import parse_domain_list, sanitize_for_log
from mailfinder.services.verification import select_for_verification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/discovery", tags=["Discovery"])

ALLOWED_UPLOAD_TYPES = {"text/plain", "text/csv", "application/octet-stream"}

# In-memory storage for sessions
_sessions_db: dict[str, DiscoverySession] = {}
_cancel_events: dict[str, asyncio.Event] = {}


def _create_session(domains: list[str], config: SessionConfig | None = None) -> DiscoverySession:
    session = DiscoverySession(
        id=str(uuid.uuid4()),
        config=config or SessionConfig(),
        domains=[DomainResult(domain=domain) for domain in domains],
    )
    session.progress.total_domains = len(domains)
    _sessions_db[session.id] = session
    _cancel_events[session.id] = asyncio.Event()
    return session


def _get_session(session_id: str) -> DiscoverySession:
    session = _sessions_db.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found",
        )
    return session


def _session_candidates(session: DiscoverySession) -> list[EmailCandidate]:
    """Global candidates, or the running union while the batch is in progress."""
    if session.result is not None:
        return session.result.global_candidates
    return rank_candidates(
        candidate
        for result in session.domains
        if result.status == DomainStatus.COMPLETED
        for candidate in result.candidates
    )


def _record_progress(session: DiscoverySession, index: int, result: DomainResult) -> None:
    """Store a per-domain state change and refresh the counters."""
    session.domains[index] = result
    finished = [r for r in session.domains if r.status in (DomainStatus.COMPLETED, DomainStatus.ERROR)]
    session.progress.processed_domains = len(finished)
    session.progress.completed_domains = sum(
        1 for r in finished if r.status == DomainStatus.COMPLETED
    )
    session.progress.failed_domains = sum(1 for r in finished if r.status == DomainStatus.ERROR)


async def run_discovery_session(session_id: str, request: StartDiscoveryRequest) -> None:
    """Run a session's batch and store the outcome on the session."""
    session = _sessions_db.get(session_id)
    if session is None:
        logger.warning(f"Session {session_id} vanished before it started")
        return

    cancel_event = _cancel_events.setdefault(session_id, asyncio.Event())
    orchestrator = BatchOrchestrator(
        StaticNameResolver(request.executives),
        delay_seconds=INTER_DOMAIN_DELAY_SECONDS,
    )

    session.status = SessionStatus.PROCESSING
    session.started_at = datetime.now(timezone.utc)
    logger.info(f"Session {session_id} started with {len(request.domains)} domains")

    try:
        result = await orchestrator.process_batch(
            request.domains,
            request.options,
            cancel_event=cancel_event,
            on_progress=lambda index, domain_result: _record_progress(session, index, domain_result),
            config=request.config,
        )
    except Exception as e:
        logger.exception(f"Session {session_id} failed")
        session.status = SessionStatus.FAILED
        session.error = str(e) or e.__class__.__name__
    else:
        session.result = result
        session.status = SessionStatus.CANCELLED if result.cancelled else SessionStatus.COMPLETED
        logger.info(f"Session {session_id} {session.status.value}")
    finally:
        session.completed_at = datetime.now(timezone.utc)
        _cancel_events.pop(session_id, None)


@router.post(
    "/domains/parse",
    response_model=DomainListResponse,
    summary="Parse an uploaded domain list",
)
async def parse_domains_file(file: UploadFile = File(...)) -> DomainListResponse:
    """Clean and deduplicate a plain-text domain list, one domain per line."""
    filename = file.filename or ""
    if not filename.lower().endswith(".txt") or (
        file.content_type and file.content_type not in ALLOWED_UPLOAD_TYPES
    ):
        raise HTTPException(status_code=415, detail="Only .txt files are supported")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(data) > MAX_DOMAIN_FILE_BYTES:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Uploaded file is not UTF-8 text")

    domains = parse_domain_list(text)
    if not domains:
        raise HTTPException(status_code=400, detail="No valid domains found in file")

    logger.info(f"Parsed {len(domains)} domains from {sanitize_for_log(filename)}")
    return DomainListResponse(filename=filename, domains=domains, total=len(domains))


@router.post(
    "/sessions",
    response_model=StartDiscoveryResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a discovery session",
)
async def start_session(
    payload: StartDiscoveryRequest,
    background_tasks: BackgroundTasks,
) -> StartDiscoveryResponse:
    """Register a session and run its batch after the response is sent."""
    session = _create_session(payload.domains, payload.config)
    background_tasks.add_task(run_discovery_session, session.id, payload)

    return StartDiscoveryResponse(
        session_id=session.id,
        status=session.status,
        total_domains=len(payload.domains),
    )


@router.get(
    "/sessions/{session_id}",
    response_model=DiscoverySession,
    summary="Get a discovery session",
    responses={404: {"description": "Session not found"}},
)
async def get_session(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
) -> DiscoverySession:
    return _get_session(session_id)


@router.get(
    "/sessions/{session_id}/emails",
    response_model=SessionEmailsResponse,
    summary="List a session's ranked candidates",
    responses={404: {"description": "Session not found"}},
)
async def get_session_emails(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
    min_confidence: Annotated[int | None, Query(alias="minConfidence", ge=0, le=100)] = None,
    domain: Annotated[str | None, Query(max_length=253)] = None,
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SessionEmailsResponse:
    """Global candidates, or the running union while the batch is in progress."""
    session = _get_session(session_id)
    candidates = _session_candidates(session)

    filtered = filter_candidates(
        candidates,
        min_confidence=min_confidence,
        domain=domain,
        limit=limit,
        offset=offset,
    )
    return SessionEmailsResponse(
        session_id=session.id,
        status=session.status,
        total=len(candidates),
        candidates=filtered,
    )


@router.get(
    "/sessions/{session_id}/verification-candidates",
    response_model=VerificationCandidatesResponse,
    summary="List the candidates a verifier would check",
    responses={404: {"description": "Session not found"}},
)
async def get_verification_candidates(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> VerificationCandidatesResponse:
    """Top of the session's ranked set, capped by its verification limit."""
    session = _get_session(session_id)
    max_count = limit if limit is not None else session.config.verification_limit

    return VerificationCandidatesResponse(
        session_id=session.id,
        status=session.status,
        limit=max_count,
        candidates=select_for_verification(_session_candidates(session), max_count),
    )


@router.post(
    "/sessions/{session_id}/cancel",
    response_model=DiscoverySession,
    summary="Cancel a running discovery session",
    responses={
        404: {"description": "Session not found"},
        409: {"description": "Session already finished"},
    },
)
async def cancel_session(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
) -> DiscoverySession:
    """Ask the batch to stop before its next domain."""
    session = _get_session(session_id)
    if session.is_finished:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Session '{session_id}' already {session.status.value}",
        )

    cancel_event = _cancel_events.get(session_id)
    if cancel_event is not None:
        cancel_event.set()
    logger.warning(f"Cancellation requested for session {session_id}")
    return session


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a discovery session",
    responses={404: {"description": "Session not found"}},
)
async def delete_session(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
) -> None:
    """Forget a session, cancelling it first if it is still running."""
    _get_session(session_id)

    cancel_event = _cancel_events.pop(session_id, None)
    if cancel_event is not None:
        cancel_event.set()
    del _sessions_db[session_id]
