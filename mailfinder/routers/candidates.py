"""Single-domain candidate generation endpoints."""

import logging
import time

from fastapi import APIRouter

from mailfinder.schemas.candidates import (
    CandidatesResponse,
    GenerateCandidatesRequest,
    PersonalCandidatesRequest,
)
from mailfinder.services.candidate_aggregator import get_candidate_aggregator
from mailfinder.services.name_resolution import extract_names, normalize_role_mapping
from mailfinder.services.ranking import summarize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/candidates", tags=["Candidates"])


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


@router.post("/generate", response_model=CandidatesResponse)
def generate_for_domain(payload: GenerateCandidatesRequest) -> CandidatesResponse:
    """Generate ranked candidates from names, executives and custom names."""
    started = time.perf_counter()

    options = payload.options
    if payload.executives:
        resolved = extract_names(normalize_role_mapping(payload.executives))
        options = options.model_copy(update={"names": [*resolved, *options.names]})

    candidates = get_candidate_aggregator().aggregate(options, payload.domain)
    logger.info(f"Generated {len(candidates)} candidates for {payload.domain}")

    return CandidatesResponse(
        domain=payload.domain,
        candidates=candidates,
        stats=summarize(candidates, _elapsed_ms(started)),
    )


@router.post("/personal", response_model=CandidatesResponse)
def generate_from_personal_info(payload: PersonalCandidatesRequest) -> CandidatesResponse:
    """Generate ranked candidates from personal-info form fields."""
    started = time.perf_counter()

    candidates = get_candidate_aggregator().generate_personal_candidates(
        payload.person, payload.domain
    )
    logger.info(f"Generated {len(candidates)} personal-info candidates for {payload.domain}")

    return CandidatesResponse(
        domain=payload.domain,
        candidates=candidates,
        stats=summarize(candidates, _elapsed_ms(started)),
    )
