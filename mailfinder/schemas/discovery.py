from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mailfinder.core.config import MAX_DOMAINS_PER_BATCH
from mailfinder.models import (
    DiscoveryOptions,
    EmailCandidate,
    SessionConfig,
    SessionStatus,
    to_camel,
)
from mailfinder.services.validation_service import clean_domain, validator


class StartDiscoveryRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domains: list[str] = Field(..., min_length=1)
    # Domain -> role mapping, or the raw text an executive lookup returned
    executives: dict[str, dict[str, Any] | str] = Field(default_factory=dict)
    options: DiscoveryOptions = Field(default_factory=DiscoveryOptions)
    config: SessionConfig = Field(default_factory=SessionConfig)

    @field_validator("domains")
    @classmethod
    def validate_domains(cls, v: list[str]) -> list[str]:
        domains: list[str] = []
        for raw in v:
            domain = clean_domain(raw)
            is_valid, reason = validator.validate_domain(domain)
            if not is_valid:
                raise ValueError(f"Invalid domain {raw!r}: {reason}")
            if domain not in domains:
                domains.append(domain)
        if len(domains) > MAX_DOMAINS_PER_BATCH:
            raise ValueError(f"At most {MAX_DOMAINS_PER_BATCH} domains per batch")
        return domains


class StartDiscoveryResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, serialize_by_alias=True)

    session_id: str
    status: SessionStatus
    total_domains: int


class SessionEmailsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, serialize_by_alias=True)

    session_id: str
    status: SessionStatus
    total: int
    candidates: list[EmailCandidate]


class VerificationCandidatesResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, serialize_by_alias=True)

    session_id: str
    status: SessionStatus
    limit: int
    candidates: list[EmailCandidate]


class DomainListResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, serialize_by_alias=True)

    filename: str | None = None
    domains: list[str]
    total: int
