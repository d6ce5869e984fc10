from pydantic import BaseModel, ConfigDict, Field, field_validator

from mailfinder.models import CandidateStats, DiscoveryOptions, EmailCandidate, PersonalInfo, to_camel
from mailfinder.services.validation_service import clean_domain, validator


def _validated_domain(v: str) -> str:
    domain = clean_domain(v)
    is_valid, reason = validator.validate_domain(domain)
    if not is_valid:
        raise ValueError(reason)
    return domain


class GenerateCandidatesRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domain: str = Field(..., min_length=1, max_length=2048)
    # Role label -> full name, as returned by an executive lookup
    executives: dict[str, str | None] | None = None
    options: DiscoveryOptions = Field(default_factory=DiscoveryOptions)

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        return _validated_domain(v)


class PersonalCandidatesRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domain: str = Field(..., min_length=1, max_length=2048)
    person: PersonalInfo

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        return _validated_domain(v)


class CandidatesResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, serialize_by_alias=True)

    domain: str
    candidates: list[EmailCandidate]
    stats: CandidateStats
