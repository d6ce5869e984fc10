"""Pydantic models for the email discovery service.

Candidates, per-domain results and batch results are transient values
computed per request. Wire format uses camelCase aliases; Python code
uses snake_case field names.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from mailfinder.services.validation_service import validator


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class ConfidenceTier(str, Enum):
    """Confidence bands used for reporting."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    ADVANCED = "advanced"


class GenerationMethod(str, Enum):
    """How a candidate address was produced."""

    PATTERN_CATALOG = "pattern_catalog"
    CUSTOM_NAMES = "custom_names"
    PERSONAL_INFO = "personal_info"
    NICKNAME = "nickname"
    ADVANCED_PATTERNS = "advanced_patterns"


class EmailCandidate(BaseModel):
    """One generated address paired with its confidence.

    Attributes:
        email: ``local-part@domain``; the local part is always lower-case.
        confidence: Fixed catalog score in [0, 100].
        pattern: Catalog key the local part was built from (informational).
        generation_method: Source of the candidate (informational).

    Only ``email`` takes part in deduplication.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        frozen=True,
    )

    email: str = Field(..., min_length=3, description="Candidate email address")
    confidence: int = Field(..., ge=0, le=100, description="Catalog confidence score")
    pattern: str | None = Field(default=None, description="Local-part pattern key")
    generation_method: GenerationMethod | None = None

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        """Require exactly one ``@`` with non-empty parts on both sides."""
        local, sep, domain = v.partition("@")
        if not sep or not local or not domain or "@" in domain:
            raise ValueError("email must look like local-part@domain")
        return v

    @property
    def local_part(self) -> str:
        return self.email.split("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.email.split("@", 1)[1]


class DiscoveryOptions(BaseModel):
    """Every recognised option of the AI-sourced generation mode.

    Defaults are applied here, once, at the boundary.

    Attributes:
        use_custom_names: Emit ``custom@domain`` at fixed confidence for each
            entry of ``custom_names``.
        use_advanced_patterns: Add the low-confidence advanced catalog.
        custom_names: User-supplied local parts.
        names: Full names to run through the pattern catalog.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    use_custom_names: bool = False
    use_advanced_patterns: bool = False
    custom_names: list[str] = Field(default_factory=list, max_length=100)
    names: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("custom_names")
    @classmethod
    def validate_custom_names(cls, v: list[str]) -> list[str]:
        cleaned: list[str] = []
        for index, name in enumerate(v):
            is_valid, reason = validator.validate_custom_name(name)
            if not is_valid:
                raise ValueError(f"Custom name at index {index}: {reason}")
            cleaned.append(name.strip())
        return cleaned

    @field_validator("names")
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        return [name.strip() for name in v]


class PersonalInfo(BaseModel):
    """Form fields of the personal-info generation mode.

    Name slots are either present and non-empty or ``None``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    nick_name: str | None = None
    custom_name: str | None = None

    use_personal_info: bool = True
    use_nick_name: bool = False
    use_custom_names: bool = False
    use_advanced_emails: bool = False
    selected_custom_names: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("first_name", "last_name", "middle_name", "nick_name")
    @classmethod
    def validate_name_slot(cls, v: str | None) -> str | None:
        if v is None:
            return None
        is_valid, reason = validator.validate_person_field(v)
        if not is_valid:
            raise ValueError(reason)
        v = v.strip()
        return v or None

    @field_validator("custom_name")
    @classmethod
    def validate_custom_slot(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        is_valid, reason = validator.validate_custom_name(v)
        if not is_valid:
            raise ValueError(reason)
        return v.strip()

    @field_validator("selected_custom_names")
    @classmethod
    def validate_selected_custom_names(cls, v: list[str]) -> list[str]:
        for index, name in enumerate(v):
            is_valid, reason = validator.validate_custom_name(name)
            if not is_valid:
                raise ValueError(f"Custom name at index {index}: {reason}")
        return [name.strip() for name in v]


class DomainStatus(str, Enum):
    """Per-domain state in a batch: pending -> processing -> completed | error."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELLED = "cancelled"


class DomainResult(BaseModel):
    """Outcome of processing one domain of a batch."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    domain: str
    candidates: list[EmailCandidate] = Field(default_factory=list)
    status: DomainStatus = DomainStatus.PENDING
    error_detail: str | None = None
    resolved_names: list[str] = Field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @computed_field
    @property
    def emails_count(self) -> int:
        """Size of this domain's ranked candidate set."""
        return len(self.candidates)


class BatchResult(BaseModel):
    """Per-domain results in input order plus the globally ranked union.

    Attributes:
        per_domain: One entry per input domain, same order as the input.
        global_candidates: Dedup/rank over every completed domain's
            candidates. Serialized as ``global``.
        cancelled: True when the batch stopped early on a cancel signal.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    per_domain: list[DomainResult] = Field(default_factory=list)
    global_candidates: list[EmailCandidate] = Field(default_factory=list, alias="global")
    cancelled: bool = False

    @computed_field
    @property
    def completed_domains(self) -> int:
        return sum(1 for r in self.per_domain if r.status == DomainStatus.COMPLETED)

    @computed_field
    @property
    def failed_domains(self) -> int:
        return sum(1 for r in self.per_domain if r.status == DomainStatus.ERROR)


class CandidateStats(BaseModel):
    """Summary numbers for a candidate list."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    total: int = 0
    unique: int = 0
    average_confidence: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    advanced: int = 0
    processing_time_ms: float | None = None


class SessionConfig(BaseModel):
    """Limits a discovery session applies to each domain's ranked candidates.

    Attributes:
        max_emails_per_domain: Keep at most this many candidates per domain.
        confidence_threshold: Drop candidates scored below this.
        verification_limit: Most global candidates handed to a verifier.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    max_emails_per_domain: int = Field(100, ge=1, le=1000)
    confidence_threshold: int = Field(25, ge=0, le=100)
    verification_limit: int = Field(10, ge=1, le=100)


class SessionStatus(str, Enum):
    """Lifecycle of a discovery session."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SessionProgress(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    total_domains: int = 0
    processed_domains: int = 0
    completed_domains: int = 0
    failed_domains: int = 0


class DiscoverySession(BaseModel):
    """A batch discovery run tracked in memory by the discovery router."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    id: str
    status: SessionStatus = SessionStatus.PENDING
    domains: list[DomainResult] = Field(default_factory=list)
    progress: SessionProgress = Field(default_factory=SessionProgress)
    config: SessionConfig = Field(default_factory=SessionConfig)
    result: BatchResult | None = None
    error: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_finished(self) -> bool:
        return self.status in (
            SessionStatus.COMPLETED,
            SessionStatus.FAILED,
            SessionStatus.CANCELLED,
        )


class VerificationVerdict(str, Enum):
    """Deliverability verdict reported by a verification collaborator."""

    DELIVERABLE = "deliverable"
    UNDELIVERABLE = "undeliverable"
    UNKNOWN = "unknown"


class VerificationResult(BaseModel):
    """One verified address; ``cost`` is in the verifier's credit units."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    email: str
    verdict: VerificationVerdict = VerificationVerdict.UNKNOWN
    cost: int = Field(0, ge=0)
