from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from opportunity_matcher.tags import normalize_tag_list
from opportunity_matcher.utils import composite_key


class OpportunityStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    SHORTLISTED = "shortlisted"
    CONTACTED = "contacted"
    REJECTED = "rejected"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


class SkillProfile(BaseModel):
    student_id: str
    skills: List[str] = Field(default_factory=list)
    interest_tags: List[int] = Field(default_factory=list)
    headline: str = ""
    account_status: AccountStatus = AccountStatus.ACTIVE

    @field_validator("interest_tags", mode="before")
    @classmethod
    def _supported_tags(cls, v):
        return normalize_tag_list(v or [])


class OpportunityRequirements(BaseModel):
    opportunity_id: str
    org_id: str
    required_skills: List[str] = Field(default_factory=list)
    tags: List[int] = Field(default_factory=list)
    status: OpportunityStatus = OpportunityStatus.OPEN
    title: str = ""

    @field_validator("tags", mode="before")
    @classmethod
    def _supported_tags(cls, v):
        return normalize_tag_list(v or [])

    @property
    def is_open(self) -> bool:
        return self.status == OpportunityStatus.OPEN


class MatchResult(BaseModel):
    """Scored pairing of one student with one opportunity. Never persisted."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    opportunity_id: str
    skill_overlap: List[str]
    tag_overlap: List[int]
    skill_overlap_count: int
    tag_overlap_count: int
    skill_ratio: float
    tag_ratio: float
    score: float


def application_key(opportunity_id: str, student_id: str) -> str:
    return composite_key(opportunity_id, student_id)


class Application(BaseModel):
    id: str
    opportunity_id: str
    student_id: str
    org_id: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(
        cls,
        opportunity_id: str,
        student_id: str,
        org_id: str,
        status: ApplicationStatus,
        now: datetime,
    ) -> "Application":
        return cls(
            id=application_key(opportunity_id, student_id),
            opportunity_id=opportunity_id,
            student_id=student_id,
            org_id=org_id,
            status=status,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Application":
        return cls.model_validate(record)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ApplicationUpdate(BaseModel):
    """
    Partial update for an Application. Only fields that were explicitly set
    are merged; everything else in the stored record is left alone.
    """

    status: Optional[ApplicationStatus] = None
    org_id: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)

    def merge_into(self, record: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        merged = dict(record)
        merged.update(self.changes())
        merged["updated_at"] = now
        return Application.from_record(merged).to_record()


class SavedOpportunity(BaseModel):
    id: str
    student_id: str
    opportunity_id: str
    org_id: str
    created_at: datetime
    updated_at: datetime

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class SystemSettings(BaseModel):
    id: str = "default"
    matching_skill_weight: float = 0.7
    matching_tag_weight: float = 0.3
    updated_by: str = "system"
    updated_at: Optional[datetime] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
