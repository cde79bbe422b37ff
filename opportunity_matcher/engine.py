# opportunity_matcher/engine.py
"""
Caller-side entry point: pulls snapshots out of the record store, keeps only
eligible entries (open opportunities, active students) and hands them to the
ranking functions with the weights currently in effect.
"""
from __future__ import annotations

from typing import List, Optional

from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import (
    AccountStatus,
    MatchResult,
    OpportunityRequirements,
    OpportunityStatus,
    SkillProfile,
)
from opportunity_matcher.ranking import rank_opportunities_for_student, rank_students_for_opportunity
from opportunity_matcher.scoring import DEFAULT_WEIGHTS, ScoringWeights
from opportunity_matcher.settings import SettingsRepository
from opportunity_matcher.store.base import RecordStore

logger = get_logger(__name__)

STUDENT_PROFILES = "student_profiles"
OPPORTUNITIES = "opportunities"


class MatchEngine:
    def __init__(self, store: RecordStore, settings: Optional[SettingsRepository] = None):
        self.store = store
        self.settings = settings

    def _weights(self) -> ScoringWeights:
        # read on every call so a settings change applies to the next ranking
        if self.settings is None:
            return DEFAULT_WEIGHTS
        return self.settings.load_weights()

    def open_opportunities(self) -> List[OpportunityRequirements]:
        records = self.store.query_by_field(OPPORTUNITIES, "status", OpportunityStatus.OPEN.value)
        return [OpportunityRequirements.model_validate(r) for r in records]

    def active_students(self) -> List[SkillProfile]:
        records = self.store.query_by_field(STUDENT_PROFILES, "account_status", AccountStatus.ACTIVE.value)
        return [SkillProfile.model_validate(r) for r in records]

    def opportunities_for_student(self, student_id: str, limit: Optional[int] = None) -> List[MatchResult]:
        record = self.store.get(STUDENT_PROFILES, student_id)
        if record is None:
            logger.warning("student_profile_missing", student_id=student_id)
            return []
        student = SkillProfile.model_validate(record)
        return rank_opportunities_for_student(student, self.open_opportunities(), self._weights(), limit)

    def students_for_opportunity(self, opportunity_id: str, limit: Optional[int] = None) -> List[MatchResult]:
        record = self.store.get(OPPORTUNITIES, opportunity_id)
        if record is None:
            logger.warning("opportunity_missing", opportunity_id=opportunity_id)
            return []
        opportunity = OpportunityRequirements.model_validate(record)
        return rank_students_for_opportunity(opportunity, self.active_students(), self._weights(), limit)
