from opportunity_matcher.errors import InvalidWeightConfiguration, MissingOwnerError, StoreError
from opportunity_matcher.lifecycle import ApplicationLifecycleManager
from opportunity_matcher.models import (
    Application,
    ApplicationStatus,
    MatchResult,
    OpportunityRequirements,
    SkillProfile,
)
from opportunity_matcher.ranking import rank_opportunities_for_student, rank_students_for_opportunity
from opportunity_matcher.scoring import ScoringWeights, WeightSettings, calculate_match_score

__all__ = [
    "Application",
    "ApplicationLifecycleManager",
    "ApplicationStatus",
    "InvalidWeightConfiguration",
    "MatchResult",
    "MissingOwnerError",
    "OpportunityRequirements",
    "ScoringWeights",
    "SkillProfile",
    "StoreError",
    "WeightSettings",
    "calculate_match_score",
    "rank_opportunities_for_student",
    "rank_students_for_opportunity",
]
