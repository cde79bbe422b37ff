# opportunity_matcher/scoring.py
import math
from dataclasses import dataclass
from typing import Dict

from opportunity_matcher.errors import InvalidWeightConfiguration
from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import MatchResult, OpportunityRequirements, SkillProfile
from opportunity_matcher.overlap import (
    distinct_count,
    distinct_tag_count,
    overlap_labels,
    overlap_tags,
)
from opportunity_matcher.utils import round_half_up

logger = get_logger(__name__)

WEIGHT_TOLERANCE = 0.001


def validate_weights(skill: float, tag: float) -> None:
    if not (math.isfinite(skill) and math.isfinite(tag)):
        raise InvalidWeightConfiguration(skill, tag, "weights must be finite numbers")
    if skill < 0 or tag < 0:
        raise InvalidWeightConfiguration(skill, tag, "weights must not be negative")
    total = skill + tag
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise InvalidWeightConfiguration(
            skill, tag, f"weights must sum to 1.0 (got {total})"
        )


@dataclass(frozen=True)
class ScoringWeights:
    skill: float = 0.7
    tag: float = 0.3

    def __post_init__(self):
        validate_weights(self.skill, self.tag)

    def as_dict(self) -> Dict[str, float]:
        return {"skill": self.skill, "tag": self.tag}


DEFAULT_WEIGHTS = ScoringWeights()


class WeightSettings:
    """
    The single weight pair in effect. A rejected update leaves the previous
    pair untouched.
    """

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self._weights = weights

    @property
    def current(self) -> ScoringWeights:
        return self._weights

    def update(self, skill: float, tag: float) -> ScoringWeights:
        try:
            weights = ScoringWeights(skill=float(skill), tag=float(tag))
        except InvalidWeightConfiguration as e:
            logger.warning("weights_rejected", skill=skill, tag=tag, reason=e.reason)
            raise
        previous = self._weights
        self._weights = weights
        logger.info(
            "weights_updated",
            previous=previous.as_dict(),
            current=weights.as_dict(),
        )
        return weights


def _ratio(hits: int, required: int) -> float:
    # nothing required means nothing to match, not a perfect match
    return hits / max(1, required)


def calculate_match_score(
    student: SkillProfile,
    opportunity: OpportunityRequirements,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> MatchResult:
    """
    Returns a 0-100 score and the skills/tags that overlapped.

    score = 100 * (w_skill * skill_ratio + w_tag * tag_ratio), where each
    ratio is overlap count over the opportunity's requirement count.
    """
    skill_hit = overlap_labels(student.skills, opportunity.required_skills)
    tag_hit = overlap_tags(student.interest_tags, opportunity.tags)

    skill_ratio = _ratio(skill_hit.count, distinct_count(opportunity.required_skills))
    tag_ratio = _ratio(tag_hit.count, distinct_tag_count(opportunity.tags))

    total = 100.0 * (weights.skill * skill_ratio + weights.tag * tag_ratio)
    score = min(100.0, max(0.0, round_half_up(total, 2)))

    return MatchResult(
        student_id=student.student_id,
        opportunity_id=opportunity.opportunity_id,
        skill_overlap=skill_hit.members,
        tag_overlap=tag_hit.members,
        skill_overlap_count=skill_hit.count,
        tag_overlap_count=tag_hit.count,
        skill_ratio=round_half_up(skill_ratio, 4),
        tag_ratio=round_half_up(tag_ratio, 4),
        score=score,
    )
