# opportunity_matcher/ranking.py
"""
Rank opportunities for a student, or students for an opportunity.

Callers hand in already-filtered snapshots (open opportunities, eligible
students); nothing here drops an entry. Python's sort is stable, so entries
with equal scores keep their input order.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import MatchResult, OpportunityRequirements, SkillProfile
from opportunity_matcher.scoring import DEFAULT_WEIGHTS, ScoringWeights, calculate_match_score

logger = get_logger(__name__)


def _sort_by_score(results: List[MatchResult], limit: Optional[int]) -> List[MatchResult]:
    results.sort(key=lambda r: r.score, reverse=True)
    if limit is not None:
        results = results[: max(0, limit)]
    return results


def rank_opportunities_for_student(
    student: SkillProfile,
    opportunities: Iterable[OpportunityRequirements],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    limit: Optional[int] = None,
) -> List[MatchResult]:
    results = [calculate_match_score(student, o, weights) for o in opportunities or []]
    ranked = _sort_by_score(results, limit)
    logger.debug(
        "ranking_completed",
        student_id=student.student_id,
        candidates=len(results),
        returned=len(ranked),
    )
    return ranked


def rank_students_for_opportunity(
    opportunity: OpportunityRequirements,
    students: Iterable[SkillProfile],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    limit: Optional[int] = None,
) -> List[MatchResult]:
    results = [calculate_match_score(s, opportunity, weights) for s in students or []]
    ranked = _sort_by_score(results, limit)
    logger.debug(
        "ranking_completed",
        opportunity_id=opportunity.opportunity_id,
        candidates=len(results),
        returned=len(ranked),
    )
    return ranked
