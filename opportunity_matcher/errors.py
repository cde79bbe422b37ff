# opportunity_matcher/errors.py


class MatchEngineError(Exception):
    """Base class for errors raised by opportunity_matcher."""


class InvalidWeightConfiguration(MatchEngineError):
    def __init__(self, skill: float, tag: float, reason: str):
        self.skill = skill
        self.tag = tag
        self.reason = reason
        super().__init__(f"Invalid scoring weights (skill={skill}, tag={tag}): {reason}")


class MissingOwnerError(MatchEngineError):
    def __init__(self, opportunity_id: str, student_id: str):
        self.opportunity_id = opportunity_id
        self.student_id = student_id
        super().__init__(
            f"org_id is required when creating a new application status "
            f"(opportunity={opportunity_id}, student={student_id})"
        )


class StoreError(MatchEngineError):
    """A record store call failed. Never retried by the core."""


class StoreConflictError(StoreError):
    """Compare-and-swap kept losing against concurrent writers."""
