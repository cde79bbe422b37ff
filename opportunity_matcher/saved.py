# opportunity_matcher/saved.py
from datetime import datetime
from typing import Callable, Set

from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import SavedOpportunity
from opportunity_matcher.store.base import RecordStore
from opportunity_matcher.utils import composite_key, utc_now

logger = get_logger(__name__)

SAVED_OPPORTUNITIES = "saved_opportunities"


class SavedOpportunities:
    """Bookmarks a student keeps on opportunities they may apply to later."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def save(self, student_id: str, opportunity_id: str, org_id: str) -> SavedOpportunity:
        now = self.clock()
        saved = SavedOpportunity(
            id=composite_key(student_id, opportunity_id),
            student_id=student_id,
            opportunity_id=opportunity_id,
            org_id=org_id,
            created_at=now,
            updated_at=now,
        )
        self.store.put(SAVED_OPPORTUNITIES, saved.id, saved.to_record(), merge=True)
        logger.info("opportunity_saved", student_id=student_id, opportunity_id=opportunity_id)
        return saved

    def unsave(self, student_id: str, opportunity_id: str) -> None:
        self.store.delete(SAVED_OPPORTUNITIES, composite_key(student_id, opportunity_id))
        logger.info("opportunity_unsaved", student_id=student_id, opportunity_id=opportunity_id)

    def toggle(self, student_id: str, opportunity_id: str, org_id: str, saved: bool) -> bool:
        """Flip the bookmark given its current state; returns the new state."""
        if saved:
            self.unsave(student_id, opportunity_id)
            return False
        self.save(student_id, opportunity_id, org_id)
        return True

    def saved_opportunity_ids(self, student_id: str) -> Set[str]:
        records = self.store.query_by_field(SAVED_OPPORTUNITIES, "student_id", student_id)
        return {r["opportunity_id"] for r in records}
