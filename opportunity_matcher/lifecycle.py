# opportunity_matcher/lifecycle.py
"""
Application lifecycle: applied -> shortlisted -> contacted, with rejected
reachable from anywhere.

The people moving applications around (the owning organisation, admins) are
trusted, so any status may follow any status. STATUS_FLOW only describes the
usual forward path; moves outside it are logged, not refused.

Every application is stored under "{opportunity_id}_{student_id}", so there is
never more than one record per pair, and every write goes through the
store's atomic update.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, FrozenSet, List, Optional, Union

from opportunity_matcher.errors import MissingOwnerError
from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import (
    Application,
    ApplicationStatus,
    ApplicationUpdate,
    application_key,
)
from opportunity_matcher.store.base import Record, RecordStore
from opportunity_matcher.utils import utc_now

logger = get_logger(__name__)

APPLICATIONS = "applications"

ADVANCED_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    {ApplicationStatus.SHORTLISTED, ApplicationStatus.CONTACTED}
)

STATUS_FLOW: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.APPLIED: frozenset({ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.SHORTLISTED: frozenset({ApplicationStatus.CONTACTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.CONTACTED: frozenset({ApplicationStatus.REJECTED}),
    ApplicationStatus.REJECTED: frozenset(),
}


def is_nominal_transition(current: ApplicationStatus, nxt: ApplicationStatus) -> bool:
    return nxt == current or nxt in STATUS_FLOW[current]


def _newest_first(records: List[Record]) -> List[Application]:
    apps = [Application.from_record(r) for r in records]
    apps.sort(key=lambda a: a.created_at, reverse=True)
    return apps


class ApplicationLifecycleManager:
    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    # ----------------------------
    # Reads
    # ----------------------------

    def get_application(self, opportunity_id: str, student_id: str) -> Optional[Application]:
        record = self.store.get(APPLICATIONS, application_key(opportunity_id, student_id))
        return Application.from_record(record) if record else None

    def applications_for_opportunity(self, opportunity_id: str) -> List[Application]:
        return _newest_first(self.store.query_by_field(APPLICATIONS, "opportunity_id", opportunity_id))

    def applications_for_org(self, org_id: str) -> List[Application]:
        return _newest_first(self.store.query_by_field(APPLICATIONS, "org_id", org_id))

    def applications_for_student(self, student_id: str) -> List[Application]:
        return _newest_first(self.store.query_by_field(APPLICATIONS, "student_id", student_id))

    # ----------------------------
    # Writes
    # ----------------------------

    def apply(self, opportunity_id: str, student_id: str, org_id: str) -> Application:
        """
        Idempotent. A shortlisted or contacted candidate keeps their status;
        a rejected one goes back to applied; created_at never moves.
        """
        key = application_key(opportunity_id, student_id)
        now = self.clock()
        outcome = {"event": "application_unchanged"}

        def mutate(current: Optional[Record]) -> Optional[Record]:
            outcome["event"] = "application_unchanged"
            if current is None:
                outcome["event"] = "application_created"
                return Application.new(
                    opportunity_id, student_id, org_id, ApplicationStatus.APPLIED, now
                ).to_record()

            existing = Application.from_record(current)
            if existing.status in ADVANCED_STATUSES:
                return None
            if existing.status == ApplicationStatus.REJECTED:
                outcome["event"] = "application_reopened"
            else:
                outcome["event"] = "application_reapplied"
            return ApplicationUpdate(status=ApplicationStatus.APPLIED).merge_into(current, now)

        record = self.store.update(APPLICATIONS, key, mutate)
        logger.info(outcome["event"], application_id=key, org_id=org_id, status=record["status"])
        return Application.from_record(record)

    def set_status(
        self,
        opportunity_id: str,
        student_id: str,
        status: Union[ApplicationStatus, str],
        org_id: Optional[str] = None,
    ) -> Application:
        """
        Overwrite the status. A missing application is created on the spot
        (e.g. a recruiter shortlisting someone found in talent search), which
        needs the owning org_id.
        """
        status = ApplicationStatus(status)
        key = application_key(opportunity_id, student_id)
        now = self.clock()
        previous: Dict[str, Optional[ApplicationStatus]] = {"status": None}

        def mutate(current: Optional[Record]) -> Record:
            previous["status"] = None
            if current is None:
                if not org_id:
                    raise MissingOwnerError(opportunity_id, student_id)
                return Application.new(opportunity_id, student_id, org_id, status, now).to_record()
            previous["status"] = ApplicationStatus(current["status"])
            return ApplicationUpdate(status=status).merge_into(current, now)

        record = self.store.update(APPLICATIONS, key, mutate)

        prev = previous["status"]
        if prev is None:
            logger.info("application_created", application_id=key, org_id=org_id, status=status.value)
        else:
            logger.info(
                "application_status_changed",
                application_id=key,
                previous=prev.value,
                status=status.value,
                nominal=is_nominal_transition(prev, status),
            )
        return Application.from_record(record)

    def withdraw(self, opportunity_id: str, student_id: str) -> Optional[Application]:
        """
        Student-initiated. Lands on the same `rejected` status an
        organisation would set. Nothing to withdraw -> None.
        """
        if self.get_application(opportunity_id, student_id) is None:
            logger.warning(
                "withdraw_without_application",
                opportunity_id=opportunity_id,
                student_id=student_id,
            )
            return None
        return self.set_status(opportunity_id, student_id, ApplicationStatus.REJECTED)

    def update(
        self, opportunity_id: str, student_id: str, changes: ApplicationUpdate
    ) -> Optional[Application]:
        """Merge the explicitly set fields of `changes` into an existing application."""
        key = application_key(opportunity_id, student_id)
        now = self.clock()

        def mutate(current: Optional[Record]) -> Optional[Record]:
            if current is None:
                return None
            return changes.merge_into(current, now)

        record = self.store.update(APPLICATIONS, key, mutate)
        if record is None:
            return None
        logger.info("application_updated", application_id=key, fields=sorted(changes.changes()))
        return Application.from_record(record)
