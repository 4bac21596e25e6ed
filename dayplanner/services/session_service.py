"""
Server-side session scheduling: the authoritative overlap check and writes.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..errors import InvalidReferenceError, NotFoundError, OverlapError, ValidationError
from ..models import Activity, ScheduledSession, User
from ..scheduling.constraints.overlap import find_conflicts
from ..scheduling.constraints.session_rules import is_valid_date, validate_session_fields
from ..scheduling.core.grid import DayGrid, build_grid
from ..scheduling.utils.patch import SessionFields, SessionPatch, apply_patch
from .day_locks import DayLockRegistry

logger = logging.getLogger(__name__)


def require_date(value: str, field: str = "date") -> str:
    if not is_valid_date(value):
        raise ValidationError(f"{field} must be in YYYY-MM-DD format", field=field)
    return value


class SessionService:
    """Reads and writes one owner's sessions."""

    def __init__(self, db: Session, owner_id: int, locks: DayLockRegistry):
        self.db = db
        self.owner_id = owner_id
        self.locks = locks

    # ================================
    # READS
    # ================================

    def _query(self):
        return (
            self.db.query(ScheduledSession)
            .options(joinedload(ScheduledSession.activity).joinedload(Activity.category))
            .filter(ScheduledSession.user_id == self.owner_id)
        )

    def list_all(self) -> List[ScheduledSession]:
        return self._query().order_by(ScheduledSession.date, ScheduledSession.start_time).all()

    def list_for_date(self, date: str) -> List[ScheduledSession]:
        require_date(date)
        return (
            self._query()
            .filter(ScheduledSession.date == date)
            .order_by(ScheduledSession.start_time)
            .all()
        )

    def list_for_range(self, start_date: str, end_date: str) -> List[ScheduledSession]:
        """Sessions with start_date <= date <= end_date."""
        require_date(start_date, "startDate")
        require_date(end_date, "endDate")
        return (
            self._query()
            .filter(ScheduledSession.date.between(start_date, end_date))
            .order_by(ScheduledSession.date, ScheduledSession.start_time)
            .all()
        )

    def get(self, session_id: int) -> ScheduledSession:
        session = self._query().filter(ScheduledSession.id == session_id).first()
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def day_grid(self, date: str) -> DayGrid:
        return build_grid(date, self.list_for_date(date))

    # ================================
    # WRITES
    # ================================

    def create(self, fields: SessionFields) -> ScheduledSession:
        validate_session_fields(fields)
        self._check_activity(fields.activity_id)

        with self.locks.hold(self.owner_id, fields.date):
            try:
                self._lock_owner_row()
                self._assert_free(fields)
                session = ScheduledSession(user_id=self.owner_id, **fields.as_dict())
                self.db.add(session)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"Created session {session.id} for activity {fields.activity_id} on {fields.date} {fields.start_time}-{fields.end_time}")
        return self.get(session.id)

    def update(self, session_id: int, patch: SessionPatch) -> ScheduledSession:
        if patch.is_empty():
            raise ValidationError("No fields to update")

        existing = self.get(session_id)
        merged = apply_patch(SessionFields.from_row(existing), patch)
        validate_session_fields(merged)
        if merged.activity_id != existing.activity_id:
            self._check_activity(merged.activity_id)

        # Moving to another date takes both days' locks
        with self.locks.hold(self.owner_id, existing.date, merged.date):
            try:
                self._lock_owner_row()
                self._assert_free(merged, exclude_id=session_id)
                for name, value in merged.as_dict().items():
                    setattr(existing, name, value)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"Updated session {session_id}: {merged.date} {merged.start_time}-{merged.end_time}")
        self.db.expire(existing)
        return self.get(session_id)

    def delete(self, session_id: int) -> None:
        session = self.get(session_id)
        self.db.delete(session)
        self.db.commit()
        logger.info(f"Deleted session {session_id}")

    # ================================
    # CHECKS
    # ================================

    def _check_activity(self, activity_id: int):
        activity = (
            self.db.query(Activity.id)
            .filter(Activity.id == activity_id, or_(Activity.user_id == self.owner_id, Activity.user_id.is_(None)))
            .first()
        )
        if activity is None:
            logger.warning(f"Rejected session write: activity {activity_id} does not exist")
            raise InvalidReferenceError("Activity does not exist", field="activity_id")

    def _lock_owner_row(self):
        """
        Row lock on the owner, held until commit. Serializes this owner's writers
        across processes on databases with row locks; SQLite ignores FOR UPDATE.
        """
        self.db.query(User.id).filter(User.id == self.owner_id).with_for_update().first()

    def _assert_free(self, fields: SessionFields, exclude_id: Optional[int] = None):
        same_day = (
            self.db.query(ScheduledSession)
            .filter(ScheduledSession.user_id == self.owner_id, ScheduledSession.date == fields.date)
            .all()
        )
        conflicts = find_conflicts(same_day, fields, exclude_id=exclude_id)
        if conflicts:
            logger.warning(
                f"Rejected session {fields.date} {fields.start_time}-{fields.end_time}: "
                f"overlaps {[c.id for c in conflicts]}"
            )
            raise OverlapError(conflicting_ids=[c.id for c in conflicts])
