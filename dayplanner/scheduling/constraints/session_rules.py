"""
Field-level invariants every stored session must satisfy.
"""

import re
from datetime import datetime

from ...errors import ValidationError
from ..core.constants import SLOT_MINUTES, END_OF_DAY, NOTES_MAX_LENGTH
from ..core.time_slot import is_slot_time, minutes_of

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_date(value: str) -> bool:
    if not isinstance(value, str) or not DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_valid_end_time(value: str) -> bool:
    return value == END_OF_DAY or is_slot_time(value)


def validate_duration(duration_minutes) -> None:
    if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool):
        raise ValidationError("Duration must be an integer number of minutes", field="duration_minutes")
    if duration_minutes <= 0 or duration_minutes % SLOT_MINUTES:
        raise ValidationError(f"Duration must be a positive multiple of {SLOT_MINUTES}", field="duration_minutes")


def validate_session_fields(session) -> None:
    """Raise ValidationError for the first broken invariant of a full session value."""
    if not is_valid_date(session.date):
        raise ValidationError("Date must be in YYYY-MM-DD format", field="date")
    if not is_slot_time(session.start_time):
        raise ValidationError("Start time must be HH:00 or HH:30", field="start_time")
    if not is_valid_end_time(session.end_time):
        raise ValidationError("End time must be HH:00 or HH:30", field="end_time")

    start = minutes_of(session.start_time)
    end = minutes_of(session.end_time)
    if start >= end:
        raise ValidationError("Start time must be before end time", field="end_time")

    validate_duration(session.duration_minutes)
    if session.duration_minutes != end - start:
        raise ValidationError(
            f"Duration {session.duration_minutes} does not match {session.start_time}-{session.end_time}",
            field="duration_minutes",
        )

    if session.notes is not None and len(session.notes) > NOTES_MAX_LENGTH:
        raise ValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters", field="notes")
