"""
Session value types and the pure merge used for partial updates.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from ...errors import ValidationError
from ..constraints.session_rules import is_valid_end_time, validate_duration
from ..core.time_slot import end_time, is_slot_time, minutes_of


class _Unset:
    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()

TIME_FIELDS = ("start_time", "end_time", "duration_minutes")

# Only notes may be cleared with an explicit null
REQUIRED_FIELDS = ("activity_id", "date", "start_time", "end_time", "duration_minutes")


@dataclass(frozen=True)
class SessionFields:
    """The writable fields of a session, fully populated."""

    activity_id: int
    date: str
    start_time: str
    end_time: str
    duration_minutes: int
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "SessionFields":
        return cls(**{f.name: getattr(row, f.name) for f in fields(cls)})

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SessionPatch:
    """
    A partial update. Every field defaults to UNSET; only set fields are applied.
    `notes=None` is a real value that clears the notes.
    """

    activity_id: Any = UNSET
    date: Any = UNSET
    start_time: Any = UNSET
    end_time: Any = UNSET
    duration_minutes: Any = UNSET
    notes: Any = UNSET

    def provided(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_empty(self) -> bool:
        return not self.provided()


def apply_patch(existing: SessionFields, patch: SessionPatch) -> SessionFields:
    """
    Merge a patch into an existing session without touching storage.

    If the patch moves the start or changes the duration but gives no end time,
    the end is recomputed; if it gives only an end time, the duration is. Only
    the fields that arithmetic needs are checked here; the merged value still
    has to pass validate_session_fields.
    """
    changes = patch.provided()
    for name in REQUIRED_FIELDS:
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be null", field=name)

    merged = replace(existing, **changes)
    given = set(changes) & set(TIME_FIELDS)
    if not given:
        return merged

    if not is_slot_time(merged.start_time):
        raise ValidationError("Start time must be HH:00 or HH:30", field="start_time")

    if "end_time" not in given:
        validate_duration(merged.duration_minutes)
        try:
            merged = replace(merged, end_time=end_time(merged.start_time, merged.duration_minutes))
        except ValueError as e:
            raise ValidationError(str(e), field="duration_minutes")
    elif "duration_minutes" not in given:
        if not is_valid_end_time(merged.end_time):
            raise ValidationError("End time must be HH:00 or HH:30", field="end_time")
        merged = replace(merged, duration_minutes=minutes_of(merged.end_time) - minutes_of(merged.start_time))

    return merged
