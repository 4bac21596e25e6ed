"""
Time slot representation for the day grid.

A day is 48 fixed half-hour slots. Times travel as zero-padded "HH:MM" strings
whose minute is 00 or 30; "24:00" is accepted only as the exclusive end of the day.
"""

import re
from datetime import datetime
from typing import List

from .constants import SLOT_MINUTES, SLOTS_PER_DAY, MINUTES_PER_DAY, END_OF_DAY, MAX_OFFERED_DURATION

SLOT_TIME_RE = re.compile(r"^([01]\d|2[0-3]):(00|30)$")


class TimeSlot:
    """One half-hour row of the grid: its index, "HH:MM" start and display label."""

    def __init__(self, index: int):
        self.index = index
        self.time = time_of(index)
        self.label = slot_label(index)

    def __eq__(self, other):
        return isinstance(other, TimeSlot) and other.index == self.index

    def __lt__(self, other):
        return self.index < other.index

    def __repr__(self):
        return f"TimeSlot({self.index}, {self.time}, {self.label})"


def is_slot_time(value: str) -> bool:
    return bool(SLOT_TIME_RE.match(value or ""))


def minutes_of(time_str: str) -> int:
    """Minutes since midnight of an aligned "HH:MM" (or the "24:00" boundary)."""
    if time_str == END_OF_DAY:
        return MINUTES_PER_DAY
    if not is_slot_time(time_str):
        raise ValueError(f"Not a slot-aligned time: {time_str!r}")
    hour, minute = time_str.split(":")
    return int(hour) * 60 + int(minute)


def format_minutes(minutes: int) -> str:
    """Inverse of minutes_of for values in [0, 1440]."""
    if minutes < 0 or minutes > MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range for a single day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def slot_index(time_str: str) -> int:
    """
    Index of the slot starting at time_str, in [0, 47].

    "24:00" maps to 48, the exclusive end boundary, so end-time arithmetic stays
    uniform. The input must already be aligned; nothing is rounded here.
    """
    return minutes_of(time_str) // SLOT_MINUTES


def time_of(index: int) -> str:
    if index < 0 or index >= SLOTS_PER_DAY:
        raise ValueError(f"Slot index out of range: {index}")
    return format_minutes(index * SLOT_MINUTES)


def span(duration_minutes: int) -> int:
    """Number of slots a session of this duration covers."""
    if duration_minutes <= 0 or duration_minutes % SLOT_MINUTES:
        raise ValueError(f"Duration must be a positive multiple of {SLOT_MINUTES}: {duration_minutes}")
    return duration_minutes // SLOT_MINUTES


def max_duration(start_time: str) -> int:
    """Longest duration that still ends by midnight."""
    return MINUTES_PER_DAY - minutes_of(start_time)


def end_time(start_time: str, duration_minutes: int) -> str:
    end = minutes_of(start_time) + duration_minutes
    if end > MINUTES_PER_DAY:
        raise ValueError(f"{start_time} + {duration_minutes} minutes crosses midnight")
    return format_minutes(end)


def current_slot_index(now: datetime) -> int:
    """Slot containing `now`, snapped down to the half hour. Only used for scrolling."""
    return now.hour * 2 + (1 if now.minute >= 30 else 0)


def slot_label(index: int) -> str:
    """12-hour display label, e.g. 0 -> "12:00 AM", 29 -> "2:30 PM"."""
    minutes = index * SLOT_MINUTES
    hour, minute = divmod(minutes, 60)
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def generate_time_slots() -> List[TimeSlot]:
    return [TimeSlot(i) for i in range(SLOTS_PER_DAY)]


def duration_options(start_time: str, longest: int = MAX_OFFERED_DURATION) -> List[int]:
    """Durations the confirmation surface may offer for a session starting at start_time."""
    limit = min(longest, max_duration(start_time))
    return list(range(SLOT_MINUTES, limit + 1, SLOT_MINUTES))
