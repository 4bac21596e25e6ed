"""
Half-open session intervals and field access shared by the scheduling modules.
"""

from typing import Any, Optional

from .time_slot import minutes_of


def field(item: Any, name: str, default: Any = None) -> Any:
    """Read a session field from an ORM row, a value object or a plain dict."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


class Interval:
    """[start, end) in minutes since midnight."""

    __slots__ = ("start", "end")

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end

    @classmethod
    def of(cls, start_time: str, end_time: str) -> "Interval":
        return cls(minutes_of(start_time), minutes_of(end_time))

    @classmethod
    def from_session(cls, session: Any) -> "Interval":
        return cls.of(field(session, "start_time"), field(session, "end_time"))

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def __eq__(self, other):
        return isinstance(other, Interval) and (self.start, self.end) == (other.start, other.end)

    def __repr__(self):
        return f"Interval({self.start}, {self.end})"


def session_id(session: Any) -> Optional[int]:
    return field(session, "id")
