"""
Overlap checking for sessions on the same owner-day.

Two sessions conflict iff their half-open intervals intersect:
[s1, e1) and [s2, e2) overlap when s1 < e2 and s2 < e1. Back-to-back
sessions (one ends at 10:00, the next starts at 10:00) do not conflict.
"""

from typing import Any, Iterable, List, Optional

from ..core.interval import Interval, field, session_id


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    return Interval.of(start_a, end_a).overlaps(Interval.of(start_b, end_b))


def find_conflicts(existing_sessions: Iterable[Any], candidate: Any, exclude_id: Optional[int] = None) -> List[Any]:
    """
    Existing sessions whose interval intersects the candidate's.

    `exclude_id` skips the session being edited so that changing its own
    duration never flags itself. When both sides carry a date, sessions on other
    dates are ignored.
    """
    candidate_interval = Interval.from_session(candidate)
    candidate_date = field(candidate, "date")

    conflicts = []
    for session in existing_sessions:
        if exclude_id is not None and session_id(session) == exclude_id:
            continue
        other_date = field(session, "date")
        if candidate_date is not None and other_date is not None and other_date != candidate_date:
            continue
        if candidate_interval.overlaps(Interval.from_session(session)):
            conflicts.append(session)
    return conflicts


def has_overlap(existing_sessions: Iterable[Any], candidate: Any, exclude_id: Optional[int] = None) -> bool:
    return bool(find_conflicts(existing_sessions, candidate, exclude_id))
