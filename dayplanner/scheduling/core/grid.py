"""
Day grid: the derived 48-slot occupancy map for one date.

The grid is rebuilt from the session set every time that set changes and is
never mutated in place.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ...errors import GridIntegrityError
from .constants import SLOTS_PER_DAY, FREE, OCCUPIED_START, OCCUPIED_CONTINUATION, DEFAULT_SCROLL_SLOT
from .interval import field, session_id
from .time_slot import slot_index, span, current_slot_index, time_of, slot_label

logger = logging.getLogger(__name__)


class SlotState:
    kind = FREE

    @property
    def is_free(self) -> bool:
        return self.kind == FREE


class Free(SlotState):
    kind = FREE

    def __eq__(self, other):
        return isinstance(other, Free)

    def __repr__(self):
        return "Free()"


class OccupiedStart(SlotState):
    """First slot of a session; carries the session and how many slots it covers."""

    kind = OCCUPIED_START

    def __init__(self, session: Any, span: int):
        self.session = session
        self.span = span

    def __eq__(self, other):
        return (
            isinstance(other, OccupiedStart)
            and session_id(other.session) == session_id(self.session)
            and other.span == self.span
        )

    def __repr__(self):
        return f"OccupiedStart(session={session_id(self.session)}, span={self.span})"


class OccupiedContinuation(SlotState):
    """A later slot of a multi-slot session. Rendered empty, never droppable."""

    kind = OCCUPIED_CONTINUATION

    def __init__(self, session_id: Optional[int] = None):
        self.session_id = session_id

    def __eq__(self, other):
        return isinstance(other, OccupiedContinuation)

    def __repr__(self):
        return f"OccupiedContinuation(session={self.session_id})"


FREE_SLOT = Free()


class DayGrid:
    def __init__(self, date: str, slots: Sequence[SlotState]):
        if len(slots) != SLOTS_PER_DAY:
            raise ValueError(f"A day grid has exactly {SLOTS_PER_DAY} slots, got {len(slots)}")
        self.date = date
        self.slots: Tuple[SlotState, ...] = tuple(slots)

    def __getitem__(self, index: int) -> SlotState:
        return self.slots[index]

    def __len__(self):
        return len(self.slots)

    def __iter__(self):
        return iter(self.slots)

    def is_droppable(self, index: int) -> bool:
        return 0 <= index < SLOTS_PER_DAY and self.slots[index].is_free

    def starts(self) -> List[Tuple[int, OccupiedStart]]:
        return [(i, s) for i, s in enumerate(self.slots) if isinstance(s, OccupiedStart)]

    def session_at(self, index: int) -> Optional[Any]:
        state = self.slots[index]
        return state.session if isinstance(state, OccupiedStart) else None

    def free_count(self) -> int:
        return sum(1 for s in self.slots if s.is_free)

    def to_rows(self) -> List[dict]:
        """Frontend-friendly rows, one per slot."""
        rows = []
        for i, state in enumerate(self.slots):
            row = {"index": i, "time": time_of(i), "label": slot_label(i), "state": state.kind}
            if isinstance(state, OccupiedStart):
                row["span"] = state.span
                row["session"] = state.session
            elif isinstance(state, OccupiedContinuation):
                row["session_id"] = state.session_id
            rows.append(row)
        return rows

    def __repr__(self):
        return f"DayGrid({self.date}, {len(self.starts())} sessions, {self.free_count()} free)"


def build_grid(date: str, sessions: Iterable[Any]) -> DayGrid:
    """
    Build the occupancy map for `date`.

    Callers pass only that date's sessions. Continuation slots are clamped to the
    end of the day. Two sessions claiming one slot raise GridIntegrityError.
    """
    slots: List[SlotState] = [FREE_SLOT] * SLOTS_PER_DAY

    for session in sessions:
        start = slot_index(field(session, "start_time"))
        n = span(field(session, "duration_minutes"))
        if start >= SLOTS_PER_DAY:
            raise GridIntegrityError(f"Session {session_id(session)} starts outside the day grid")

        covered = range(start, min(start + n, SLOTS_PER_DAY))
        for i in covered:
            if not slots[i].is_free:
                logger.error(f"Slot {i} on {date} claimed by session {session_id(session)} and {slots[i]!r}")
                raise GridIntegrityError(
                    f"Sessions overlap at {time_of(i)} on {date}",
                    slot=i,
                    session_id=session_id(session),
                )

        slots[start] = OccupiedStart(session, n)
        for i in covered[1:]:
            slots[i] = OccupiedContinuation(session_id(session))

    return DayGrid(date, slots)


def scroll_target_slot(date: str, sessions: Sequence[Any], now: datetime) -> int:
    """
    Where the grid should scroll when a date is shown: an hour before now when
    viewing today, else two hours before the first session, else 06:00.
    """
    if date == now.date().isoformat():
        return max(0, current_slot_index(now) - 2)
    if sessions:
        first = min(slot_index(field(s, "start_time")) for s in sessions)
        return max(0, first - 4)
    return DEFAULT_SCROLL_SLOT
