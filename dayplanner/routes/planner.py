"""
Day grid API for the frontend: the 48-slot occupancy map of one date.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, Query

from ..schemas import DayGridOut, SlotOut, SessionOut
from ..scheduling import generate_time_slots, duration_options, scroll_target_slot
from ..services.session_service import SessionService
from .sessions import get_session_service

router = APIRouter(tags=["planner"])


@router.get("/grid", response_model=DayGridOut)
def get_day_grid(
    service: SessionService = Depends(get_session_service),
    date: str = Query(..., description="YYYY-MM-DD"),
):
    """Occupancy of every slot: free, start of a session (with span) or continuation."""
    grid = service.day_grid(date)
    sessions = [state.session for _, state in grid.starts()]

    slots = []
    for row in grid.to_rows():
        session = row.pop("session", None)
        if session is not None:
            row["session"] = SessionOut.model_validate(session)
        slots.append(SlotOut(**row))

    return DayGridOut(
        date=date,
        slots=slots,
        scroll_to_slot=scroll_target_slot(date, sessions, datetime.now()),
        session_count=len(sessions),
    )


@router.get("/slots")
def list_time_slots():
    """The fixed 48 half-hour slots with display labels."""
    return [{"index": s.index, "time": s.time, "label": s.label} for s in generate_time_slots()]


@router.get("/durations")
def list_duration_options(start_time: str = Query(..., pattern=r"^([01]\d|2[0-3]):(00|30)$")):
    """Durations that still end by midnight for a session starting at start_time."""
    return {"start_time": start_time, "durations": duration_options(start_time)}
