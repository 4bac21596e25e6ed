"""
Client-side day planner: keeps one date's sessions, its grid and the placement flow consistent.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..errors import ApiError, ApiUnavailableError, GridIntegrityError, ValidationError
from ..scheduling.constraints.session_rules import is_valid_date
from ..scheduling.core.grid import DayGrid, OccupiedStart, build_grid, scroll_target_slot
from ..scheduling.core.interval import field
from ..scheduling.placement.flow import ConfirmationSurface, DropOutcome, PlacementFlow, SubmitResult

logger = logging.getLogger(__name__)


class DayPlanner:
    """
    `api` is a SchedulingApiClient or anything with the same session methods.
    The grid is rebuilt from the server's session list after every successful
    mutation and after a stale-id failure.
    """

    def __init__(self, api: Any, date: str):
        if not is_valid_date(date):
            raise ValidationError("Date must be in YYYY-MM-DD format", field="date")
        self.api = api
        self.date = date
        self.sessions: List[Dict] = []
        self.grid: DayGrid = build_grid(date, [])
        self.activities: List[Dict] = []
        self.flow = PlacementFlow()
        self.load_error: Optional[Exception] = None

    # ================================
    # LOADING
    # ================================

    def load(self) -> DayGrid:
        """Fetch the date's sessions and rebuild the grid. Errors propagate."""
        fetched = self.api.list_sessions(date=self.date)
        # Another date's rows are never placed on this grid
        sessions = [s for s in fetched if field(s, "date") == self.date]
        grid = build_grid(self.date, sessions)
        self.sessions = sessions
        self.grid = grid
        self.load_error = None
        return self.grid

    def refresh(self) -> bool:
        """
        Reload after a mutation. A transport failure or a conflicting session set
        keeps the previous grid and is recorded in load_error.
        """
        try:
            self.load()
        except (ApiUnavailableError, ApiError, GridIntegrityError) as e:
            logger.warning(f"Refresh of {self.date} failed: {e}")
            self.load_error = e
            return False
        return True

    def load_palette(self) -> List[Dict]:
        self.activities = self.api.list_activities()
        return self.activities

    def go_to(self, date: str) -> DayGrid:
        if not is_valid_date(date):
            raise ValidationError("Date must be in YYYY-MM-DD format", field="date")
        self.flow.cancel_drag()
        self.flow.close_surface()
        self.date = date
        return self.load()

    def scroll_target(self, now: Optional[datetime] = None) -> int:
        return scroll_target_slot(self.date, self.sessions, now or datetime.now())

    # ================================
    # INTERACTION
    # ================================

    def pick_up(self, activity: Any):
        if isinstance(activity, int):
            matches = [a for a in self.activities if field(a, "id") == activity]
            if not matches:
                raise ValidationError(f"Activity {activity} is not in the palette", field="activity_id")
            activity = matches[0]
        self.flow.pick_up(activity)

    def drop(self, index: Optional[int]) -> DropOutcome:
        return self.flow.drop(self.grid, index)

    def click_slot(self, index: int) -> Optional[ConfirmationSurface]:
        """Open the edit surface when the slot starts a session; other slots do nothing."""
        state = self.grid[index]
        if isinstance(state, OccupiedStart):
            return self.flow.click_session(state.session)
        return None

    @property
    def surface(self) -> Optional[ConfirmationSurface]:
        return self.flow.surface

    def submit(self) -> SubmitResult:
        result = self.flow.submit(self.api, self.sessions)
        if result.ok or result.needs_refresh:
            self.refresh()
        return result

    def delete(self) -> SubmitResult:
        result = self.flow.delete(self.api)
        if result.ok or result.needs_refresh:
            self.refresh()
        return result
