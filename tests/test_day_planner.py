"""The client planner driven end to end against the in-process API."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from dayplanner.client.planner import DayPlanner
from dayplanner.errors import ApiUnavailableError, GridIntegrityError, ValidationError
from dayplanner.scheduling import DropOutcome, OccupiedContinuation, OccupiedStart
from dayplanner.scheduling.placement.flow import OVERLAP_MESSAGE, STALE_MESSAGE

DATE = "2024-01-01"


@pytest.fixture
def planner(api, activity):
    planner = DayPlanner(api, DATE)
    planner.load()
    planner.load_palette()
    return planner


def place(planner, activity_id, index, duration=30, notes=""):
    planner.pick_up(activity_id)
    assert planner.drop(index) == DropOutcome.DROPPED_ON_FREE
    planner.surface.set_duration(duration)
    if notes:
        planner.surface.set_notes(notes)
    return planner.submit()


class TestPlacement:
    def test_place_one_hour_at_nine(self, planner, activity):
        result = place(planner, activity["id"], 18, duration=60)

        assert result.ok
        assert planner.surface is None
        assert isinstance(planner.grid[18], OccupiedStart)
        assert planner.grid[18].span == 2
        assert isinstance(planner.grid[19], OccupiedContinuation)
        assert planner.grid.free_count() == 46

    def test_overlapping_drop_keeps_surface_and_grid(self, planner, activity):
        assert place(planner, activity["id"], 18, duration=60).ok

        result = place(planner, activity["id"], 17, duration=90)

        assert not result.ok
        assert planner.surface.error == OVERLAP_MESSAGE
        assert len(planner.sessions) == 1

        planner.surface.set_duration(30)
        assert planner.submit().ok
        assert len(planner.sessions) == 2

    def test_drop_on_continuation_does_nothing(self, planner, activity):
        place(planner, activity["id"], 18, duration=60)
        planner.pick_up(activity["id"])
        assert planner.drop(19) == DropOutcome.DROPPED_ON_OCCUPIED
        assert planner.surface is None

    def test_edit_then_delete(self, planner, activity):
        place(planner, activity["id"], 18, duration=60, notes="first draft")

        surface = planner.click_slot(18)
        assert surface.notes == "first draft"
        surface.set_duration(120)
        assert planner.submit().ok
        assert planner.grid[18].span == 4

        planner.click_slot(18)
        assert planner.delete().ok
        assert planner.grid.free_count() == 48

    def test_click_on_free_or_continuation(self, planner, activity):
        place(planner, activity["id"], 18, duration=60)
        assert planner.click_slot(0) is None
        assert planner.click_slot(19) is None

    def test_stale_session_refreshes(self, planner, activity, client):
        place(planner, activity["id"], 18, duration=60)
        session_id = planner.sessions[0]["id"]
        planner.click_slot(18)

        client.delete(f"/api/sessions/{session_id}")
        result = planner.delete()

        assert result.needs_refresh
        assert planner.surface.error == STALE_MESSAGE
        assert planner.sessions == []
        assert planner.grid.free_count() == 48

    def test_unknown_palette_activity(self, planner):
        with pytest.raises(ValidationError):
            planner.pick_up(999)


class TestLoading:
    def test_go_to_other_date(self, planner, activity):
        place(planner, activity["id"], 18)
        grid = planner.go_to("2024-01-02")
        assert grid.free_count() == 48
        assert planner.date == "2024-01-02"

    def test_scroll_target(self, planner, activity):
        assert planner.scroll_target(datetime(2024, 5, 1, 12, 0)) == 12
        place(planner, activity["id"], 18)
        assert planner.scroll_target(datetime(2024, 5, 1, 12, 0)) == 14
        assert planner.scroll_target(datetime(2024, 1, 1, 15, 0)) == 28

    def test_refresh_failure_keeps_previous_grid(self, planner, activity):
        place(planner, activity["id"], 18)
        with patch.object(planner.api, "list_sessions", side_effect=ApiUnavailableError("down")):
            assert planner.refresh() is False
        assert isinstance(planner.load_error, ApiUnavailableError)
        assert planner.grid.free_count() == 47

    def test_invalid_date(self, api):
        with pytest.raises(ValidationError):
            DayPlanner(api, "2024-13-01")


def test_conflicting_rows_after_commit_keep_previous_grid():
    def row(id, start, end, duration):
        return {"id": id, "activity_id": 1, "date": DATE, "start_time": start, "end_time": end, "duration_minutes": duration}

    api = MagicMock()
    api.list_sessions.return_value = []
    api.create_session.return_value = row(1, "09:00", "09:30", 30)
    planner = DayPlanner(api, DATE)
    planner.load()

    # Another writer bypassed the overlap check in the meantime
    api.list_sessions.return_value = [row(1, "09:00", "09:30", 30), row(2, "09:00", "10:00", 60)]
    planner.pick_up({"id": 1, "name": "Reading"})
    planner.drop(18)
    result = planner.submit()

    assert result.ok
    assert isinstance(planner.load_error, GridIntegrityError)
    assert planner.grid.free_count() == 48
    assert planner.sessions == []
