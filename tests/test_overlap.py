import pytest

from dayplanner.scheduling.constraints.overlap import has_overlap, find_conflicts, intervals_overlap


def s(id, start, end, date="2024-01-01"):
    return {"id": id, "date": date, "start_time": start, "end_time": end}


class TestIntervalsOverlap:
    def test_back_to_back_does_not_overlap(self):
        assert not intervals_overlap("09:00", "10:00", "10:00", "11:00")
        assert not intervals_overlap("10:00", "11:00", "09:00", "10:00")

    def test_partial_overlap(self):
        assert intervals_overlap("09:00", "10:00", "09:30", "10:30")

    def test_full_containment(self):
        assert intervals_overlap("09:00", "11:00", "09:30", "10:30")
        assert intervals_overlap("09:30", "10:30", "09:00", "11:00")

    @pytest.mark.parametrize("a,b", [
        (("09:00", "10:00"), ("09:30", "10:30")),
        (("09:00", "10:00"), ("10:00", "11:00")),
        (("08:00", "12:00"), ("09:00", "09:30")),
        (("23:00", "24:00"), ("23:30", "24:00")),
    ])
    def test_symmetric(self, a, b):
        assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)


class TestHasOverlap:
    def test_identical_interval_overlaps_itself(self):
        existing = [s(1, "09:00", "10:00")]
        assert has_overlap(existing, s(None, "09:00", "10:00"))

    def test_excluding_self_allows_editing_own_duration(self):
        existing = [s(1, "09:00", "10:00")]
        assert not has_overlap(existing, s(1, "09:00", "10:00"), exclude_id=1)
        assert not has_overlap(existing, s(1, "09:00", "09:30"), exclude_id=1)

    def test_excluded_session_does_not_hide_others(self):
        existing = [s(1, "09:00", "10:00"), s(2, "10:00", "11:00")]
        assert has_overlap(existing, s(1, "09:00", "10:30"), exclude_id=1)

    def test_other_dates_are_ignored(self):
        existing = [s(1, "09:00", "10:00", date="2024-01-02")]
        assert not has_overlap(existing, s(None, "09:00", "10:00"))

    def test_empty_day(self):
        assert not has_overlap([], s(None, "00:00", "24:00"))

    def test_find_conflicts_returns_every_hit(self):
        existing = [s(1, "08:00", "09:00"), s(2, "09:30", "10:00"), s(3, "11:00", "12:00")]
        conflicts = find_conflicts(existing, s(None, "08:30", "11:30"))
        assert [c["id"] for c in conflicts] == [1, 2, 3]

    def test_works_with_objects(self):
        class Row:
            def __init__(self, id, start_time, end_time):
                self.id = id
                self.date = "2024-01-01"
                self.start_time = start_time
                self.end_time = end_time

        assert has_overlap([Row(1, "09:00", "10:00")], Row(None, "09:30", "10:30"))
