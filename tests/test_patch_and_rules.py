from dataclasses import replace

import pytest

from dayplanner.errors import ValidationError
from dayplanner.scheduling.constraints.session_rules import validate_session_fields, is_valid_date
from dayplanner.scheduling.utils.patch import SessionFields, SessionPatch, apply_patch, UNSET

BASE = SessionFields(activity_id=1, date="2024-01-01", start_time="09:00", end_time="10:00", duration_minutes=60, notes="focus")


class TestApplyPatch:
    def test_empty_patch_is_identity(self):
        assert apply_patch(BASE, SessionPatch()) == BASE
        assert SessionPatch().is_empty()

    def test_duration_only_recomputes_end(self):
        merged = apply_patch(BASE, SessionPatch(duration_minutes=90))
        assert merged.end_time == "10:30"
        assert merged.start_time == "09:00"
        assert merged.notes == "focus"

    def test_move_start_keeps_duration(self):
        merged = apply_patch(BASE, SessionPatch(start_time="14:00"))
        assert (merged.start_time, merged.end_time, merged.duration_minutes) == ("14:00", "15:00", 60)

    def test_end_only_recomputes_duration(self):
        merged = apply_patch(BASE, SessionPatch(end_time="11:00"))
        assert merged.duration_minutes == 120

    def test_explicit_end_and_duration_are_kept_as_given(self):
        merged = apply_patch(BASE, SessionPatch(end_time="11:00", duration_minutes=30))
        assert (merged.end_time, merged.duration_minutes) == ("11:00", 30)
        with pytest.raises(ValidationError):
            validate_session_fields(merged)

    def test_notes_none_clears(self):
        assert apply_patch(BASE, SessionPatch(notes=None)).notes is None
        assert SessionPatch(notes=None).provided() == {"notes": None}

    def test_move_across_dates(self):
        merged = apply_patch(BASE, SessionPatch(date="2024-01-02"))
        assert merged.date == "2024-01-02"
        assert merged.end_time == "10:00"

    def test_duration_past_midnight_is_a_validation_error(self):
        late = SessionFields(1, "2024-01-01", "23:00", "24:00", 60)
        with pytest.raises(ValidationError) as exc:
            apply_patch(late, SessionPatch(duration_minutes=90))
        assert exc.value.field == "duration_minutes"

    def test_existing_value_is_untouched(self):
        apply_patch(BASE, SessionPatch(duration_minutes=30))
        assert BASE.duration_minutes == 60

    def test_unset_is_falsy_and_distinct_from_none(self):
        assert not UNSET
        assert UNSET is not None

    @pytest.mark.parametrize("name", ["activity_id", "date", "start_time", "end_time", "duration_minutes"])
    def test_null_required_field_is_rejected(self, name):
        with pytest.raises(ValidationError) as exc:
            apply_patch(BASE, SessionPatch(**{name: None}))
        assert exc.value.field == name

    def test_bad_start_reports_start_time(self):
        with pytest.raises(ValidationError) as exc:
            apply_patch(BASE, SessionPatch(start_time="09:15"))
        assert exc.value.field == "start_time"

    def test_bad_end_reports_end_time(self):
        with pytest.raises(ValidationError) as exc:
            apply_patch(BASE, SessionPatch(end_time="10:45"))
        assert exc.value.field == "end_time"

    def test_bad_duration_reports_duration(self):
        with pytest.raises(ValidationError) as exc:
            apply_patch(BASE, SessionPatch(duration_minutes=45))
        assert exc.value.field == "duration_minutes"


class TestValidateSessionFields:
    def test_valid(self):
        validate_session_fields(BASE)
        validate_session_fields(SessionFields(1, "2024-01-01", "23:30", "24:00", 30))

    @pytest.mark.parametrize("changes,field", [
        ({"date": "2024-1-1"}, "date"),
        ({"date": "2024-02-30"}, "date"),
        ({"start_time": "09:15"}, "start_time"),
        ({"start_time": "24:00", "end_time": "24:00"}, "start_time"),
        ({"end_time": "10:10"}, "end_time"),
        ({"start_time": "10:00", "end_time": "09:00"}, "end_time"),
        ({"start_time": "10:00", "end_time": "10:00"}, "end_time"),
        ({"duration_minutes": 45}, "duration_minutes"),
        ({"duration_minutes": 30}, "duration_minutes"),
        ({"notes": "x" * 1001}, "notes"),
    ])
    def test_invalid(self, changes, field):
        with pytest.raises(ValidationError) as exc:
            validate_session_fields(replace(BASE, **changes))
        assert exc.value.field == field

    def test_notes_at_limit_are_fine(self):
        validate_session_fields(replace(BASE, notes="x" * 1000))


def test_is_valid_date():
    assert is_valid_date("2024-02-29")
    assert not is_valid_date("2023-02-29")
    assert not is_valid_date(None)
