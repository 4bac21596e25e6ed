from unittest.mock import MagicMock

import pytest
import requests

from dayplanner.client.api_client import SchedulingApiClient
from dayplanner.errors import (
    ApiError, ApiUnavailableError, GridIntegrityError, InvalidReferenceError, NotFoundError,
    OverlapError, ReferentialGuardError, ValidationError,
)


def fake_response(status_code, body=None, reason="", json_error=False):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(http):
    return SchedulingApiClient(base_url="http://planner.test/", timeout=2.5, http=http)


class TestTransport:
    def test_every_call_is_bounded(self, api, http):
        http.request.return_value = fake_response(200, [])
        api.list_sessions(date="2024-01-01")
        http.request.assert_called_once_with(
            "GET", "http://planner.test/api/sessions", timeout=2.5, params={"date": "2024-01-01"}
        )

    def test_range_params(self, api, http):
        http.request.return_value = fake_response(200, [])
        api.list_sessions(start_date="2024-01-01", end_date="2024-01-07")
        assert http.request.call_args.kwargs["params"] == {"startDate": "2024-01-01", "endDate": "2024-01-07"}

    def test_timeout_is_unavailable(self, api, http):
        http.request.side_effect = requests.Timeout("slow")
        with pytest.raises(ApiUnavailableError) as exc:
            api.create_session({})
        assert exc.value.retryable

    def test_connection_error_is_unavailable(self, api, http):
        http.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ApiUnavailableError):
            api.health()

    def test_no_content(self, api, http):
        http.request.return_value = fake_response(204)
        assert api.delete_session(3) is None
        assert http.request.call_args.args == ("DELETE", "http://planner.test/api/sessions/3")


class TestErrorMapping:
    def test_overlap(self, api, http):
        http.request.return_value = fake_response(
            409, {"error": "session_overlap", "detail": "taken", "conflicting_ids": [4]}
        )
        with pytest.raises(OverlapError) as exc:
            api.create_session({})
        assert exc.value.extra["conflicting_ids"] == [4]

    def test_validation_with_field(self, api, http):
        http.request.return_value = fake_response(400, {"error": "validation_failed", "detail": "bad", "field": "date"})
        with pytest.raises(ValidationError) as exc:
            api.create_session({})
        assert exc.value.field == "date"

    def test_request_validation_list(self, api, http):
        errors = [{"loc": ["body", "start_time"], "msg": "bad"}]
        http.request.return_value = fake_response(400, {"error": "validation_failed", "detail": errors})
        with pytest.raises(ValidationError) as exc:
            api.create_session({})
        assert exc.value.extra["errors"] == errors

    def test_invalid_reference(self, api, http):
        http.request.return_value = fake_response(400, {"error": "invalid_reference", "detail": "no activity"})
        with pytest.raises(InvalidReferenceError):
            api.create_session({})

    def test_guard(self, api, http):
        http.request.return_value = fake_response(409, {"error": "has_dependents", "detail": "x", "dependent_count": 3})
        with pytest.raises(ReferentialGuardError) as exc:
            api.delete_session(1)
        assert exc.value.dependent_count == 3

    def test_not_found_without_code(self, api, http):
        http.request.return_value = fake_response(404, {"detail": "Not Found"})
        with pytest.raises(NotFoundError):
            api.get_session(1)

    def test_server_error_is_retryable(self, api, http):
        http.request.return_value = fake_response(502, json_error=True, reason="Bad Gateway")
        with pytest.raises(ApiUnavailableError) as exc:
            api.list_categories()
        assert exc.value.status_code == 502

    def test_grid_integrity_is_not_retryable(self, api, http):
        http.request.return_value = fake_response(500, {"error": "grid_integrity", "detail": "clash"})
        with pytest.raises(GridIntegrityError):
            api.get_day_grid("2024-01-01")

    def test_unexpected_status(self, api, http):
        http.request.return_value = fake_response(418, json_error=True, reason="I'm a teapot")
        with pytest.raises(ApiError) as exc:
            api.list_activities()
        assert not exc.value.retryable
        assert exc.value.status_code == 418
