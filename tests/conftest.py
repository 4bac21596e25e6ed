"""Shared fixtures: an isolated in-memory database and API per test."""

import pytest
from fastapi.testclient import TestClient

from dayplanner.client.api_client import SchedulingApiClient
from dayplanner.main import create_app


@pytest.fixture
def app():
    return create_app("sqlite://", seed=False)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def category(client):
    response = client.post("/api/categories", json={"name": "Work", "color": "#3b82f6"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def activity(client, category):
    response = client.post(
        "/api/activities",
        json={"name": "Deep work", "description": "No meetings", "category_id": category["id"]},
    )
    assert response.status_code == 201
    return response.json()


def session_body(activity_id, date="2024-01-01", start_time="09:00", end_time="10:00", duration_minutes=60, **extra):
    body = {
        "activity_id": activity_id,
        "date": date,
        "start_time": start_time,
        "end_time": end_time,
        "duration_minutes": duration_minutes,
    }
    body.update(extra)
    return body


class InProcessApiClient(SchedulingApiClient):
    """SchedulingApiClient that talks to a TestClient instead of the network."""

    def __init__(self, test_client):
        super().__init__(base_url="")
        self.test_client = test_client

    def _request(self, method, path, **kwargs):
        response = self.test_client.request(method, path, **kwargs)
        if response.status_code == 204:
            return None
        if response.is_success:
            return response.json()
        raise self._error_from(response)


@pytest.fixture
def api(client):
    return InProcessApiClient(client)
