import pytest

from conftest import session_body


@pytest.fixture
def populated(client, category, activity):
    health = client.post("/api/categories", json={"name": "Health", "color": "#10b981"}).json()
    run = client.post("/api/activities", json={"name": "Run", "category_id": health["id"]}).json()

    client.post("/api/sessions", json=session_body(activity["id"], start_time="09:00", end_time="11:00", duration_minutes=120))
    client.post("/api/sessions", json=session_body(run["id"], start_time="07:00", end_time="07:30", duration_minutes=30))
    client.post("/api/sessions", json=session_body(run["id"], date="2024-01-02", start_time="07:00", end_time="08:00", duration_minutes=60))
    client.post("/api/sessions", json=session_body(activity["id"], date="2024-02-01"))
    return {"work": activity, "run": run}


class TestAnalytics:
    def test_activity_hours(self, client, populated):
        rows = client.get("/api/analytics/activity-hours").json()
        assert [r["activity_name"] for r in rows] == ["Deep work", "Run"]
        assert rows[0]["total_minutes"] == 180
        assert rows[0]["total_hours"] == 3.0
        assert rows[1]["total_hours"] == 1.5
        assert rows[1]["session_count"] == 2

    def test_category_hours_in_range(self, client, populated):
        rows = client.get("/api/analytics/category-hours", params={"startDate": "2024-01-01", "endDate": "2024-01-31"}).json()
        assert [(r["category_name"], r["total_minutes"]) for r in rows] == [("Work", 120), ("Health", 90)]

    def test_daily_stats(self, client, populated):
        rows = client.get("/api/analytics/daily-stats").json()
        assert [(r["date"], r["session_count"], r["total_minutes"]) for r in rows] == [
            ("2024-01-01", 2, 150),
            ("2024-01-02", 1, 60),
            ("2024-02-01", 1, 60),
        ]

    def test_summary(self, client, populated):
        body = client.get("/api/analytics/summary").json()
        assert body["total_sessions"] == 4
        assert body["total_minutes"] == 270
        assert body["total_hours"] == 4.5
        assert body["days_with_sessions"] == 3
        assert body["avg_hours_per_day"] == 1.5
        assert body["avg_hours_per_session"] == pytest.approx(1.12, abs=0.01)
        assert body["most_used_activity"]["session_count"] == 2
        assert body["most_used_activity"]["activity_name"] == "Deep work"
        assert body["most_used_category"]["category_name"] == "Health"

    def test_empty_summary(self, client):
        body = client.get("/api/analytics/summary").json()
        assert body["total_sessions"] == 0
        assert body["total_hours"] == 0
        assert body["most_used_activity"] is None

    def test_bad_range(self, client):
        assert client.get("/api/analytics/summary", params={"startDate": "01/01/2024"}).status_code == 400
