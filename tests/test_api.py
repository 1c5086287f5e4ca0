from __future__ import annotations

from datetime import UTC, datetime

from fastapi.testclient import TestClient


def _ts(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    return int(datetime(year, month, day, hour, minute, tzinfo=UTC).timestamp())


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["window_hours"] == 48
    assert payload["twilight"] == "official"
    assert payload["twilight_angles"]["civil"] == -6.0


def test_sun_endpoint_london(api_client: TestClient) -> None:
    query = _ts(2024, 6, 21, 12)
    response = api_client.get(
        "/sun", params={"lat": 51.5074, "lon": -0.1278, "timestamp": query}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["query_time"] == query
    assert payload["query_utc"] == "2024-06-21T12:00:00Z"
    assert payload["has_rise"] is True and payload["has_set"] is True
    assert payload["is_visible"] is True
    assert payload["rise_utc"].startswith("2024-06-21T03:")
    assert payload["set_utc"].startswith("2024-06-21T20:")
    assert payload["rise_time"] < query < payload["set_time"]
    assert 40.0 < payload["rise_az"] < 60.0
    assert payload["window_hours"] == 48


def test_sun_endpoint_polar_night(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 78.2232, "lon": 15.6469, "timestamp": _ts(2024, 12, 21, 12)},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["has_rise"] is False and payload["has_set"] is False
    assert payload["is_visible"] is False
    for key in ("rise_time", "set_time", "rise_utc", "set_utc", "rise_az", "set_az"):
        assert payload[key] is None


def test_sun_endpoint_custom_window_and_twilight(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={
            "lat": 51.5074,
            "lon": -0.1278,
            "timestamp": _ts(2024, 6, 21, 12),
            "twilight": "civil",
            "window_hours": 24,
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["twilight"] == "civil"
    assert payload["window_hours"] == 24
    assert payload["has_rise"] is True


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={
            "lat": 95,  # invalid latitude
            "lon": 0,
            "timestamp": _ts(2024, 6, 21),
        },
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_odd_window_rejected(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 0, "lon": 0, "timestamp": _ts(2024, 6, 21), "window_hours": 25},
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert "even" in payload["error"]
