"""Tests for the HTTP API."""

from datetime import date
from uuid import uuid4

from fastapi.testclient import TestClient

from wellness_engine.api.app import create_app, start_of_week
from wellness_engine.containers import AppContainer


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _save_profile(client: TestClient, user_id: str) -> dict[str, object]:
    response = client.put(
        f"/users/{user_id}/profile",
        json={
            "age": 30,
            "sex": "male",
            "height": 177.8,
            "height_unit": "cm",
            "weight": 180,
            "activity_level": "moderate",
        },
    )
    assert response.status_code == 200
    return response.json()


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_weight_log_lifecycle(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    created = client.post(
        f"/users/{user_id}/weights",
        json={"weight": 80, "unit": "kg", "logged_at": "2024-06-01T08:00:00+00:00"},
    )
    client.post(
        f"/users/{user_id}/weights",
        json={"weight": 78, "unit": "kg", "logged_at": "2024-06-15T08:00:00+00:00"},
    )

    assert created.status_code == 201
    latest = client.get(f"/users/{user_id}/weights/latest").json()["latest"]
    assert latest["weight"] == 78
    logs = client.get(f"/users/{user_id}/weights").json()["logs"]
    assert [log["weight"] for log in logs] == [78, 80]

    change = client.get(
        f"/users/{user_id}/weights/change", params={"unit": "lbs"}
    ).json()["change"]
    assert abs(change["change"] - (-2 * 2.20462)) < 0.01
    assert change["days"] == 14

    log_id = created.json()["id"]
    patched = client.patch(f"/users/{user_id}/weights/{log_id}", json={"weight": 81})
    assert patched.json()["weight"] == 81
    assert client.delete(f"/users/{user_id}/weights/{log_id}").status_code == 200
    assert client.delete(f"/users/{user_id}/weights/{log_id}").status_code == 404


def test_patch_weight_can_clear_notes(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())
    created = client.post(
        f"/users/{user_id}/weights", json={"weight": 180, "notes": "after dinner"}
    ).json()

    kept = client.patch(
        f"/users/{user_id}/weights/{created['id']}", json={"weight": 179}
    ).json()
    cleared = client.patch(
        f"/users/{user_id}/weights/{created['id']}", json={"notes": None}
    ).json()

    assert kept["notes"] == "after dinner"
    assert cleared["notes"] is None
    assert cleared["weight"] == 179


def test_weight_log_validation(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    zero = client.post(f"/users/{user_id}/weights", json={"weight": 0})
    stone = client.post(f"/users/{user_id}/weights", json={"weight": 9, "unit": "st"})

    assert zero.status_code == 422
    assert stone.status_code == 422


def test_unknown_unit_with_data_is_bad_request(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())
    client.post(f"/users/{user_id}/weights", json={"weight": 180})
    client.post(f"/users/{user_id}/weights", json={"weight": 178})

    response = client.get(f"/users/{user_id}/weights/change", params={"unit": "stone"})

    assert response.status_code == 400
    assert "stone" in response.json()["detail"]


def test_goal_endpoints(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    assert client.get(f"/users/{user_id}/goals/progress").json() == {"progress": None}

    client.post(
        f"/users/{user_id}/goals",
        json={"goal_type": "bulking", "current_weight": 150, "target_weight": 160},
    )
    created = client.post(
        f"/users/{user_id}/goals",
        json={"goal_type": "cutting", "current_weight": 200, "target_weight": 180},
    )
    client.post(f"/users/{user_id}/weights", json={"weight": 190})

    assert created.status_code == 201
    assert created.json()["label"] == "Cutting"
    goals = client.get(f"/users/{user_id}/goals").json()["goals"]
    assert sum(goal["is_active"] for goal in goals) == 1
    active = client.get(f"/users/{user_id}/goals/active").json()["goal"]
    assert active["goal_type"] == "cutting"
    progress = client.get(f"/users/{user_id}/goals/progress").json()["progress"]
    assert progress["percent_complete"] == 50


def test_goal_prediction_endpoint(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    assert client.get(f"/users/{user_id}/goals/prediction").json() == {
        "prediction": None
    }

    client.post(
        f"/users/{user_id}/goals",
        json={
            "goal_type": "cutting",
            "current_weight": 200,
            "target_weight": 180,
            "weekly_goal": -1.0,
        },
    )
    client.post(f"/users/{user_id}/weights", json={"weight": 190})

    prediction = client.get(f"/users/{user_id}/goals/prediction").json()["prediction"]
    assert prediction["estimated_days"] == 70
    assert prediction["weekly_rate_lbs"] == 0
    assert prediction["on_pace"] is False


def test_calories_require_profile(container: AppContainer) -> None:
    response = _client(container).get(f"/users/{uuid4()}/calories/today")

    assert response.status_code == 409


def test_calorie_endpoints(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    saved = _save_profile(client, user_id)
    assert saved["base_target"]["daily_target"] == 2763

    today = client.get(f"/users/{user_id}/calories/today").json()
    assert today["target_calories"] == 2763
    assert today["consumed_calories"] == 0

    meal = client.post(f"/users/{user_id}/calories/meals", json={"calories": 3000})
    assert meal.status_code == 200
    assert meal.json()["remaining_calories"] == -237

    week = client.get(f"/users/{user_id}/calories/week").json()
    assert week["days_tracked"] == 1
    assert week["total_consumed"] == 3000

    rejected = client.post(f"/users/{user_id}/calories/meals", json={"calories": -5})
    assert rejected.status_code == 422


def test_macros_endpoint(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())

    assert client.get(f"/users/{user_id}/calories/macros").status_code == 409

    _save_profile(client, user_id)
    macros = client.get(f"/users/{user_id}/calories/macros").json()

    assert macros == {"protein_g": 144, "carbs_g": 340, "fat_g": 92}


def test_unknown_timezone_is_rejected(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())
    _save_profile(client, user_id)

    response = client.get(
        f"/users/{user_id}/calories/today", params={"timezone": "Mars/Olympus"}
    )

    assert response.status_code == 400


def test_event_and_balance_endpoints(container: AppContainer) -> None:
    client = _client(container)
    user_id = str(uuid4())
    week_start = "2024-06-02"
    for day, impact in (("2024-06-02", "rest"), ("2024-06-03", "active")):
        created = client.post(
            f"/users/{user_id}/events",
            json={"title": impact, "event_date": day, "balance_impact_type": impact},
        )
        assert created.status_code == 201

    events = client.get(
        f"/users/{user_id}/events",
        params={"start": week_start, "end": "2024-06-08"},
    ).json()["events"]
    balance = client.get(
        f"/users/{user_id}/balance", params={"week_start": week_start}
    ).json()

    assert len(events) == 2
    assert balance["rest_days"] == 1
    assert balance["active_days"] == 1
    assert balance["planned_days"] == 2
    assert balance["is_balanced"] is False

    event_id = events[0]["id"]
    assert client.delete(f"/users/{user_id}/events/{event_id}").status_code == 200
    assert client.delete(f"/users/{user_id}/events/{event_id}").status_code == 404


def test_start_of_week_is_sunday() -> None:
    assert start_of_week(date(2024, 6, 2)) == date(2024, 6, 2)
    assert start_of_week(date(2024, 6, 5)) == date(2024, 6, 2)
    assert start_of_week(date(2024, 6, 8)) == date(2024, 6, 2)
