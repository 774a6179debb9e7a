"""Tests for diet plan endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from diet_tracker.api.app import create_app
from tests.conftest import COMPLETE_PROFILE_BODY, register

_DAY = {
    "day": "Monday",
    "meals": {
        "breakfast": {"name": "Oats", "calories": 350, "protein": 12},
        "lunch": {"name": "Dal and rice", "calories": 600},
        "dinner": {"name": "Paneer tikka", "calories": 550},
        "snacks": [{"name": "Apple", "calories": 95}],
    },
}


def test_goals_require_complete_profile(container) -> None:
    client = TestClient(create_app(container))
    headers = register(client, age=30)

    response = client.post("/api/diet-plan/calculate-nutrition-goals", headers=headers)

    assert response.status_code == 400
    assert response.json() == {
        "message": "Please complete your profile first",
        "missingFields": ["weight", "height", "gender", "activity_level"],
    }


def test_goals_from_ai(container, text_client) -> None:
    client = TestClient(create_app(container))
    headers = register(client, **COMPLETE_PROFILE_BODY)
    text_client.responses.append(
        '{"calories": 2300, "protein": 120, "carbs": 280, "fat": 75}'
    )

    response = client.post("/api/diet-plan/calculate-nutrition-goals", headers=headers)

    assert response.status_code == 200
    assert response.json() == {
        "dailyNutritionGoals": {
            "calories": 2300,
            "protein": 120,
            "carbs": 280,
            "fat": 75,
        },
        "source": "ai",
    }
    profile = client.get("/api/auth/profile", headers=headers).json()
    assert profile["dailyNutritionGoals"]["calories"] == 2300


def test_generate_falls_back_to_meal_table(container) -> None:
    client = TestClient(create_app(container))
    headers = register(client, **COMPLETE_PROFILE_BODY)

    response = client.post("/api/diet-plan/generate", headers=headers)

    assert response.status_code == 201
    data = response.json()
    assert data["source"] == "fallback"
    assert data["title"] == "7-Day Balanced Diet Plan"
    assert [day["day"] for day in data["days"]][:2] == ["Monday", "Tuesday"]
    assert data["days"][0]["meals"]["breakfast"]["name"] == "Chia Pudding"
    assert len(data["days"]) == 7


def test_generate_requires_diet_preference(container) -> None:
    client = TestClient(create_app(container))
    body = dict(COMPLETE_PROFILE_BODY)
    body.pop("dietType")
    headers = register(client, **body)

    response = client.post("/api/diet-plan/generate", headers=headers)

    assert response.status_code == 400
    assert response.json()["missingFields"] == ["diet_type"]


def test_manual_plan_crud(container) -> None:
    client = TestClient(create_app(container))
    headers = register(client)

    created = client.post(
        "/api/diet-plan", json={"title": "", "days": [_DAY]}, headers=headers
    )
    assert created.status_code == 201
    plan = created.json()
    assert plan["title"] == "7-Day Diet Plan"
    assert plan["source"] == "user"
    assert plan["days"][0]["meals"]["breakfast"]["protein"] == 12

    updated = client.put(
        f"/api/diet-plan/{plan['id']}",
        json={"title": "Cutting week"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Cutting week"
    assert updated.json()["days"][0]["day"] == "Monday"

    listed = client.get("/api/diet-plan", headers=headers).json()
    assert [item["id"] for item in listed] == [plan["id"]]

    deleted = client.delete(f"/api/diet-plan/{plan['id']}", headers=headers)
    assert deleted.json() == {"message": "Diet plan removed"}
    missing = client.get(f"/api/diet-plan/{plan['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"message": "Diet plan not found"}


def test_plans_are_private(container) -> None:
    client = TestClient(create_app(container))
    owner = register(client, email="owner@example.com")
    other = register(client, email="other@example.com")
    plan = client.post("/api/diet-plan", json={"title": "Mine"}, headers=owner).json()

    response = client.get(f"/api/diet-plan/{plan['id']}", headers=other)
    delete = client.delete(f"/api/diet-plan/{plan['id']}", headers=other)

    assert response.status_code == 401
    assert delete.status_code == 401
    assert client.get("/api/diet-plan", headers=other).json() == []


def test_unknown_plan_id(container) -> None:
    client = TestClient(create_app(container))
    headers = register(client)

    assert client.get(f"/api/diet-plan/{uuid4()}", headers=headers).status_code == 404
    assert client.get("/api/diet-plan/not-a-uuid", headers=headers).status_code == 422
