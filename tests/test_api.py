from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from cookmate.api import create_app
from cookmate.utils.database import load_preferences

PAYLOAD = {
    "userId": "user-42",
    "name": "John Doe",
    "age": 30,
    "gender": "Male",
    "dietaryPreference": "Vegetarian",
    "spicinessLevel": 6,
    "cuisinePreferences": "North Indian,South Indian,",
    "ingredientDislikes": "mushrooms, bell peppers",
    "cookName": "Chef Maria",
    "cookWhatsApp": "+1234567890",
    "preferredLanguage": "Kannada",
    "userWhatsApp": "+0987654321",
    "mealsPerDay": 3,
    "breakfast": True,
    "lunch": True,
    "dinner": False,
}


class FakeProcessor:
    def __init__(self, result=None):
        self.result = result or {"success": True, "data": {}, "user_info": {}}
        self.calls = []

    async def generate_meal_suggestions(self, preferences, selected_meals=None):
        self.calls.append((preferences, selected_meals))
        return self.result


@pytest.fixture
def config(tmp_path):
    return {"database_path": str(tmp_path / "api.db"), "request_timeout_seconds": 5}


@pytest.fixture
def processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture
def client(config, processor) -> Iterator[TestClient]:
    with TestClient(create_app(config, processor=processor)) as test_client:
        yield test_client


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "CookMate" in response.text


def test_health(client):
    body = client.get("/generate/health").json()
    assert body["success"] is True
    assert body["version"] == "1.0.0"


def test_submit_preferences_persists(client, config):
    response = client.post("/submit-preferences", json=PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User Preferences Registered"
    stored = load_preferences(body["id"], config["database_path"])
    assert stored.user_id == "user-42"
    assert stored.cook_whatsapp == "+1234567890"
    assert stored.cuisine_preferences == ["North Indian", "South Indian"]


def test_submit_preferences_rejects_incomplete(client):
    response = client.post("/submit-preferences", json={"name": "Only Name"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_suggestions_pass_selected_meals(client, processor):
    response = client.post("/generate/suggestions", json=PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Meal suggestions generated successfully"
    preferences, meals = processor.calls[0]
    assert meals == ["breakfast", "lunch"]
    assert preferences.preferred_language == "Kannada"


def test_suggestions_require_a_meal(client):
    payload = {**PAYLOAD, "breakfast": False, "lunch": False}

    response = client.post("/generate/suggestions", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "NO_MEALS_SELECTED"


def test_suggestions_reject_bad_spiciness(client):
    response = client.post("/generate/suggestions", json={**PAYLOAD, "spicinessLevel": 12})

    assert response.status_code == 400
    assert "Spiciness" in response.json()["error"]


def test_generation_failure_maps_to_500(config):
    failing = FakeProcessor({"success": False, "error": "model exploded", "data": None})
    with TestClient(create_app(config, processor=failing)) as client:
        response = client.post("/generate/suggestions", json=PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "model exploded", "code": "GENERATION_ERROR"}


def test_missing_gemini_key_is_a_configuration_error(config):
    with TestClient(create_app({**config, "gemini_api_key": None})) as client:
        response = client.post("/generate/suggestions", json=PAYLOAD)

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIGURATION_ERROR"


def test_validate_user(client):
    response = client.post("/generate/validate-user", json={"userData": PAYLOAD})

    assert response.status_code == 200
    assert response.json()["data"]["selected_meals"] == ["breakfast", "lunch"]


def test_validate_user_requires_data(client):
    response = client.post("/generate/validate-user", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "User data is required"


def test_validate_user_rejects_mistyped_fields(client):
    response = client.post("/generate/validate-user", json={"userData": {"name": "A", "age": "old"}})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "age" in body["error"]
