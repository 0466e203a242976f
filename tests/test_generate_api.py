import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from tripgen.main import app
from tripgen.models.outcomes import Success, FatalFailure
from tripgen.services.itinerary_service import ItineraryService, get_itinerary_service
from tripgen.services.llm_service import GeminiModelClient, get_model_client

from fake_gemini import FakeGenaiClient, ScriptedModelClient


@pytest.fixture
def client():
    app.dependency_overrides[get_itinerary_service] = lambda: ItineraryService(
        candidate_models=["gemini-2.0-flash"], mock_delay_ms=0
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_generate_mock_without_key(client):
    response = client.post("/api/v1/generate", json={"promptText": "Beach vacation in Bali"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["metadata"]["source"] == "mock"
    assert "modelIdentifier" not in body["metadata"]
    assert json.loads(body["itineraryRawText"])["destination"] == "Bali, Indonesia"


def test_generate_accepts_legacy_prompt_field(client):
    response = client.post("/api/v1/generate", json={"prompt": "Kyoto in autumn"})
    assert response.status_code == 200
    assert json.loads(response.json()["itineraryRawText"])["destination"] == "Kyoto, Japan"


def test_generate_rejects_short_prompt(client):
    response = client.post("/api/v1/generate", json={"promptText": " a "})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errorMessage"] == "prompt too short"
    assert "elapsedMillis" in body


def test_generate_rejects_missing_prompt(client):
    response = client.post("/api/v1/generate", json={})
    assert response.status_code == 400


def test_generate_internal_fault_is_500(client):
    def broken(prompt):
        raise RuntimeError("boom")

    app.dependency_overrides[get_itinerary_service] = lambda: ItineraryService(mock_delay_ms=0, mock_generator=broken)
    response = client.post("/api/v1/generate", json={"promptText": "3 days in Tokyo"})
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "errorMessage": "Failed to generate itinerary",
        "elapsedMillis": response.json()["elapsedMillis"],
    }


def test_generate_live_result(client):
    scripted = ScriptedModelClient({
        "gemini-2.0-flash": FatalFailure("API key not valid"),
    })
    app.dependency_overrides[get_itinerary_service] = lambda: ItineraryService(
        model_client=scripted, candidate_models=["gemini-2.0-flash"], mock_delay_ms=0
    )
    response = client.post("/api/v1/generate", json={"promptText": "3 days in Tokyo"})
    assert response.json()["metadata"]["source"] == "mock"

    scripted.outcomes["gemini-2.0-flash"] = Success('{"destination": "Tokyo"}')
    response = client.post("/api/v1/generate", json={"promptText": "3 days in Tokyo"})
    body = response.json()
    assert body["metadata"]["source"] == "live"
    assert body["metadata"]["modelIdentifier"] == "gemini-2.0-flash"
    assert body["metadata"]["structured"] is False


def test_models_without_key(client):
    app.dependency_overrides[get_model_client] = lambda: None
    response = client.get("/api/v1/models")
    assert response.status_code == 200
    body = response.json()
    assert body["error"] == "API key not configured"
    assert "gemini-2.0-flash" in body["availableModels"]


def test_models_with_key(client):
    listed = [SimpleNamespace(name="models/gemini-2.5-pro", display_name="Gemini 2.5 Pro",
                              description="Pro", supported_actions=["generateContent"])]
    app.dependency_overrides[get_model_client] = lambda: GeminiModelClient(
        api_key="test-key", client=FakeGenaiClient(listed=listed)
    )
    response = client.get("/api/v1/models")
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["allModels"] == ["models/gemini-2.5-pro"]
    assert response.json()["generateContentModels"][0]["name"] == "models/gemini-2.5-pro"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert isinstance(body["apiKeyConfigured"], bool)
    assert body["availableModels"]


@pytest.mark.parametrize("body", [{"prompt": None}, {"promptText": None}])
def test_generate_null_prompt_is_invalid_input(client, body):
    response = client.post("/api/v1/generate", json=body)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errorMessage"] == "prompt too short"
    assert isinstance(body["elapsedMillis"], int)
