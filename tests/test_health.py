"""Health endpoint validation for the script workflow service."""

from fastapi.testclient import TestClient

from app.main import create_app


def test_health_returns_service_status() -> None:
    """/health should surface the service identifier and LLM provider."""

    client = TestClient(create_app())
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == "script-workflow-agent"
    assert payload["status"] == "ok"
    assert payload["llm_provider"] in ("openai", "anthropic")
