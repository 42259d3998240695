import pytest

from app.config import AgentSettings
from app.main import create_app


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    app = create_app(AgentSettings(openai_api_key=None, anthropic_api_key=None))
    return TestClient(app)


def test_health_endpoint(client):
    """Test health check endpoint returns OK."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "service" in data
    assert "llm_provider" in data


def test_readiness_endpoint(client):
    """Test readiness check reports a missing LLM key."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["workflow_ready"] is True
    assert data["llm_configured"] is False


def test_metrics_endpoint(client):
    """Test metrics endpoint."""
    response = client.get("/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["states"] == 7
    assert data["transitions"] == 7
    assert data["workflow_timeout_seconds"] == 30.0
