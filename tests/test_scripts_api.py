"""Tests for the script generation API endpoint."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.models.workflow import Completed, Failed, Rejected
from app.workflows.errors import AgentError, WorkflowTimeoutError
from stubs import StubAgents

ENDPOINT = "/api/process-instruction"


@pytest.fixture
def mock_orchestrator():
    """Mock orchestrator for API tests."""
    orchestrator = MagicMock()
    orchestrator.run = AsyncMock()
    return orchestrator


@pytest.mark.asyncio
class TestProcessInstructionAPI:
    """Test the process-instruction endpoint."""

    @pytest.fixture
    def client(self, test_settings):
        """Create test client."""
        app = create_app(test_settings)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    async def test_completed_run_returns_script(self, client, mock_orchestrator):
        """Test a completed run returns the script."""
        mock_orchestrator.run.return_value = Completed(script="print('hi')")

        with patch("app.routers.scripts.get_orchestrator", return_value=mock_orchestrator):
            response = await client.post(ENDPOINT, json={"instruction": "  Say hi  "})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"outcome": "completed", "output": "print('hi')"}
        mock_orchestrator.run.assert_awaited_once_with("Say hi")

    async def test_rejected_run_returns_message(self, client, mock_orchestrator):
        """Test a rejection is a normal 200 response."""
        mock_orchestrator.run.return_value = Rejected(
            message="Invalid requirements: Your input is either unclear or too complex."
        )

        with patch("app.routers.scripts.get_orchestrator", return_value=mock_orchestrator):
            response = await client.post(ENDPOINT, json={"instruction": "???"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["outcome"] == "rejected"
        assert data["output"].startswith("Invalid requirements")

    @pytest.mark.parametrize("body", [{"instruction": ""}, {"instruction": "   "}, {}])
    async def test_blank_instruction(self, client, mock_orchestrator, body):
        """Test missing or blank instructions are refused."""
        with patch("app.routers.scripts.get_orchestrator", return_value=mock_orchestrator):
            response = await client.post(ENDPOINT, json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No instruction provided."
        mock_orchestrator.run.assert_not_awaited()

    async def test_timeout_maps_to_gateway_timeout(self, client, mock_orchestrator):
        """Test deadline failures return 504."""
        mock_orchestrator.run.return_value = Failed.from_exception(WorkflowTimeoutError(30.0))

        with patch("app.routers.scripts.get_orchestrator", return_value=mock_orchestrator):
            response = await client.post(ENDPOINT, json={"instruction": "Say hi"})

        assert response.status_code == status.HTTP_504_GATEWAY_TIMEOUT
        assert "timed out" in response.json()["detail"]

    async def test_agent_failure_maps_to_server_error(self, client, mock_orchestrator):
        """Test run failures return 500 with a short description."""
        mock_orchestrator.run.return_value = Failed.from_exception(
            AgentError("generate_script failed: quota exceeded")
        )

        with patch("app.routers.scripts.get_orchestrator", return_value=mock_orchestrator):
            response = await client.post(ENDPOINT, json={"instruction": "Say hi"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == (
            "An error occurred while processing your request: "
            "generate_script failed: quota exceeded"
        )

    async def test_unexpected_exception(self, client, mock_orchestrator):
        """Test errors raised outside the run are reported as 500."""
        with patch(
            "app.routers.scripts.get_orchestrator",
            side_effect=ValueError("OpenAI API key not configured"),
        ):
            response = await client.post(ENDPOINT, json={"instruction": "Say hi"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "OpenAI API key not configured" in response.json()["detail"]

    async def test_full_run_with_stub_agents(self, client, make_orchestrator):
        """Test the endpoint against a real orchestrator."""
        orchestrator = make_orchestrator(
            StubAgents(verdicts=[False], script_fn=lambda req, n: f"# v{n}")
        )

        with patch("app.routers.scripts.get_orchestrator", return_value=orchestrator):
            response = await client.post(ENDPOINT, json={"instruction": "Say hi"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"outcome": "completed", "output": "# v2"}


@pytest.mark.unit
class TestGetOrchestrator:
    """Test lazy orchestrator construction."""

    def test_builds_once_from_settings(self, test_settings):
        """Test the orchestrator is created once with configured policy."""
        with patch("app.routers.scripts._orchestrator", None), patch(
            "app.routers.scripts.get_settings", return_value=test_settings
        ):
            from app.routers import scripts

            first = scripts.get_orchestrator()
            second = scripts.get_orchestrator()

            assert first is second
            assert first.timeout_seconds == test_settings.workflow_timeout_seconds
