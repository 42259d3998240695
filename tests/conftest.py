"""Local test configuration for the script workflow service."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# -- Path management ------------------------------------------------------
# The service uses a classic ``app/`` package layout instead of the ``src/``
# layout that editable installs automatically expose on ``sys.path``. Adding
# the service root as the very first entry keeps ``import app`` working when
# pytest runs from a clean checkout. The tests directory itself holds shared
# stubs imported as a plain module.
SERVICE_ROOT = Path(__file__).resolve().parent.parent
TESTS_ROOT = Path(__file__).resolve().parent
for path in (TESTS_ROOT, SERVICE_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from app.config import AgentSettings
from app.main import create_app
from app.workflows.engine import StateMachineFactory
from app.workflows.handlers import StepHandlers
from app.workflows.orchestrator import WorkflowOrchestrator
from app.workflows.transitions import TRANSITION_TABLE
from stubs import StubAgents


@pytest.fixture
def test_settings():
    """Provide test-specific settings."""
    return AgentSettings(
        app_name="script-workflow-agent-test",
        cors_origins=["http://localhost:3000", "http://localhost:8000"],
        openai_api_key="test-openai-key",
        anthropic_api_key="test-anthropic-key",
        workflow_timeout_seconds=2.0,
    )


@pytest.fixture
def app(test_settings):
    """Create FastAPI app with test settings."""
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Provide TestClient for the service."""
    return TestClient(app)


@pytest.fixture
def stub_agents() -> StubAgents:
    """Agents that accept everything on the first try."""
    return StubAgents()


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator around the given agents with a short deadline."""

    def _make(agents, timeout_seconds: float = 2.0) -> WorkflowOrchestrator:
        factory = StateMachineFactory(TRANSITION_TABLE, StepHandlers(agents).bindings())
        return WorkflowOrchestrator(factory, timeout_seconds=timeout_seconds)

    return _make
