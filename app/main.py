"""FastAPI entry point for the script workflow service."""

from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import AgentSettings, get_settings
from .models.workflow import WorkflowState
from .routers import scripts
from .workflows.transitions import TRANSITION_TABLE


def create_app(settings: Optional[AgentSettings] = None) -> FastAPI:
    """Create a FastAPI application serving the script generation workflow."""

    resolved_settings = settings or get_settings()

    app = FastAPI(title=resolved_settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scripts.router)

    @app.get("/health", tags=["health"])
    def health_check() -> Dict[str, Optional[str]]:
        """Report service status and the configured LLM provider."""

        return {
            "status": "ok",
            "service": resolved_settings.app_name,
            "llm_provider": resolved_settings.llm_provider,
        }

    @app.get("/ready", tags=["health"])
    def readiness_check() -> Dict[str, object]:
        """Readiness check endpoint for Kubernetes."""

        api_key = (
            resolved_settings.openai_api_key
            if resolved_settings.llm_provider == "openai"
            else resolved_settings.anthropic_api_key
        )
        return {
            "status": "ready",
            "service": resolved_settings.app_name,
            "workflow_ready": True,
            "llm_configured": bool(api_key),
        }

    @app.get("/metrics", tags=["monitoring"])
    def metrics() -> Dict[str, object]:
        """Basic metrics endpoint."""

        return {
            "service": resolved_settings.app_name,
            "version": "0.1.0",
            "workflow_timeout_seconds": resolved_settings.workflow_timeout_seconds,
            "states": len(WorkflowState),
            "transitions": len(TRANSITION_TABLE.transitions),
        }

    return app


app = create_app()
