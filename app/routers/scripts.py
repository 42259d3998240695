"""Script generation API endpoint."""

from typing import Optional

from fastapi import APIRouter, HTTPException, status
from loguru import logger

from ..agents import LLMScriptAgents
from ..config import get_settings
from ..models.workflow import (
    Completed,
    Failed,
    InstructionRequest,
    InstructionResponse,
    RunOutcome,
)
from ..workflows.orchestrator import WorkflowOrchestrator, create_orchestrator

router = APIRouter(prefix="/api", tags=["scripts"])

ERROR_PREFIX = "An error occurred while processing your request: "

# Global instance (initialized on first request)
_orchestrator: Optional[WorkflowOrchestrator] = None


def get_orchestrator() -> WorkflowOrchestrator:
    """Get or create the workflow orchestrator instance."""
    global _orchestrator

    if not _orchestrator:
        settings = get_settings()
        _orchestrator = create_orchestrator(LLMScriptAgents.from_settings(settings), settings)

    return _orchestrator


@router.post(
    "/process-instruction",
    response_model=InstructionResponse,
    summary="Generate a Python CLI script from requirements",
)
async def process_instruction(request: InstructionRequest) -> InstructionResponse:
    """
    Run the generate/evaluate/verify/revise workflow for one instruction.

    Outcomes:
    - completed: `output` holds the verified script
    - rejected: `output` holds the fixed rejection message
    - failures are reported as 504 (deadline exceeded) or 500
    """
    if not request.instruction:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No instruction provided.",
        )

    try:
        orchestrator = get_orchestrator()
        result = await orchestrator.run(request.instruction)
    except Exception as e:
        logger.error(f"Failed to process instruction: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{ERROR_PREFIX}{str(e)}",
        )

    if isinstance(result, Failed):
        raise HTTPException(
            status_code=(
                status.HTTP_504_GATEWAY_TIMEOUT
                if result.is_timeout
                else status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            detail=f"{ERROR_PREFIX}{result.error}",
        )

    if isinstance(result, Completed):
        return InstructionResponse(outcome=RunOutcome.COMPLETED, output=result.script)

    return InstructionResponse(outcome=RunOutcome.REJECTED, output=result.message)
