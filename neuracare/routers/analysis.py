"""Burnout analysis endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from neuracare.exceptions import ConsentError, StorageError
from neuracare.logging_config import get_logger
from neuracare.schemas.analysis import AnalysisResponse, AnalyzeRequest
from neuracare.services.analysis import AnalysisOrchestrator, get_orchestrator

logger = get_logger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["Analysis"])


@router.post(
    "",
    response_model=AnalysisResponse,
    responses={
        400: {"description": "Invalid payload"},
        403: {"description": "Blocked by consent state"},
        500: {"description": "Storage failure"},
    },
)
async def analyze(
    body: AnalyzeRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> AnalysisResponse:
    """Score a reflection, enrich it when a provider answers, and store it."""
    try:
        return await orchestrator.analyze(body)
    except ConsentError as e:
        logger.info("Analysis refused", user_id=body.user_id, consent_state=e.state)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        ) from e
    except StorageError as e:
        logger.exception("Failed to analyze text", user_id=body.user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to process analysis request",
        ) from e
