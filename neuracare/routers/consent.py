"""Consent endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from neuracare.database import AtomicDocumentStore, get_store
from neuracare.exceptions import StorageError
from neuracare.logging_config import get_logger
from neuracare.schemas.consent import ConsentRequest, ConsentResponse
from neuracare.services.consent import record_consent

logger = get_logger(__name__)

router = APIRouter(prefix="/api/consent", tags=["Consent"])


@router.post(
    "",
    response_model=ConsentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_consent(
    body: ConsentRequest,
    store: AtomicDocumentStore = Depends(get_store),
) -> ConsentResponse:
    """Record a consent decision.

    Giving consent clears any retention hold; revoking it starts a hold
    during which analyses are refused.
    """
    try:
        record = await record_consent(store, body)
    except StorageError as e:
        logger.exception("Failed to record consent", user_id=body.user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save consent",
        ) from e

    return ConsentResponse.model_validate(record.model_dump())
