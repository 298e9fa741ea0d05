"""Profile endpoints: save, read, export and delete."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from neuracare.database import AtomicDocumentStore, get_store
from neuracare.exceptions import StorageError
from neuracare.logging_config import get_logger
from neuracare.schemas.profile import (
    ProfileExportResponse,
    ProfileRequest,
    ProfileResponse,
)
from neuracare.services.profile import (
    delete_profile,
    export_profile,
    get_profile,
    upsert_profile,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])

_NOT_FOUND = "Profile not found"


def _storage_failure(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


@router.post("/profile", response_model=ProfileResponse)
async def save_profile(
    body: ProfileRequest,
    store: AtomicDocumentStore = Depends(get_store),
) -> ProfileResponse:
    """Create or update a profile.

    lastAnalysis, consent and retentionUntil are kept from the stored
    profile.
    """
    try:
        return await upsert_profile(store, body)
    except StorageError as e:
        logger.exception("Failed to upsert profile", user_id=body.user_id)
        raise _storage_failure("Unable to save profile") from e


@router.get("/profile/{user_id}", response_model=ProfileResponse)
async def read_profile(
    user_id: str,
    store: AtomicDocumentStore = Depends(get_store),
) -> ProfileResponse:
    """Get a profile by user ID."""
    try:
        profile = await get_profile(store, user_id)
    except StorageError as e:
        logger.exception("Failed to read profile", user_id=user_id)
        raise _storage_failure("Unable to read profile") from e

    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return profile


@router.get("/profile/{user_id}/export", response_model=ProfileExportResponse)
@router.get("/export/{user_id}", response_model=ProfileExportResponse)
async def export_user_data(
    user_id: str,
    store: AtomicDocumentStore = Depends(get_store),
) -> ProfileExportResponse:
    """Export a user's profile with their analyses and consent history."""
    try:
        bundle = await export_profile(store, user_id)
    except StorageError as e:
        logger.exception("Failed to export profile", user_id=user_id)
        raise _storage_failure("Unable to export profile") from e

    if bundle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return bundle


@router.delete(
    "/profile/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_profile(
    user_id: str,
    store: AtomicDocumentStore = Depends(get_store),
) -> Response:
    """Permanently delete a profile with its analyses and consents."""
    try:
        removed = await delete_profile(store, user_id)
    except StorageError as e:
        logger.exception("Failed to delete profile", user_id=user_id)
        raise _storage_failure("Unable to delete profile") from e

    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
