"""Health check endpoints."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from neuracare.database import AtomicDocumentStore, get_store

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get("")
async def health_check() -> dict[str, Any]:
    """Liveness check. Does not touch the store."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@router.get("/ready", response_model=None)
async def readiness_probe(
    store: AtomicDocumentStore = Depends(get_store),
) -> Response:
    """Readiness check: the document store must be readable.

    Returns 503 when the store file is unreadable or corrupt.
    """
    if await store.check_health():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "ready", "storage": "available"},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "storage": "unavailable"},
    )
