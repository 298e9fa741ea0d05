"""AI provider status endpoint."""

from fastapi import APIRouter, Depends

from neuracare.schemas.ai_response import ProviderStatsResponse
from neuracare.services.ai_failover import ProviderFailoverClient, get_failover_client

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.get("/providers", response_model=ProviderStatsResponse)
async def get_provider_stats(
    failover: ProviderFailoverClient = Depends(get_failover_client),
) -> ProviderStatsResponse:
    """Rotation state of the AI failover client.

    Counters reset when the process restarts.
    """
    return failover.get_provider_stats()
