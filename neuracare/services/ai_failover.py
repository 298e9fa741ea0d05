"""Multi-provider failover for AI insights.

Tries providers in rotation order, one attempt each per request, and
falls back to a canned message when every provider fails. The rotation
cursor stays on the last provider that worked (sticky) and moves past
each provider that fails.
"""

import asyncio
import random
from collections.abc import Sequence
from typing import Optional

from neuracare.config import settings
from neuracare.exceptions import ProviderError
from neuracare.logging_config import get_logger
from neuracare.schemas.ai_response import (
    InsightContext,
    InsightResult,
    ProviderStatsResponse,
)
from neuracare.services.ai_client import BaseAIClient, build_ai_clients

logger = get_logger(__name__)

FALLBACK_PROVIDER = "fallback"

FALLBACK_RESPONSES: tuple[str, ...] = (
    "Thank you for sharing your thoughts. While our AI assistants are temporarily "
    "unavailable, remember that your mental wellness journey is important. Consider "
    "taking a few deep breaths, practicing mindfulness, or reaching out to a trusted "
    "friend or mental health professional.",
    "I appreciate you taking time for self-reflection. Although our AI analysis is "
    "currently offline, this moment of introspection itself is valuable. Try some "
    "gentle movement, journaling, or a brief meditation to support your wellbeing "
    "right now.",
    "Your willingness to engage with your mental health is commendable. While our AI "
    "insights are temporarily unavailable, consider what emotions you're experiencing "
    "right now and practice self-compassion. Small acts of self-care can make a "
    "meaningful difference.",
)


class ProviderFailoverClient:
    """Rotating, failure-tolerant front for a fixed list of providers.

    State is per instance: the provider order, the rotation cursor,
    consecutive-failure counters and the last provider that succeeded.
    """

    def __init__(
        self,
        clients: Sequence[BaseAIClient],
        rng: random.Random | None = None,
    ) -> None:
        self._clients = list(clients)
        self._rng = rng or random.Random()
        self._cursor = 0
        self.failure_counts: dict[str, int] = {c.name: 0 for c in self._clients}
        self.last_successful_provider: str | None = None

    @property
    def providers(self) -> list[str]:
        return [c.name for c in self._clients]

    @property
    def current_provider(self) -> str | None:
        if not self._clients:
            return None
        return self._clients[self._cursor].name

    @property
    def chain_timeout(self) -> float | None:
        """Worst case for one generate_insight call, None without providers.

        Every provider may be tried once, each up to the slowest timeout.
        """
        if not self._clients:
            return None
        return len(self._clients) * max(c.timeout for c in self._clients)

    async def generate_insight(
        self, prompt: str, context: InsightContext | None = None
    ) -> InsightResult:
        """Get an insight from the first provider that answers.

        Each provider is tried at most once, starting at the cursor and
        bounded by its own timeout. Provider failures never raise: when
        all providers fail the result carries a fallback message with
        ``success=False``. Cancellation propagates after the in-flight
        provider is counted as failed.
        """
        context = context or InsightContext()
        count = len(self._clients)
        start = self._cursor
        errors: list[str] = []

        for offset in range(count):
            index = (start + offset) % count
            client = self._clients[index]
            logger.info("Attempting AI provider", provider=client.name)

            try:
                response = await asyncio.wait_for(
                    client.generate(prompt, context), timeout=client.timeout
                )
                if not response.content.strip():
                    raise ProviderError(client.name, "empty content")
            except asyncio.CancelledError:
                # Outer deadline hit mid-call: move past this provider.
                self._on_failure(index, "cancelled")
                raise
            except TimeoutError:
                errors.append(f"{client.name}: timed out after {client.timeout}s")
                self._on_failure(index, "timeout")
                continue
            except Exception as e:
                errors.append(f"{client.name}: {e}")
                self._on_failure(index, str(e))
                continue

            self._on_success(index)
            return InsightResult(
                content=response.content,
                provider=client.name,
                success=True,
            )

        logger.warning(
            "All AI providers failed, using fallback",
            attempted=count,
            errors=errors,
        )
        return InsightResult(
            content=self._rng.choice(FALLBACK_RESPONSES),
            provider=FALLBACK_PROVIDER,
            success=False,
            error="All AI providers are currently unavailable",
        )

    def get_provider_stats(self) -> ProviderStatsResponse:
        return ProviderStatsResponse(
            current_provider=self.current_provider,
            last_successful=self.last_successful_provider,
            failure_counts=dict(self.failure_counts),
            available_providers=self.providers,
        )

    def _on_success(self, index: int) -> None:
        name = self._clients[index].name
        self._cursor = index
        self.failure_counts[name] = 0
        self.last_successful_provider = name
        logger.info("AI provider call succeeded", provider=name)

    def _on_failure(self, index: int, error: str) -> None:
        name = self._clients[index].name
        self.failure_counts[name] = self.failure_counts.get(name, 0) + 1
        self._cursor = (index + 1) % len(self._clients)
        logger.warning(
            "AI provider call failed",
            provider=name,
            failure_count=self.failure_counts[name],
            error=error,
        )


# Failover client - lazily initialized, keeps rotation state for the process
_failover_client: Optional[ProviderFailoverClient] = None


def get_failover_client() -> ProviderFailoverClient:
    """Get or create the process-wide failover client.

    Also used as a FastAPI dependency.
    """
    global _failover_client
    if _failover_client is None:
        _failover_client = ProviderFailoverClient(build_ai_clients(settings))
    return _failover_client


def reset_failover_client() -> None:
    """Drop the process-wide client and its rotation state."""
    global _failover_client
    _failover_client = None
