"""AI response schemas.

Shapes shared by every provider client and the failover client.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AIUsage(BaseModel):
    """Token usage reported by a provider."""

    input_tokens: int = Field(default=0, description="Tokens in the prompt")
    output_tokens: int = Field(default=0, description="Tokens in the response")


class AIResponse(BaseModel):
    """Normalised response from one provider call."""

    content: str = Field(..., description="Generated text content")
    model: str = Field(..., description="Model that generated the response")
    provider: str = Field(..., description="Provider name")
    usage: AIUsage = Field(default_factory=AIUsage, description="Token usage")


class InsightContext(BaseModel):
    """Scoring context passed to providers alongside the prompt."""

    mood: str = "neutral"
    stress_level: str = "unknown"
    keyword_count: int = 0


class InsightResult(BaseModel):
    """Outcome of a failover insight request. Always has content."""

    content: str = Field(..., min_length=1)
    provider: str
    success: bool
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ProviderStatsResponse(BaseModel):
    """Snapshot of the failover client's rotation state."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_provider: str | None
    last_successful: str | None
    failure_counts: dict[str, int]
    available_providers: list[str]
