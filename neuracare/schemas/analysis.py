"""Analysis request and response schemas."""

from typing import Any

from pydantic import field_validator

from neuracare.core.scoring.enums import BurnoutRisk, SentimentLabel
from neuracare.models.document import AIInsights
from neuracare.schemas.common import (
    CamelModel,
    require_iso_timestamp,
    require_min_length,
    require_non_blank,
)

MIN_TEXT_LENGTH = 5


class AnalyzeRequest(CamelModel):
    """A reflection to analyze."""

    user_id: str
    text: str
    timestamp: str
    metadata: dict[str, Any] | None = None

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v: str) -> str:
        return require_non_blank(v, "userId")

    @field_validator("text")
    @classmethod
    def check_text(cls, v: str) -> str:
        return require_min_length(v, "text", MIN_TEXT_LENGTH, "characters")

    @field_validator("timestamp")
    @classmethod
    def check_timestamp(cls, v: str) -> str:
        return require_iso_timestamp(v)


class AnalysisResponse(CamelModel):
    """Scoring result, optionally enriched with an AI insight."""

    user_id: str
    timestamp: str
    sentiment_score: float
    sentiment_label: SentimentLabel
    burnout_risk: BurnoutRisk
    keywords_count: int
    suggestions: list[str]
    ai_insights: AIInsights | None = None
    analyzed_at: str
    enhanced: bool = False
