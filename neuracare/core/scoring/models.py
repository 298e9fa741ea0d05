"""Scoring result model."""

from pydantic import BaseModel, ConfigDict, Field

from neuracare.core.scoring.constants import SCORE_MAX, SCORE_MIN
from neuracare.core.scoring.enums import BurnoutRisk, SentimentLabel


class ScoringResult(BaseModel):
    """Outcome of scoring one reflection."""

    model_config = ConfigDict(frozen=True)

    sentiment_score: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    sentiment_label: SentimentLabel
    burnout_risk: BurnoutRisk
    keywords_count: int = Field(ge=0)
    high_frequency: bool = False
    suggestions: list[str] = Field(min_length=1)
