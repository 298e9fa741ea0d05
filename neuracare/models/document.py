"""Persisted document models.

The whole store is one JSON document with three collections. Keys are
camelCase on disk; Python attributes are snake_case.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from neuracare.core.scoring.enums import BurnoutRisk, SentimentLabel


class DocumentModel(BaseModel):
    """Base for every persisted shape."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with on-disk (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class ProfileConsent(DocumentModel):
    """Latest consent decision embedded on a profile."""

    consent_given: bool
    timestamp: str


class AIInsights(DocumentModel):
    """Natural-language enrichment attached to an analysis."""

    content: str
    provider: str
    confidence: str = "high"


class LastAnalysis(DocumentModel):
    """Summary of a profile's most recent analysis."""

    timestamp: str
    sentiment_score: float
    sentiment_label: SentimentLabel
    burnout_risk: BurnoutRisk
    suggestions: list[str]


class Profile(DocumentModel):
    """A user profile, keyed by user_id in the document."""

    user_id: str
    name: str = "Guest"
    timezone: str = "UTC"
    preferences: dict[str, Any] = Field(default_factory=dict)
    consent: ProfileConsent | None = None
    retention_until: str | None = None
    last_analysis: LastAnalysis | None = None


class ConsentRecord(DocumentModel):
    """Append-only consent log entry."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    consent_given: bool
    timestamp: str


class AnalysisRecord(DocumentModel):
    """Append-only, immutable analysis result."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    text: str
    timestamp: str
    metadata: dict[str, Any] | None = None
    sentiment_score: float
    sentiment_label: SentimentLabel
    burnout_risk: BurnoutRisk
    keywords_count: int = 0
    suggestions: list[str]
    ai_insights: AIInsights | None = None
    analyzed_at: str | None = None
    enhanced: bool = False


class Document(DocumentModel):
    """Root object of the store."""

    profiles: dict[str, Profile] = Field(default_factory=dict)
    consents: list[ConsentRecord] = Field(default_factory=list)
    analyses: list[AnalysisRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_profile_keys(self) -> Self:
        """Every profile must be stored under its own user_id."""
        for key, profile in self.profiles.items():
            if key != profile.user_id:
                msg = f"profile key {key!r} does not match userId {profile.user_id!r}"
                raise ValueError(msg)
        return self

    def analyses_for(self, user_id: str) -> list[AnalysisRecord]:
        return [a for a in self.analyses if a.user_id == user_id]

    def consents_for(self, user_id: str) -> list[ConsentRecord]:
        return [c for c in self.consents if c.user_id == user_id]
