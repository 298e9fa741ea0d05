"""Profile and export schemas."""

from typing import Any

from pydantic import Field, field_validator

from neuracare.models.document import AnalysisRecord, ConsentRecord, Profile
from neuracare.schemas.common import CamelModel, require_min_length, require_non_blank


class ProfileRequest(CamelModel):
    """Create or replace a profile's editable fields.

    ``lastAnalysis``, ``consent`` and ``retentionUntil`` are not
    accepted here; they are preserved from the stored profile.
    """

    user_id: str
    name: str
    timezone: str
    preferences: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form settings: sessionLength, detoxFormat, "
        "personalization, preferredSupport ('breathing' or 'detox').",
    )

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v: str) -> str:
        return require_non_blank(v, "userId")

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return require_min_length(v, "name", 2, "characters")

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        return require_min_length(v, "timezone", 3, "characters")

    @field_validator("preferences", mode="before")
    @classmethod
    def default_preferences(cls, v: Any) -> Any:
        return {} if v is None else v


# Stored profiles are returned as-is.
ProfileResponse = Profile


class ProfileExportResponse(CamelModel):
    """Everything stored about one user."""

    profile: Profile
    analyses: list[AnalysisRecord]
    consents: list[ConsentRecord]
