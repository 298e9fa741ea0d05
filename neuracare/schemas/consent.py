"""Consent schemas."""

from pydantic import StrictBool, field_validator

from neuracare.schemas.common import CamelModel, require_iso_timestamp, require_non_blank


class ConsentRequest(CamelModel):
    """Request to record a consent decision.

    Unknown fields (e.g. ``retentionDays`` from older clients) are ignored.
    """

    user_id: str
    consent_given: StrictBool
    timestamp: str

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v: str) -> str:
        return require_non_blank(v, "userId")

    @field_validator("timestamp")
    @classmethod
    def check_timestamp(cls, v: str) -> str:
        return require_iso_timestamp(v)


class ConsentResponse(CamelModel):
    """The consent record as stored."""

    user_id: str
    consent_given: bool
    timestamp: str
