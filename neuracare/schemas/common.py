"""Shared schema base and field checks."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def require_non_blank(value: str, field: str) -> str:
    if not value.strip():
        raise ValueError(f"{field} is required")
    return value


def require_min_length(value: str, field: str, minimum: int, noun: str) -> str:
    if len(value.strip()) < minimum:
        raise ValueError(f"{field} must be at least {minimum} {noun}")
    return value


def require_iso_timestamp(value: str, field: str = "timestamp") -> str:
    """Accept ISO-8601 strings (``Z`` suffix included), keep them verbatim."""
    try:
        datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"{field} must be an ISO-8601 string") from e
    return value
