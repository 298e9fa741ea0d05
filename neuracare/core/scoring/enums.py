"""Scoring enums."""

from enum import StrEnum, auto


class SentimentLabel(StrEnum):
    """Polarity bucket for a reflection's sentiment score."""

    positive = auto()
    neutral = auto()
    negative = auto()


class BurnoutRisk(StrEnum):
    """Burnout risk level.

    ``high`` is only ever assigned together with a ``negative`` label.
    """

    low = auto()
    medium = auto()
    high = auto()


class SuggestionCategory(StrEnum):
    """Families of coping suggestions."""

    breathing = auto()
    detox = auto()
    energy = auto()
    sleep = auto()
