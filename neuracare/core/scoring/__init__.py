"""Burnout scoring.

Turns a short reflection into a sentiment score, a sentiment label, a
burnout risk level and a short list of coping suggestions:

1. Lexicon sum over word tokens, with negation and phrase boosts, clamped
2. Label from the score against a fixed threshold
3. Burnout keyword count, plus a cadence flag from metadata or phrasing
4. Risk from label, keyword count and score
5. Suggestions from text hints, risk and the profile's preferred support

The engine is pure: no network, no storage, no clock.
"""

from neuracare.core.scoring.engine import ScoringEngine
from neuracare.core.scoring.enums import BurnoutRisk, SentimentLabel, SuggestionCategory
from neuracare.core.scoring.models import ScoringResult

__all__ = [
    "BurnoutRisk",
    "ScoringEngine",
    "ScoringResult",
    "SentimentLabel",
    "SuggestionCategory",
]
