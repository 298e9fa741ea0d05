"""Scoring lexicon, thresholds and suggestion pools.

Everything the engine classifies against is fixed here; nothing is learned.
"""

import re
from typing import Final

from neuracare.core.scoring.enums import SuggestionCategory

# Scores are clamped to this closed range after all adjustments.
SCORE_MIN: Final[float] = -5.0
SCORE_MAX: Final[float] = 5.0

# Raw-sum variant: above +1.0 is positive, below -1.0 is negative.
LABEL_THRESHOLD: Final[float] = 1.0

# Burnout-specific valences layered over the general sentiment lexicon.
BURNOUT_LEXICON: Final[dict[str, float]] = {
    "calm": 2,
    "balanced": 2,
    "recharged": 2,
    "energized": 2,
    "supported": 1,
    "grateful": 2,
    "tired": -2,
    "exhausted": -3,
    "overwhelmed": -3,
    "burned": -3,
    "burnout": -4,
    "stressed": -3,
    "anxious": -3,
    "panic": -4,
    "insomnia": -3,
    "drained": -3,
    "hopeless": -4,
}

# Phrase boosts, applied once per distinct cue present in the text.
POSITIVE_CUES: Final[tuple[str, ...]] = (
    "excited",
    "progress",
    "good",
    "well",
    "happy",
    "accomplished",
    "successful",
)
POSITIVE_CUE_BOOST: Final[float] = 1.5

NEGATIVE_CUES: Final[tuple[str, ...]] = (
    "overwhelmed",
    "tired",
    "stressed",
    "difficult",
    "hard",
    "struggling",
)
NEGATIVE_CUE_PENALTY: Final[float] = 1.2

# Burnout signal words counted toward risk.
BURNOUT_KEYWORDS: Final[tuple[str, ...]] = (
    "exhausted",
    "can't",
    "tired",
    "overwhelmed",
    "sleep",
    "insomnia",
    "drained",
    "burnout",
    "hopeless",
    "stressed",
    "anxious",
    "panic",
)

# metadata.frequency / metadata.cadence values that count as high cadence
HIGH_FREQUENCY_VALUES: Final[frozenset[str]] = frozenset(
    {"daily", "everyday", "nightly", "constant", "24/7"}
)

FREQUENCY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"every\s+day", re.IGNORECASE),
    re.compile(r"each\s+day", re.IGNORECASE),
    re.compile(r"daily", re.IGNORECASE),
    re.compile(r"all\s+day", re.IGNORECASE),
    re.compile(r"every\s+night", re.IGNORECASE),
    re.compile(r"constantly", re.IGNORECASE),
)

# Risk classification
HIGH_RISK_MIN_KEYWORDS: Final[int] = 3
HIGH_RISK_SCORE_BELOW: Final[float] = -4.0
MEDIUM_RISK_MIN_KEYWORDS: Final[int] = 1
MEDIUM_RISK_SCORE_AT_MOST: Final[float] = -2.0

# Text hints that pick a suggestion category before risk does.
SLEEP_HINTS: Final[tuple[str, ...]] = ("sleep", "tired", "exhausted")
ENERGY_HINTS: Final[tuple[str, ...]] = ("energy", "motivated")

SUGGESTIONS: Final[dict[SuggestionCategory, tuple[str, ...]]] = {
    SuggestionCategory.breathing: (
        "4-7-8 breathing technique for stress relief",
        "Box breathing: inhale 4s, hold 4s, exhale 4s for 5 rounds",
        "Alternate nostril breathing for 5 minutes",
        "Deep belly breathing with 6-second cycles",
    ),
    SuggestionCategory.detox: (
        "2-hour phone-free evening routine before bed",
        "Schedule a 30-minute notification blackout after lunch",
        "Create a tech-free workspace for 1 hour",
        "Morning meditation without devices for 10 minutes",
    ),
    SuggestionCategory.energy: (
        "Take a 10-minute energizing walk outside",
        "Do 5 minutes of light stretching or yoga",
        "Listen to upbeat music for a quick mood boost",
        "Practice gratitude by writing 3 positive things",
    ),
    SuggestionCategory.sleep: (
        "Establish a consistent bedtime routine",
        "Avoid screens 1 hour before sleep",
        "Try progressive muscle relaxation",
        "Keep your bedroom cool and dark",
    ),
}

# Categories offered when risk is low
LOW_RISK_CATEGORIES: Final[tuple[SuggestionCategory, ...]] = (
    SuggestionCategory.energy,
    SuggestionCategory.detox,
)

FALLBACK_SUGGESTION: Final[str] = "Take a moment to appreciate your progress today."
