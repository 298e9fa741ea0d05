"""Burnout scoring engine."""

import random
import re
from collections.abc import Mapping
from typing import Any

from vaderSentiment.vaderSentiment import NEGATE, SentimentIntensityAnalyzer

from neuracare.core.scoring.constants import (
    BURNOUT_KEYWORDS,
    BURNOUT_LEXICON,
    ENERGY_HINTS,
    FALLBACK_SUGGESTION,
    FREQUENCY_PATTERNS,
    HIGH_FREQUENCY_VALUES,
    HIGH_RISK_MIN_KEYWORDS,
    HIGH_RISK_SCORE_BELOW,
    LABEL_THRESHOLD,
    LOW_RISK_CATEGORIES,
    MEDIUM_RISK_MIN_KEYWORDS,
    MEDIUM_RISK_SCORE_AT_MOST,
    NEGATIVE_CUE_PENALTY,
    NEGATIVE_CUES,
    POSITIVE_CUE_BOOST,
    POSITIVE_CUES,
    SCORE_MAX,
    SCORE_MIN,
    SLEEP_HINTS,
    SUGGESTIONS,
)
from neuracare.core.scoring.enums import BurnoutRisk, SentimentLabel, SuggestionCategory
from neuracare.core.scoring.models import ScoringResult

_NON_WORD = re.compile(r"[^a-z0-9\s']")
_NEGATIONS = frozenset(NEGATE)


def _word_pattern(word: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


_KEYWORD_PATTERNS = tuple(_word_pattern(k) for k in BURNOUT_KEYWORDS)
_POSITIVE_CUE_PATTERNS = tuple(_word_pattern(c) for c in POSITIVE_CUES)
_NEGATIVE_CUE_PATTERNS = tuple(_word_pattern(c) for c in NEGATIVE_CUES)


def normalize_text(text: str) -> str:
    """Lowercase and fold typographic apostrophes to ASCII."""
    return text.replace("’", "'").replace("‘", "'").lower()


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens, keeping apostrophes."""
    return _NON_WORD.sub(" ", normalize_text(text)).split()


def _is_negation(token: str) -> bool:
    return token in _NEGATIONS or token.endswith("n't")


class ScoringEngine:
    """Classifies a reflection into sentiment and burnout risk.

    The lexicon is VADER's general-purpose word list with the burnout
    terms laid over it. Suggestion picks that involve chance draw from
    ``rng`` so callers can seed or replace it.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._lexicon: dict[str, float] = {
            **SentimentIntensityAnalyzer().lexicon,
            **BURNOUT_LEXICON,
        }

    def score(
        self,
        text: str,
        metadata: Mapping[str, Any] | None = None,
        preferences: Mapping[str, Any] | None = None,
    ) -> ScoringResult:
        """Score one reflection.

        Args:
            text: The reflection. Must be non-empty after stripping.
            metadata: Optional request metadata; ``frequency`` or
                ``cadence`` feed high-frequency detection.
            preferences: Optional profile preferences used to
                personalize suggestions.

        Returns:
            ScoringResult with score, label, risk, keyword count and
            at least one suggestion.

        Raises:
            ValueError: If text is empty or whitespace.
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("text must be a non-empty string")

        score = self.sentiment_score(text)
        label = self.label_for(score)
        keywords_count = self.count_keywords(text)
        high_frequency = self.detect_high_frequency(text, metadata)
        risk = self.classify_risk(label, score, keywords_count, high_frequency)
        suggestions = self.build_suggestions(risk, text, preferences)

        return ScoringResult(
            sentiment_score=round(score, 2),
            sentiment_label=label,
            burnout_risk=risk,
            keywords_count=keywords_count,
            high_frequency=high_frequency,
            suggestions=suggestions,
        )

    # ── Sentiment ──

    def sentiment_score(self, text: str) -> float:
        """Lexicon sum with negation and phrase boosts, clamped."""
        tokens = tokenize(text)
        total = 0.0
        for i, token in enumerate(tokens):
            valence = self._lexicon.get(token, 0.0)
            if valence and i > 0 and _is_negation(tokens[i - 1]):
                valence = -valence
            total += valence

        total += POSITIVE_CUE_BOOST * sum(
            1 for p in _POSITIVE_CUE_PATTERNS if p.search(text)
        )
        total -= NEGATIVE_CUE_PENALTY * sum(
            1 for p in _NEGATIVE_CUE_PATTERNS if p.search(text)
        )

        return max(SCORE_MIN, min(SCORE_MAX, total))

    @staticmethod
    def label_for(score: float) -> SentimentLabel:
        if score > LABEL_THRESHOLD:
            return SentimentLabel.positive
        if score < -LABEL_THRESHOLD:
            return SentimentLabel.negative
        return SentimentLabel.neutral

    # ── Burnout signals ──

    @staticmethod
    def count_keywords(text: str) -> int:
        """Count burnout keyword occurrences on word boundaries."""
        normalized = normalize_text(text)
        return sum(len(p.findall(normalized)) for p in _KEYWORD_PATTERNS)

    @staticmethod
    def detect_high_frequency(
        text: str, metadata: Mapping[str, Any] | None = None
    ) -> bool:
        """True for a high-cadence metadata hint or cadence phrasing."""
        metadata = metadata or {}
        cadence = metadata.get("frequency") or metadata.get("cadence") or ""
        if str(cadence).strip().lower() in HIGH_FREQUENCY_VALUES:
            return True
        return any(p.search(text) for p in FREQUENCY_PATTERNS)

    @staticmethod
    def classify_risk(
        label: SentimentLabel,
        score: float,
        keywords_count: int,
        high_frequency: bool,
    ) -> BurnoutRisk:
        """Risk from label, score and keyword count.

        High frequency counts as one extra keyword. Only a negative
        label can raise risk above low.
        """
        if label != SentimentLabel.negative:
            return BurnoutRisk.low

        effective = keywords_count + (1 if high_frequency else 0)
        if effective >= HIGH_RISK_MIN_KEYWORDS or score < HIGH_RISK_SCORE_BELOW:
            return BurnoutRisk.high
        if effective >= MEDIUM_RISK_MIN_KEYWORDS or score <= MEDIUM_RISK_SCORE_AT_MOST:
            return BurnoutRisk.medium
        return BurnoutRisk.low

    # ── Suggestions ──

    @staticmethod
    def preferred_category(
        preferences: Mapping[str, Any] | None,
    ) -> SuggestionCategory | None:
        """The profile's preferred support, if exactly one is indicated."""
        preferences = preferences or {}
        support = preferences.get("preferredSupport")
        breathing = support == "breathing" or bool(preferences.get("prefersBreathing"))
        detox = support == "detox" or bool(preferences.get("prefersDigitalDetox"))

        if breathing and not detox:
            return SuggestionCategory.breathing
        if detox and not breathing:
            return SuggestionCategory.detox
        return None

    def build_suggestions(
        self,
        risk: BurnoutRisk,
        text: str,
        preferences: Mapping[str, Any] | None = None,
    ) -> list[str]:
        """Pick suggestions; never returns an empty list."""
        lowered = normalize_text(text)
        preferred = self.preferred_category(preferences)
        suggestions: list[str] = []

        if any(hint in lowered for hint in SLEEP_HINTS):
            suggestions.extend(SUGGESTIONS[SuggestionCategory.sleep][:2])
        elif any(hint in lowered for hint in ENERGY_HINTS):
            suggestions.extend(SUGGESTIONS[SuggestionCategory.energy][:2])
        elif risk == BurnoutRisk.high:
            order = [SuggestionCategory.breathing, SuggestionCategory.detox]
            if preferred == SuggestionCategory.detox:
                order.reverse()
            suggestions.extend(SUGGESTIONS[category][0] for category in order)
        elif risk == BurnoutRisk.medium:
            primary = preferred or SuggestionCategory.breathing
            suggestions.append(self._rng.choice(SUGGESTIONS[primary]))
            others = [c for c in SuggestionCategory if c != primary]
            suggestions.append(SUGGESTIONS[self._rng.choice(others)][0])
        else:
            category = self._rng.choice(LOW_RISK_CATEGORIES)
            suggestions.append(self._rng.choice(SUGGESTIONS[category]))

        return suggestions or [FALLBACK_SUGGESTION]
