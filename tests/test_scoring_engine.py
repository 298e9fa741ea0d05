"""Tests for the burnout scoring engine."""

import random

import pytest

from neuracare.core.scoring import BurnoutRisk, ScoringEngine, SentimentLabel
from neuracare.core.scoring.constants import (
    SCORE_MAX,
    SCORE_MIN,
    SUGGESTIONS,
)
from neuracare.core.scoring.enums import SuggestionCategory
from neuracare.core.scoring.engine import normalize_text, tokenize

BREATHING = SUGGESTIONS[SuggestionCategory.breathing]
DETOX = SUGGESTIONS[SuggestionCategory.detox]
ENERGY = SUGGESTIONS[SuggestionCategory.energy]
SLEEP = SUGGESTIONS[SuggestionCategory.sleep]


class TestTokenizing:
    def test_tokenize_strips_punctuation_and_lowercases(self):
        assert tokenize("Calm, BALANCED... and grateful!") == [
            "calm",
            "balanced",
            "and",
            "grateful",
        ]

    def test_curly_apostrophes_are_folded(self):
        assert normalize_text("I can’t") == "i can't"
        assert "can't" in tokenize("I can’t sleep")


class TestSentiment:
    """Tests for lexicon scoring and label mapping."""

    def test_positive_reflection(self, engine):
        result = engine.score("calm, balanced and grateful")

        assert result.sentiment_label == SentimentLabel.positive
        assert result.sentiment_score > 1.0
        assert result.burnout_risk == BurnoutRisk.low

    def test_score_is_clamped(self, engine):
        low = engine.score("exhausted drained hopeless panic burnout")
        high = engine.score("calm balanced recharged energized grateful")

        assert low.sentiment_score == SCORE_MIN
        assert high.sentiment_score == SCORE_MAX

    def test_negation_flips_following_token(self, engine):
        # tired flips to +2, the "tired" cue still subtracts 1.2
        assert engine.sentiment_score("not tired") == pytest.approx(0.8)
        assert engine.score("not tired").sentiment_label == SentimentLabel.neutral

    def test_contraction_negates(self, engine):
        assert engine.sentiment_score("wasn't anxious") == pytest.approx(3.0)

    @pytest.mark.parametrize(
        "score,label",
        [
            (1.01, SentimentLabel.positive),
            (1.0, SentimentLabel.neutral),
            (0.0, SentimentLabel.neutral),
            (-1.0, SentimentLabel.neutral),
            (-1.01, SentimentLabel.negative),
        ],
    )
    def test_label_thresholds(self, score, label):
        assert ScoringEngine.label_for(score) == label

    def test_empty_text_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.score("   ")


class TestBurnoutSignals:
    """Tests for keyword counting, cadence and risk."""

    def test_keyword_count_uses_word_boundaries(self):
        assert ScoringEngine.count_keywords("Tired, so TIRED. Retired though.") == 2

    def test_keyword_count_includes_contractions(self):
        assert ScoringEngine.count_keywords("I can’t sleep") == 2

    def test_cadence_from_metadata(self):
        assert ScoringEngine.detect_high_frequency("fine", {"frequency": "Daily"})
        assert ScoringEngine.detect_high_frequency("fine", {"cadence": "24/7"})
        assert not ScoringEngine.detect_high_frequency("fine", {"frequency": "weekly"})

    def test_cadence_from_text(self):
        assert ScoringEngine.detect_high_frequency("It happens every  night")
        assert ScoringEngine.detect_high_frequency("I worry constantly")
        assert not ScoringEngine.detect_high_frequency("Once in a while")

    def test_exhausted_sleepless_reflection_is_high_risk(self, engine):
        result = engine.score(
            "I feel exhausted, overwhelmed, and can't sleep every night"
        )

        assert result.sentiment_label == SentimentLabel.negative
        assert result.keywords_count >= 4
        assert result.high_frequency is True
        assert result.burnout_risk == BurnoutRisk.high

    def test_high_frequency_counts_as_keyword(self):
        negative = SentimentLabel.negative
        assert ScoringEngine.classify_risk(negative, -2.5, 2, False) == BurnoutRisk.medium
        assert ScoringEngine.classify_risk(negative, -2.5, 2, True) == BurnoutRisk.high

    def test_very_low_score_alone_is_high(self):
        assert (
            ScoringEngine.classify_risk(SentimentLabel.negative, -4.5, 0, False)
            == BurnoutRisk.high
        )

    def test_negative_without_signals_is_low(self):
        assert (
            ScoringEngine.classify_risk(SentimentLabel.negative, -1.5, 0, False)
            == BurnoutRisk.low
        )

    @pytest.mark.parametrize("label", [SentimentLabel.positive, SentimentLabel.neutral])
    def test_only_negative_label_raises_risk(self, label):
        assert ScoringEngine.classify_risk(label, 5.0, 12, True) == BurnoutRisk.low


class TestSuggestions:
    """Tests for suggestion selection."""

    def test_sleep_hint_wins(self, engine):
        result = engine.score("exhausted drained hopeless panic burnout")

        assert result.suggestions == list(SLEEP[:2])

    def test_energy_hint(self, engine):
        assert engine.build_suggestions(BurnoutRisk.low, "no energy left") == list(
            ENERGY[:2]
        )

    def test_high_risk_defaults_to_breathing_first(self, engine):
        result = engine.score("anxious and stressed, panic")

        assert result.burnout_risk == BurnoutRisk.high
        assert result.suggestions == [BREATHING[0], DETOX[0]]

    def test_high_risk_honours_detox_preference(self, engine):
        result = engine.score(
            "anxious and stressed, panic",
            preferences={"preferredSupport": "detox"},
        )

        assert result.suggestions == [DETOX[0], BREATHING[0]]

    def test_medium_risk_uses_preferred_category(self, engine):
        suggestions = engine.build_suggestions(
            BurnoutRisk.medium,
            "anxious about the deadline",
            {"prefersDigitalDetox": True},
        )

        assert len(suggestions) == 2
        assert suggestions[0] in DETOX
        assert suggestions[1] not in DETOX

    def test_medium_risk_defaults_to_breathing(self, engine):
        suggestions = engine.build_suggestions(BurnoutRisk.medium, "anxious")

        assert suggestions[0] in BREATHING
        assert suggestions[1] not in BREATHING

    def test_conflicting_preferences_are_ignored(self):
        prefs = {"prefersBreathing": True, "prefersDigitalDetox": True}
        assert ScoringEngine.preferred_category(prefs) is None

    def test_low_risk_picks_energy_or_detox(self, engine):
        suggestions = engine.build_suggestions(BurnoutRisk.low, "a quiet afternoon")

        assert len(suggestions) == 1
        assert suggestions[0] in ENERGY + DETOX

    def test_seeded_rng_is_reproducible(self):
        first = ScoringEngine(rng=random.Random(7))
        second = ScoringEngine(rng=random.Random(7))

        picks = [
            first.build_suggestions(BurnoutRisk.medium, "anxious") for _ in range(5)
        ]
        again = [
            second.build_suggestions(BurnoutRisk.medium, "anxious") for _ in range(5)
        ]
        assert picks == again

    @pytest.mark.parametrize(
        "text",
        [
            "ok",
            "calm, balanced and grateful",
            "I feel exhausted, overwhelmed, and can't sleep every night",
            "!!!",
        ],
    )
    def test_suggestions_never_empty(self, engine, text):
        result = engine.score(text)

        assert result.suggestions
        assert SCORE_MIN <= result.sentiment_score <= SCORE_MAX
