"""Tests for the analysis orchestrator and POST /api/analyze."""

import random

import pytest

from neuracare.config import Settings, settings
from neuracare.core.scoring import BurnoutRisk, SentimentLabel
from neuracare.database import AtomicDocumentStore
from neuracare.exceptions import ConsentError, StorageError
from neuracare.schemas.analysis import AnalyzeRequest
from neuracare.schemas.consent import ConsentRequest
from neuracare.services.ai_client import build_ai_clients
from neuracare.services.ai_failover import ProviderFailoverClient
from neuracare.services.analysis import AnalysisOrchestrator, build_insight_prompt
from neuracare.services.consent import (
    REQUIRED_MESSAGE,
    REVOKED_MESSAGE,
    record_consent,
)
from tests.fakes import HANG, ScriptedClient

HIGH_RISK_TEXT = "I feel exhausted, overwhelmed, and can't sleep every night"


def _request(user_id: str = "u1", text: str = HIGH_RISK_TEXT, **extra) -> AnalyzeRequest:
    return AnalyzeRequest(
        user_id=user_id, text=text, timestamp="2024-05-01T11:00:00Z", **extra
    )


async def _consent(store: AtomicDocumentStore, given: bool, user_id: str = "u1") -> None:
    await record_consent(
        store,
        ConsentRequest(user_id=user_id, consent_given=given, timestamp="2024-05-01T10:00:00Z"),
    )


def _orchestrator(store, engine, *clients, enrichment_timeout=5.0) -> AnalysisOrchestrator:
    failover = ProviderFailoverClient(list(clients), rng=random.Random(0))
    return AnalysisOrchestrator(store, engine, failover, enrichment_timeout=enrichment_timeout)


class TestAnalysisOrchestrator:
    """Tests for AnalysisOrchestrator.analyze()."""

    async def test_records_enriched_analysis(self, store, engine):
        await _consent(store, True)
        provider = ScriptedClient("gemini", "Protect your evenings this week.")
        orchestrator = _orchestrator(store, engine, provider)

        response = await orchestrator.analyze(_request(metadata={"source": "journal"}))

        assert response.burnout_risk == BurnoutRisk.high
        assert response.sentiment_label == SentimentLabel.negative
        assert response.enhanced is True
        assert response.ai_insights.provider == "gemini"
        assert response.ai_insights.confidence == "high"
        assert "Burnout Risk: high" in provider.prompts[0]

        doc = await store.read()
        [record] = doc.analyses
        assert record.text == HIGH_RISK_TEXT
        assert record.metadata == {"source": "journal"}
        assert record.ai_insights.content == "Protect your evenings this week."
        assert record.analyzed_at == response.analyzed_at

        summary = doc.profiles["u1"].last_analysis
        assert summary.timestamp == "2024-05-01T11:00:00Z"
        assert summary.burnout_risk == BurnoutRisk.high
        assert summary.suggestions == response.suggestions

    async def test_fallback_insight_is_not_attached(self, store, engine):
        await _consent(store, True)
        orchestrator = _orchestrator(
            store, engine, ScriptedClient("openai", RuntimeError("down"))
        )

        response = await orchestrator.analyze(_request())

        assert response.ai_insights is None
        assert response.enhanced is False
        assert response.suggestions
        assert (await store.read()).analyses[0].enhanced is False

    async def test_no_providers_still_analyzes(self, store, engine):
        await _consent(store, True)

        response = await _orchestrator(store, engine).analyze(_request())

        assert response.ai_insights is None
        assert len((await store.read()).analyses) == 1

    async def test_enrichment_timeout_is_bounded(self, store, engine):
        await _consent(store, True)
        slow = ScriptedClient("openai", HANG, timeout=2.0)
        orchestrator = _orchestrator(store, engine, slow, enrichment_timeout=0.05)

        response = await orchestrator.analyze(_request())

        assert response.ai_insights is None
        assert response.enhanced is False
        assert len((await store.read()).analyses) == 1

    async def test_preferences_shape_suggestions(self, store, engine):
        await _consent(store, True)
        await store.update(
            lambda doc: doc.profiles["u1"].preferences.update(preferredSupport="detox")
        )

        response = await _orchestrator(store, engine).analyze(
            _request(text="anxious and stressed, panic")
        )

        assert response.burnout_risk == BurnoutRisk.high
        assert response.suggestions[0].startswith("2-hour phone-free")

    async def test_no_profile_is_refused(self, store, engine):
        with pytest.raises(ConsentError) as exc_info:
            await _orchestrator(store, engine).analyze(_request())

        assert exc_info.value.message == REQUIRED_MESSAGE
        assert (await store.read()).analyses == []

    async def test_revoked_is_refused(self, store, engine):
        await _consent(store, True)
        await _consent(store, False)
        provider = ScriptedClient("openai", "never used")

        with pytest.raises(ConsentError) as exc_info:
            await _orchestrator(store, engine, provider).analyze(_request())

        assert exc_info.value.message == REVOKED_MESSAGE
        assert provider.calls == 0

    async def test_revocation_during_enrichment_discards_result(self, store, engine):
        await _consent(store, True)

        class RevokingFailover:
            async def generate_insight(self, prompt, context=None):
                await _consent(store, False)
                return await ProviderFailoverClient([]).generate_insight(prompt)

        orchestrator = AnalysisOrchestrator(
            store, engine, RevokingFailover(), enrichment_timeout=5.0
        )

        with pytest.raises(ConsentError):
            await orchestrator.analyze(_request())

        doc = await store.read()
        assert doc.analyses == []
        assert doc.profiles["u1"].last_analysis is None

    async def test_storage_failure_propagates(self, store, engine):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{broken")

        with pytest.raises(StorageError):
            await _orchestrator(store, engine).analyze(_request())

    def test_insight_prompt_carries_scores(self, engine):
        result = engine.score(HIGH_RISK_TEXT)

        prompt = build_insight_prompt(HIGH_RISK_TEXT, result)

        assert HIGH_RISK_TEXT in prompt
        assert f"Keywords Found: {result.keywords_count}" in prompt


class TestEnrichmentBound:
    """Tests for the outer bound on AI enrichment."""

    def _all_providers(self) -> ProviderFailoverClient:
        config = Settings(
            _env_file=None,
            openai_api_key="k",
            perplexity_api_key="k",
            gemini_api_key="k",
            claude_api_key="k",
        )
        return ProviderFailoverClient(build_ai_clients(config))

    def test_default_bound_covers_provider_chain(self, store, engine, monkeypatch):
        monkeypatch.setattr(settings, "ai_enrichment_timeout_seconds", None)
        failover = self._all_providers()

        orchestrator = AnalysisOrchestrator(store, engine, failover)

        per_provider = [15.0, 20.0, 18.0, 20.0]
        assert len(failover.providers) == 4
        assert orchestrator.enrichment_timeout >= sum(per_provider)
        assert orchestrator.enrichment_timeout == 4 * max(per_provider)

    def test_configured_bound_wins(self, store, engine, monkeypatch):
        monkeypatch.setattr(settings, "ai_enrichment_timeout_seconds", 90.0)

        orchestrator = AnalysisOrchestrator(store, engine, self._all_providers())

        assert orchestrator.enrichment_timeout == 90.0

    def test_explicit_bound_wins(self, store, engine):
        orchestrator = AnalysisOrchestrator(
            store, engine, self._all_providers(), enrichment_timeout=3.0
        )

        assert orchestrator.enrichment_timeout == 3.0

    async def test_last_provider_gets_full_budget(self, store, engine, monkeypatch):
        monkeypatch.setattr(settings, "ai_enrichment_timeout_seconds", None)
        await _consent(store, True)
        hung = [ScriptedClient(name, HANG, timeout=0.05) for name in ("a", "b", "c")]
        last = ScriptedClient("d", "Late but useful.", timeout=0.5)
        failover = ProviderFailoverClient([*hung, last], rng=random.Random(0))

        response = await AnalysisOrchestrator(store, engine, failover).analyze(_request())

        assert response.ai_insights.provider == "d"
        assert failover.current_provider == "d"


class TestAnalyzeEndpoint:
    """Tests for POST /api/analyze."""

    PAYLOAD = {
        "userId": "u1",
        "text": HIGH_RISK_TEXT,
        "timestamp": "2024-05-01T11:00:00Z",
    }

    @pytest.mark.asyncio
    async def test_requires_consent(self, client):
        response = await client.post("/api/analyze", json=self.PAYLOAD)

        assert response.status_code == 403
        assert response.json() == {"detail": REQUIRED_MESSAGE}

    @pytest.mark.asyncio
    async def test_revoked_consent_is_403(self, client, store):
        await _consent(store, False)

        response = await client.post("/api/analyze", json=self.PAYLOAD)

        assert response.status_code == 403
        assert response.json() == {"detail": REVOKED_MESSAGE}

    @pytest.mark.asyncio
    async def test_consented_analysis(self, client, store):
        await _consent(store, True)

        response = await client.post("/api/analyze", json=self.PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["userId"] == "u1"
        assert body["timestamp"] == "2024-05-01T11:00:00Z"
        assert body["burnoutRisk"] == "high"
        assert body["sentimentLabel"] == "negative"
        assert -5 <= body["sentimentScore"] <= 5
        assert body["keywordsCount"] >= 4
        assert body["suggestions"]
        assert body["aiInsights"] == {
            "content": "Take short breaks between focused blocks.",
            "provider": "openai",
            "confidence": "high",
        }
        assert body["enhanced"] is True
        assert body["analyzedAt"]
        assert len((await store.read()).analyses) == 1

    @pytest.mark.asyncio
    async def test_consent_flow(self, client):
        """Grant, revoke, re-grant: 200, 403, 200."""
        statuses = []
        for given in (True, False, True):
            await client.post(
                "/api/consent",
                json={"userId": "u1", "consentGiven": given, "timestamp": "2024-05-01T10:00:00Z"},
            )
            response = await client.post("/api/analyze", json=self.PAYLOAD)
            statuses.append(response.status_code)

        assert statuses == [200, 403, 200]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"text": "meh"}, "text: text must be at least 5 characters"),
            ({"text": "      "}, "text: text must be at least 5 characters"),
            ({"timestamp": "soon"}, "timestamp: timestamp must be an ISO-8601 string"),
            ({"userId": " "}, "userId: userId is required"),
        ],
    )
    async def test_invalid_payload_is_400(self, client, store, overrides, error):
        await _consent(store, True)

        response = await client.post("/api/analyze", json={**self.PAYLOAD, **overrides})

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid request payload", "errors": [error]}
        assert (await store.read()).analyses == []

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self, client, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{broken")

        response = await client.post("/api/analyze", json=self.PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"detail": "Unable to process analysis request"}
