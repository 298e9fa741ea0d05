"""Analysis orchestration.

Per request: check consent, score the reflection, try to enrich it with
an AI insight, then append the record and refresh the profile summary in
one store update.
"""

import asyncio
from datetime import UTC, datetime

from fastapi import Depends

from neuracare.config import settings
from neuracare.core.scoring import ScoringEngine, ScoringResult
from neuracare.database import AtomicDocumentStore, get_store
from neuracare.logging_config import get_logger
from neuracare.models.document import AIInsights, AnalysisRecord, Document, LastAnalysis
from neuracare.schemas.ai_response import InsightContext
from neuracare.schemas.analysis import AnalysisResponse, AnalyzeRequest
from neuracare.services.ai_failover import ProviderFailoverClient, get_failover_client
from neuracare.services.consent import ensure_analysis_allowed

logger = get_logger(__name__)


def build_insight_prompt(text: str, result: ScoringResult) -> str:
    return (
        "Analyze this mental health reflection and provide 2-3 actionable insights:\n\n"
        f'Text: "{text}"\n'
        f"Sentiment Score: {result.sentiment_score}\n"
        f"Burnout Risk: {result.burnout_risk}\n"
        f"Keywords Found: {result.keywords_count}\n\n"
        "Provide specific, empathetic recommendations for this user's mental wellness."
    )


class AnalysisOrchestrator:
    """Ties consent, scoring, enrichment and storage together.

    Collaborators are injected so tests can pass a temp-file store, a
    seeded engine and scripted providers.
    """

    def __init__(
        self,
        store: AtomicDocumentStore,
        engine: ScoringEngine,
        failover: ProviderFailoverClient,
        enrichment_timeout: float | None = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._failover = failover
        if enrichment_timeout is None:
            enrichment_timeout = settings.ai_enrichment_timeout_seconds
        if enrichment_timeout is None:
            enrichment_timeout = failover.chain_timeout
        self._enrichment_timeout = enrichment_timeout

    @property
    def enrichment_timeout(self) -> float | None:
        """Outer bound on enrichment in seconds; None means unbounded."""
        return self._enrichment_timeout

    async def analyze(self, request: AnalyzeRequest) -> AnalysisResponse:
        """Run one analysis end to end.

        Raises:
            ConsentError: If the user is not in CONSENT_ACTIVE, checked
                before scoring and again inside the store update.
            StorageError: If the store cannot be read or written.
        """
        doc = await self._store.read()
        profile = doc.profiles.get(request.user_id)
        ensure_analysis_allowed(profile)

        preferences = profile.preferences if profile else None
        result = self._engine.score(request.text, request.metadata, preferences)

        insights = await self._enrich(request.text, result)
        analyzed_at = datetime.now(UTC).isoformat()

        record = AnalysisRecord(
            user_id=request.user_id,
            text=request.text,
            timestamp=request.timestamp,
            metadata=request.metadata,
            sentiment_score=result.sentiment_score,
            sentiment_label=result.sentiment_label,
            burnout_risk=result.burnout_risk,
            keywords_count=result.keywords_count,
            suggestions=result.suggestions,
            ai_insights=insights,
            analyzed_at=analyzed_at,
            enhanced=insights is not None,
        )
        summary = LastAnalysis(
            timestamp=request.timestamp,
            sentiment_score=result.sentiment_score,
            sentiment_label=result.sentiment_label,
            burnout_risk=result.burnout_risk,
            suggestions=result.suggestions,
        )

        def apply(draft: Document) -> None:
            # Consent may have changed while the providers were working.
            current = draft.profiles.get(request.user_id)
            ensure_analysis_allowed(current)
            draft.analyses.append(record)
            draft.profiles[request.user_id] = current.model_copy(
                update={"last_analysis": summary}
            )

        await self._store.update(apply)

        logger.info(
            "Analysis recorded",
            user_id=request.user_id,
            burnout_risk=result.burnout_risk,
            sentiment_label=result.sentiment_label,
            enhanced=record.enhanced,
        )

        return AnalysisResponse(
            user_id=request.user_id,
            timestamp=request.timestamp,
            sentiment_score=result.sentiment_score,
            sentiment_label=result.sentiment_label,
            burnout_risk=result.burnout_risk,
            keywords_count=result.keywords_count,
            suggestions=result.suggestions,
            ai_insights=insights,
            analyzed_at=analyzed_at,
            enhanced=record.enhanced,
        )

    async def _enrich(self, text: str, result: ScoringResult) -> AIInsights | None:
        """Best-effort AI insight; None on fallback, timeout or error."""
        context = InsightContext(
            mood=result.sentiment_label,
            stress_level=result.burnout_risk,
            keyword_count=result.keywords_count,
        )
        try:
            insight = await asyncio.wait_for(
                self._failover.generate_insight(
                    build_insight_prompt(text, result), context
                ),
                timeout=self._enrichment_timeout,
            )
        except TimeoutError:
            logger.warning(
                "AI enrichment timed out, continuing without insights",
                timeout_seconds=self._enrichment_timeout,
            )
            return None
        except Exception as e:
            logger.warning("AI enrichment failed", error=str(e))
            return None

        if not insight.success:
            return None
        return AIInsights(content=insight.content, provider=insight.provider)


# Scoring engine - lazily initialized, loads the lexicon once
_engine: ScoringEngine | None = None


def get_scoring_engine() -> ScoringEngine:
    """Get or create the shared scoring engine."""
    global _engine
    if _engine is None:
        _engine = ScoringEngine()
    return _engine


def get_orchestrator(
    store: AtomicDocumentStore = Depends(get_store),
    engine: ScoringEngine = Depends(get_scoring_engine),
    failover: ProviderFailoverClient = Depends(get_failover_client),
) -> AnalysisOrchestrator:
    """FastAPI dependency wiring the orchestrator's collaborators."""
    return AnalysisOrchestrator(store, engine, failover)
