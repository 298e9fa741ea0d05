"""AI provider abstraction layer.

Abstract base class and factory for the text-generation providers used
to enrich an analysis. Providers differ only in how the request is built
and where the text sits in the response; rotation and failover live in
``neuracare.services.ai_failover``.
"""

import abc
from enum import StrEnum

from neuracare.config import Settings, settings
from neuracare.logging_config import get_logger
from neuracare.schemas.ai_response import AIResponse, InsightContext

logger = get_logger(__name__)


class AIProviderName(StrEnum):
    """Supported AI providers."""

    OPENAI = "openai"
    PERPLEXITY = "perplexity"
    GEMINI = "gemini"
    CLAUDE = "claude"


class BaseAIClient(abc.ABC):
    """Abstract base class for AI provider clients.

    Subclasses implement the provider-specific call and return a
    normalized AIResponse. ``timeout`` bounds a single call in seconds.
    """

    name: str = ""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 15.0,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self._base_url = base_url
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    @abc.abstractmethod
    async def generate(self, prompt: str, context: InsightContext) -> AIResponse:
        """Generate an insight for ``prompt``.

        Args:
            prompt: The user-facing analysis prompt.
            context: Mood, stress level and keyword count from scoring.

        Returns:
            Normalized AIResponse. Content may be empty; the caller
            decides whether that counts as a failure.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r}, timeout={self.timeout})"


def build_ai_clients(config: Settings = settings) -> list[BaseAIClient]:
    """Build provider clients in ``config.ai_provider_order``.

    Providers without an API key are skipped, as are unknown names.

    Args:
        config: Settings to read keys, models and timeouts from.

    Returns:
        Ordered list of configured clients (possibly empty).
    """
    from neuracare.integrations.claude import ClaudeClient
    from neuracare.integrations.gemini import GeminiClient
    from neuracare.integrations.openai_client import OpenAIClient
    from neuracare.integrations.perplexity import PerplexityClient

    shared = {"max_tokens": config.ai_max_tokens, "temperature": config.ai_temperature}
    factories = {
        AIProviderName.OPENAI: lambda: OpenAIClient(
            api_key=config.openai_api_key,
            model=config.openai_model,
            base_url=config.openai_base_url,
            timeout=config.openai_timeout_seconds,
            **shared,
        ),
        AIProviderName.PERPLEXITY: lambda: PerplexityClient(
            api_key=config.perplexity_api_key,
            model=config.perplexity_model,
            base_url=config.perplexity_base_url,
            timeout=config.perplexity_timeout_seconds,
            **shared,
        ),
        AIProviderName.GEMINI: lambda: GeminiClient(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            timeout=config.gemini_timeout_seconds,
            **shared,
        ),
        AIProviderName.CLAUDE: lambda: ClaudeClient(
            api_key=config.claude_api_key,
            model=config.claude_model,
            timeout=config.claude_timeout_seconds,
            **shared,
        ),
    }
    api_keys = {
        AIProviderName.OPENAI: config.openai_api_key,
        AIProviderName.PERPLEXITY: config.perplexity_api_key,
        AIProviderName.GEMINI: config.gemini_api_key,
        AIProviderName.CLAUDE: config.claude_api_key,
    }

    clients: list[BaseAIClient] = []
    for raw_name in config.ai_provider_order:
        try:
            name = AIProviderName(raw_name.strip().lower())
        except ValueError:
            logger.warning("Ignoring unknown AI provider", provider=raw_name)
            continue
        if not api_keys[name]:
            logger.info("AI provider not configured, skipping", provider=name.value)
            continue
        if any(c.name == name for c in clients):
            continue
        clients.append(factories[name]())

    logger.info(
        "AI providers configured",
        providers=[c.name for c in clients],
    )
    return clients
