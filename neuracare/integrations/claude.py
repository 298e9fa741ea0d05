"""Claude (Anthropic) client.

Implements the BaseAIClient interface with the Anthropic Messages API.
"""

import anthropic

from neuracare.logging_config import get_logger
from neuracare.schemas.ai_response import AIResponse, AIUsage, InsightContext
from neuracare.services.ai_client import AIProviderName, BaseAIClient

logger = get_logger(__name__)


class ClaudeClient(BaseAIClient):
    """Claude client using the Anthropic SDK."""

    name = AIProviderName.CLAUDE

    def system_prompt(self, context: InsightContext) -> str:
        return (
            "You are NeuraCare's wellness assistant. Offer 2-3 empathetic, "
            "practical insights. Never diagnose. User context: "
            f"mood={context.mood}, stress_level={context.stress_level}, "
            f"burnout_keywords={context.keyword_count}."
        )

    async def generate(self, prompt: str, context: InsightContext) -> AIResponse:
        """Generate an insight with the Messages API."""
        client = anthropic.AsyncAnthropic(
            api_key=self._api_key,
            timeout=self.timeout,
            max_retries=0,
        )

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=self.system_prompt(context),
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AuthenticationError:
            logger.error("Provider authentication failed", provider=self.name)
            raise
        except anthropic.RateLimitError:
            logger.warning("Provider rate limited", provider=self.name)
            raise
        except anthropic.APIConnectionError as e:
            logger.warning("Provider connection error", provider=self.name, error=str(e))
            raise

        content = response.content[0].text if response.content else ""

        usage = AIUsage()
        if response.usage:
            usage = AIUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        return AIResponse(
            content=content,
            model=response.model,
            provider=self.name,
            usage=usage,
        )
