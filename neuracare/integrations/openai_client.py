"""OpenAI chat-completions client.

Implements the BaseAIClient interface using the message-array protocol.
"""

from typing import Any

import openai

from neuracare.exceptions import ProviderError
from neuracare.logging_config import get_logger
from neuracare.schemas.ai_response import AIResponse, AIUsage, InsightContext
from neuracare.services.ai_client import AIProviderName, BaseAIClient

logger = get_logger(__name__)


class OpenAIClient(BaseAIClient):
    """OpenAI client using the OpenAI SDK.

    Also serves OpenAI-compatible endpoints through ``base_url``.
    """

    name = AIProviderName.OPENAI

    def system_prompt(self, context: InsightContext) -> str:
        return (
            "You are an AI wellness assistant for NeuraCare. Provide empathetic, "
            "actionable mental health insights. User context: "
            f"mood={context.mood}, stress_level={context.stress_level}."
        )

    def build_messages(self, prompt: str, context: InsightContext) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": self.system_prompt(context)},
            {"role": "user", "content": prompt},
        ]

    async def generate(self, prompt: str, context: InsightContext) -> AIResponse:
        """Generate an insight with the Chat Completions API."""
        # Retries are the failover client's job, not the SDK's.
        client = openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self.timeout,
            max_retries=0,
        )

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(prompt, context),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.AuthenticationError:
            logger.error("Provider authentication failed", provider=self.name)
            raise
        except openai.RateLimitError:
            logger.warning("Provider rate limited", provider=self.name)
            raise
        except openai.APIConnectionError as e:
            logger.warning("Provider connection error", provider=self.name, error=str(e))
            raise

        if not response.choices:
            raise ProviderError(self.name, "response has no choices")
        content = response.choices[0].message.content or ""

        usage = AIUsage()
        if response.usage:
            usage = AIUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens or 0,
            )

        return AIResponse(
            content=content,
            model=response.model or self.model,
            provider=self.name,
            usage=usage,
        )
