"""Gemini client.

Uses the single-prompt ``generateContent`` REST endpoint over httpx.
"""

import json
from typing import Any

import httpx

from neuracare.exceptions import ProviderError
from neuracare.logging_config import get_logger
from neuracare.schemas.ai_response import AIResponse, AIUsage, InsightContext
from neuracare.services.ai_client import AIProviderName, BaseAIClient

logger = get_logger(__name__)


class GeminiClient(BaseAIClient):
    """Gemini client for the Generative Language API."""

    name = AIProviderName.GEMINI

    def build_prompt(self, prompt: str, context: InsightContext) -> str:
        return (
            "As NeuraCare's AI wellness assistant, analyze this mental health "
            "reflection and provide personalized insights.\n\n"
            f"User Context: {json.dumps(context.model_dump())}\n"
            f"User Input: {prompt}\n\n"
            "Please provide empathetic, actionable recommendations for mental wellness."
        )

    def build_payload(self, prompt: str, context: InsightContext) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": self.build_prompt(prompt, context)}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
                "topP": 0.9,
                "topK": 40,
            },
        }

    async def generate(self, prompt: str, context: InsightContext) -> AIResponse:
        """Generate an insight with ``models/{model}:generateContent``."""
        url = f"{self._base_url}/models/{self.model}:generateContent"

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                url,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json=self.build_payload(prompt, context),
            )
            if resp.status_code >= 400:
                logger.warning(
                    "Provider returned error status",
                    provider=self.name,
                    status_code=resp.status_code,
                )
            resp.raise_for_status()
            data = resp.json()

        try:
            content = data["candidates"][0]["content"]["parts"][0].get("text") or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(self.name, "response has no candidate text") from e

        usage = AIUsage()
        metadata = data.get("usageMetadata") or {}
        if metadata:
            usage = AIUsage(
                input_tokens=metadata.get("promptTokenCount", 0),
                output_tokens=metadata.get("candidatesTokenCount", 0),
            )

        return AIResponse(
            content=content,
            model=data.get("modelVersion") or self.model,
            provider=self.name,
            usage=usage,
        )
