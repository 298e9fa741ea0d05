"""Perplexity client.

Perplexity speaks the OpenAI chat-completions protocol, so this only
changes the endpoint and the system prompt.
"""

import json

from neuracare.integrations.openai_client import OpenAIClient
from neuracare.schemas.ai_response import InsightContext
from neuracare.services.ai_client import AIProviderName


class PerplexityClient(OpenAIClient):
    """Perplexity client over the OpenAI SDK."""

    name = AIProviderName.PERPLEXITY

    def system_prompt(self, context: InsightContext) -> str:
        return (
            "You are NeuraCare's AI wellness companion. Analyze mental health "
            "patterns and provide personalized recommendations. Context: "
            f"{json.dumps(context.model_dump())}"
        )
