"""OpenAI chat-completions transport."""

from __future__ import annotations

from typing import Any

from openai import APIError, APIStatusError, AsyncOpenAI

from ytnotes.config import settings
from ytnotes.errors import MalformedResponseError, ProviderError
from ytnotes.extraction.prompts import PromptSpec
from ytnotes.extraction.providers.base import Attempt, ProviderAdapter, parse_json_object

# Structured output: JSON mode. The prompt itself quotes the expected shape.
JSON_RESPONSE_FORMAT: dict[str, Any] = {"type": "json_object"}


class OpenAIProvider(ProviderAdapter):
    """Analysis calls against the OpenAI chat completions API."""

    vendor = "openai"

    def __init__(self, api_key: str, model: str | None = None) -> None:
        super().__init__(model or settings.openai_model)
        # No SDK-level retries: the only degradation is structured -> plain.
        self.client = AsyncOpenAI(
            api_key=api_key,
            max_retries=0,
            timeout=settings.llm_timeout_seconds,
        )

    async def _complete(self, prompt: PromptSpec, structured: bool) -> Attempt:
        kwargs: dict[str, Any] = {}
        if structured:
            kwargs["response_format"] = JSON_RESPONSE_FORMAT

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                **kwargs,
            )
        except APIStatusError as exc:
            return Attempt(error=ProviderError(self.vendor, exc.message, exc.status_code))
        except APIError as exc:
            # Connection errors and timeouts carry no HTTP status.
            return Attempt(error=ProviderError(self.vendor, exc.message))

        content = response.choices[0].message.content if response.choices else None
        if not content:
            return Attempt(error=MalformedResponseError(self.vendor, "empty response"))
        return parse_json_object(self.vendor, content)
