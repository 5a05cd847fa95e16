"""Anthropic messages transport."""

from __future__ import annotations

from typing import Any

from anthropic import APIError, APIStatusError, AsyncAnthropic

from ytnotes.config import settings
from ytnotes.errors import MalformedResponseError, ProviderError
from ytnotes.extraction.prompts import PromptSpec
from ytnotes.extraction.providers.base import Attempt, ProviderAdapter, parse_json_object


def build_tool(prompt: PromptSpec) -> dict[str, Any]:
    """Tool definition whose input schema is the object we want back."""
    return {
        "name": prompt.name,
        "description": "Record the structured analysis. Call this once with the complete result.",
        "input_schema": prompt.schema,
    }


class AnthropicProvider(ProviderAdapter):
    """Analysis calls against the Anthropic messages API.

    Structured output is a forced tool call (``tool_choice`` naming the one
    tool offered); the fallback is a plain message whose text is parsed.
    """

    vendor = "anthropic"

    def __init__(self, api_key: str, model: str | None = None) -> None:
        super().__init__(model or settings.anthropic_model)
        self.client = AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
            timeout=settings.llm_timeout_seconds,
        )

    async def _complete(self, prompt: PromptSpec, structured: bool) -> Attempt:
        kwargs: dict[str, Any] = {}
        if structured:
            kwargs["tools"] = [build_tool(prompt)]
            kwargs["tool_choice"] = {"type": "tool", "name": prompt.name}

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=settings.max_output_tokens,
                system=prompt.system,
                messages=[{"role": "user", "content": prompt.user}],
                **kwargs,
            )
        except APIStatusError as exc:
            return Attempt(error=ProviderError(self.vendor, exc.message, exc.status_code))
        except APIError as exc:
            return Attempt(error=ProviderError(self.vendor, exc.message))

        if structured:
            return self._parse_tool_use(response, prompt.name)
        return self._parse_text(response)

    def _parse_tool_use(self, response: Any, tool_name: str) -> Attempt:
        """Pull the forced tool call's input out of the response."""
        for block in response.content:
            if block.type != "tool_use" or block.name != tool_name:
                continue
            data = block.input
            if isinstance(data, str):
                return parse_json_object(self.vendor, data)
            if isinstance(data, dict):
                return Attempt(payload=data)
            return Attempt(error=MalformedResponseError(self.vendor, "tool input is not an object"))
        return Attempt(error=MalformedResponseError(self.vendor, f"no {tool_name} tool call in response"))

    def _parse_text(self, response: Any) -> Attempt:
        text = "".join(block.text for block in response.content if block.type == "text")
        if not text.strip():
            return Attempt(error=MalformedResponseError(self.vendor, "empty response"))
        return parse_json_object(self.vendor, text)
