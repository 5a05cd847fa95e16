"""Provider lookup: the one place that maps a vendor name to an adapter."""

from __future__ import annotations

from collections.abc import Callable

from ytnotes.errors import ErrorCode, InputError
from ytnotes.extraction.providers.anthropic_provider import AnthropicProvider
from ytnotes.extraction.providers.base import ProviderAdapter
from ytnotes.extraction.providers.openai_provider import OpenAIProvider
from ytnotes.pipeline_config import Provider

PROVIDERS: dict[Provider, Callable[[str], ProviderAdapter]] = {
    Provider.OPENAI: OpenAIProvider,
    Provider.ANTHROPIC: AnthropicProvider,
}


def resolve_provider(name: str | Provider) -> Provider:
    """Normalise *name* to a :class:`Provider`, rejecting unknown vendors."""
    try:
        return Provider(name)
    except ValueError:
        raise InputError(
            f"Invalid AI provider: {name!r}", ErrorCode.UNSUPPORTED_PROVIDER
        ) from None


def get_provider(name: str | Provider, api_key: str) -> ProviderAdapter:
    """Build the adapter for *name*, authenticated with the caller's *api_key*."""
    return PROVIDERS[resolve_provider(name)](api_key)
