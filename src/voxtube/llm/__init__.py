"""Summarizer abstraction for LLM providers.

This module provides a registry pattern for managing summarization
providers, allowing runtime selection through configuration.
"""

from typing import ClassVar

from ..config import LLMConfig
from ..errors import SummarizerError
from .base import Summarizer, SummaryResult
from .cli import ClaudeCliSummarizer, CodexSummarizer
from .openai_compat import OpenAICompatSummarizer
from .prompts import build_prompt, summary_to_speech

__all__ = [
    "Summarizer",
    "SummarizerRegistry",
    "SummaryResult",
    "build_prompt",
    "create_summarizer",
    "summary_to_speech",
]


class SummarizerRegistry:
    """Registry for managing summarization providers.

    Maps the `llm.provider` config value to a Summarizer class.
    """

    _providers: ClassVar[dict[str, type[Summarizer]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[Summarizer]) -> None:
        """Register a summarizer under a provider name."""
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type[Summarizer]:
        """Get a provider class by name.

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def names(cls) -> list[str]:
        return list(cls._providers)


def create_summarizer(config: LLMConfig) -> Summarizer:
    """Instantiate the configured summarizer.

    Raises:
        SummarizerError: If the provider is unknown or cannot be configured
    """
    try:
        provider_class = SummarizerRegistry.get(config.provider)
    except KeyError:
        raise SummarizerError(
            f'Unsupported LLM_PROVIDER "{config.provider}". '
            f"Use one of: {', '.join(SummarizerRegistry.names())}."
        ) from None
    return provider_class(config)


SummarizerRegistry.register("openai_compat", OpenAICompatSummarizer)
SummarizerRegistry.register("claude_cli", ClaudeCliSummarizer)
SummarizerRegistry.register("codex", CodexSummarizer)
