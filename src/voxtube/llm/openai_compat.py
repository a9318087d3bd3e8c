"""Summarizer for OpenAI-compatible chat completion APIs."""

import logging
from typing import Any

import httpx

from ..cache.models import VideoMetadata
from ..config import LLMConfig
from ..errors import SummarizerError
from .base import Summarizer, SummaryResult
from .prompts import build_prompt

logger = logging.getLogger(__name__)


def _message_text(content: Any) -> str:
    """Chat content may be a string or a list of typed text parts."""
    if isinstance(content, list):
        return "".join(
            part.get("text") or "" for part in content if isinstance(part, dict)
        ).strip()
    if isinstance(content, str):
        return content.strip()
    return ""


class OpenAICompatSummarizer(Summarizer):
    """Summarizer that POSTs to `{base_url}/chat/completions`."""

    def __init__(
        self,
        config: LLMConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            config: LLM configuration (base URL, model, API key, timeout)
            transport: Optional httpx transport (tests inject a MockTransport)

        Raises:
            SummarizerError: If no API key is configured
        """
        if not config.api_key:
            raise SummarizerError(
                "LLM_API_KEY is required when LLM_PROVIDER=openai_compat"
            )
        self.config = config
        self.url = f"{config.base_url.rstrip('/')}/chat/completions"
        self._transport = transport

    async def summarize(
        self, transcript: str, metadata: VideoMetadata | None = None
    ) -> SummaryResult:
        body = {
            "model": self.config.model,
            "temperature": 0.2,
            "messages": [
                {"role": "system", "content": build_prompt(metadata)},
                {"role": "user", "content": f"TRANSCRIPT:\n{transcript}"},
            ],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_ms / 1000, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                )
        except httpx.HTTPError as e:
            raise SummarizerError(f"LLM request failed: {e}", e) from e

        try:
            parsed = response.json() if response.content else {}
        except ValueError:
            parsed = {}
        if not isinstance(parsed, dict):
            parsed = {}

        if response.status_code >= 400:
            error = parsed.get("error")
            detail = (error.get("message") if isinstance(error, dict) else None) or (
                response.text or f"HTTP {response.status_code}"
            )
            raise SummarizerError(f"LLM provider error ({response.status_code}): {detail}")

        choices = parsed.get("choices") or [{}]
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        summary = _message_text(message.get("content"))
        if not summary:
            raise SummarizerError("LLM provider returned empty summary")

        usage = parsed.get("usage") or {}
        model = parsed.get("model") or self.config.model
        logger.debug(f"Summary generated by {model}")

        return SummaryResult(
            summary=summary,
            model=model,
            input_tokens=usage.get("prompt_tokens") or 0,
            output_tokens=usage.get("completion_tokens") or 0,
        )
