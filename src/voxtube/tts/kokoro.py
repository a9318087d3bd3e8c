"""Kokoro TTS client for the OpenAI-compatible speech endpoint."""

import logging

import httpx

from ..errors import TTSAPIError, TTSError
from .models import SynthesisResult, is_valid_voice
from .text import clean_transcript

logger = logging.getLogger(__name__)


class KokoroClient:
    """Client for a local Kokoro server (`POST /v1/audio/speech`).

    Example:
        client = KokoroClient("http://localhost:8880")
        result = await client.synthesize("Hello there", "af_sky")
        Path("hello.mp3").write_bytes(result.audio)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8880",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Kokoro client.

        Args:
            base_url: Kokoro server root URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def synthesize(self, text: str, voice: str) -> SynthesisResult:
        """Convert text to MP3 audio.

        Args:
            text: Text to speak; caption artifacts are stripped first
            voice: Known Kokoro voice ID

        Returns:
            Audio bytes and their content type

        Raises:
            TTSError: If the voice is unknown or nothing is left to speak
            TTSAPIError: If the server is unreachable or answers with an error
        """
        if not is_valid_voice(voice):
            raise TTSError(f"Invalid voice: {voice}")

        cleaned = clean_transcript(text)
        if not cleaned:
            raise TTSError("No text to synthesize after cleaning")

        payload = {
            "model": "kokoro",
            "input": cleaned,
            "voice": voice,
            "response_format": "mp3",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/v1/audio/speech", json=payload
                )
        except httpx.ConnectError as e:
            logger.error(f"Kokoro server unreachable at {self.base_url}: {e}")
            raise TTSAPIError(
                "TTS server not available. Is Kokoro running?", original_error=e
            ) from e
        except httpx.TimeoutException as e:
            raise TTSAPIError(
                f"TTS request timed out after {self.timeout:g}s", original_error=e
            ) from e
        except httpx.HTTPError as e:
            raise TTSAPIError(f"TTS request failed: {e}", original_error=e) from e

        if response.status_code >= 400:
            logger.error(f"Kokoro TTS error ({response.status_code}): {response.text}")
            raise TTSAPIError(
                f"TTS server error: {response.status_code} - {response.text}",
                response.status_code,
            )

        if not response.content:
            raise TTSAPIError("No audio data received from TTS server")

        return SynthesisResult(
            audio=response.content,
            content_type=response.headers.get("content-type", "audio/mpeg"),
        )
