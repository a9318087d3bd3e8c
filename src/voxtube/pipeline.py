"""Cache-first pipeline for summaries and synthesized audio.

Coordinates CacheStore, the summarizer and the speech synthesizer so the
HTTP routes and the CLI share one get-or-generate workflow.
"""

import logging
from dataclasses import dataclass

from .cache import CacheStore, SingleFlight, SummaryRecord, VideoMetadata
from .cache.keys import audio_key, summary_key
from .llm import Summarizer
from .tts import KokoroClient

logger = logging.getLogger(__name__)


@dataclass
class SummaryOutcome:
    """Summary record plus whether it came from the cache."""

    record: SummaryRecord
    cached: bool


@dataclass
class AudioOutcome:
    """Audio bytes plus whether they came from the cache."""

    audio: bytes
    content_type: str
    cached: bool


class ArtifactPipeline:
    """Get-or-generate workflow for per-video artifacts.

    On a cache miss the expensive collaborator runs inside a SingleFlight,
    so concurrent misses for the same key share one upstream call. Only a
    successful result is written to the cache. A failed cache write is
    logged and the fresh result is still returned.

    Example:
        pipeline = ArtifactPipeline(store, summarizer, synthesizer)

        outcome = await pipeline.get_summary(video_id, transcript, metadata)
        # outcome.cached is True on the second call

        audio = await pipeline.get_audio(video_id, text, "af_sky")
    """

    def __init__(
        self,
        store: CacheStore,
        summarizer: Summarizer | None = None,
        synthesizer: KokoroClient | None = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            store: Artifact cache
            summarizer: LLM provider (required for get_summary misses)
            synthesizer: TTS client (required for get_audio misses)
        """
        self.store = store
        self.summarizer = summarizer
        self.synthesizer = synthesizer
        self._flights = SingleFlight()

    async def get_summary(
        self,
        video_id: str,
        transcript: str,
        metadata: VideoMetadata | None = None,
    ) -> SummaryOutcome:
        """Return the cached summary or generate and cache a new one.

        Raises:
            SummarizerError: If generation fails (nothing is cached)
            RuntimeError: If no summarizer is configured on a miss
        """
        cached = await self.store.read_summary(video_id)
        if cached is not None:
            logger.info(f"Summary cache hit for {video_id}")
            return SummaryOutcome(record=cached, cached=True)

        async def generate() -> SummaryRecord:
            if self.summarizer is None:
                raise RuntimeError("No summarizer configured")

            logger.info(f"Generating summary for {video_id}")
            result = await self.summarizer.summarize(transcript, metadata)

            if not await self.store.write_summary(
                video_id, result.summary, result.model, metadata
            ):
                logger.warning(f"Summary for {video_id} was not cached")

            record = await self.store.read_summary(video_id)
            if record is None:
                # Cache unavailable; serve what was generated
                record = SummaryRecord(
                    video_id=video_id,
                    summary=result.summary,
                    model=result.model,
                    created_at=int(self.store.clock() * 1000),
                    metadata=metadata or VideoMetadata(),
                )
            return record

        record = await self._flights.run(summary_key(video_id), generate)
        return SummaryOutcome(record=record, cached=False)

    async def get_audio(self, video_id: str, text: str, voice: str) -> AudioOutcome:
        """Return cached audio or synthesize and cache new audio.

        Raises:
            TTSError: If synthesis fails (nothing is cached)
            RuntimeError: If no synthesizer is configured on a miss
        """
        key = audio_key(video_id, voice)

        cached = await self.store.read_audio(video_id, voice)
        if cached is not None:
            logger.info(f"Audio cache hit: {key}")
            return AudioOutcome(audio=cached, content_type="audio/mpeg", cached=True)

        async def generate() -> AudioOutcome:
            if self.synthesizer is None:
                raise RuntimeError("No synthesizer configured")

            logger.info(f"Synthesizing {video_id} with voice {voice}")
            result = await self.synthesizer.synthesize(text, voice)

            if await self.store.write_audio(video_id, voice, result.audio):
                logger.info(f"Cached: {key}")
            return AudioOutcome(
                audio=result.audio, content_type=result.content_type, cached=False
            )

        return await self._flights.run(key, generate)
