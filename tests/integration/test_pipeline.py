"""Integration tests for the cache-first artifact pipeline."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from voxtube.cache import CacheStore, VideoMetadata
from voxtube.errors import SummarizerError, TTSAPIError
from voxtube.llm import Summarizer, SummaryResult
from voxtube.pipeline import ArtifactPipeline
from voxtube.tts import SynthesisResult

VIDEO_ID = "dQw4w9WgXcQ"


class FakeSummarizer(Summarizer):
    """Counts calls and optionally blocks until released."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.gate: asyncio.Event | None = None

    async def summarize(self, transcript, metadata=None) -> SummaryResult:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise SummarizerError("provider down")
        return SummaryResult(summary=f"summary of {transcript}", model="fake-model")


class FakeSynthesizer:
    """Stands in for KokoroClient."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.gate: asyncio.Event | None = None

    async def synthesize(self, text: str, voice: str) -> SynthesisResult:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise TTSAPIError("TTS server not available. Is Kokoro running?")
        return SynthesisResult(audio=f"{voice}:{text}".encode())


class TestSummaryPipeline:
    """Test get-or-generate for summaries."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, store: CacheStore) -> None:
        """
        INVARIANT: Second request within the TTL is served from cache
        BREAKS: Every page load pays for another LLM call
        """
        summarizer = FakeSummarizer()
        pipeline = ArtifactPipeline(store, summarizer=summarizer)
        metadata = VideoMetadata(title="T", channel="C")

        first = await pipeline.get_summary(VIDEO_ID, "words", metadata)
        second = await pipeline.get_summary(VIDEO_ID, "words", metadata)

        assert first.cached is False
        assert second.cached is True
        assert first.record.summary == second.record.summary == "summary of words"
        assert second.record.model == "fake-model"
        assert second.record.metadata == metadata
        assert summarizer.calls == 1

    @pytest.mark.asyncio
    async def test_failure_not_cached(self, store: CacheStore) -> None:
        pipeline = ArtifactPipeline(store, summarizer=FakeSummarizer(fail=True))

        with pytest.raises(SummarizerError):
            await pipeline.get_summary(VIDEO_ID, "words")

        assert await store.read_summary(VIDEO_ID) is None

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_call(self, store: CacheStore) -> None:
        summarizer = FakeSummarizer()
        summarizer.gate = asyncio.Event()
        pipeline = ArtifactPipeline(store, summarizer=summarizer)

        tasks = [
            asyncio.create_task(pipeline.get_summary(VIDEO_ID, "words")) for _ in range(4)
        ]
        await asyncio.sleep(0.05)
        summarizer.gate.set()
        outcomes = await asyncio.gather(*tasks)

        assert summarizer.calls == 1
        assert {outcome.record.summary for outcome in outcomes} == {"summary of words"}

    @pytest.mark.asyncio
    async def test_unwritable_cache_still_returns_summary(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        store = CacheStore(blocker, ttl_seconds=3600)
        pipeline = ArtifactPipeline(store, summarizer=FakeSummarizer())

        outcome = await pipeline.get_summary(VIDEO_ID, "words")

        assert outcome.cached is False
        assert outcome.record.summary == "summary of words"

    @pytest.mark.asyncio
    async def test_miss_without_summarizer(self, store: CacheStore) -> None:
        with pytest.raises(RuntimeError):
            await ArtifactPipeline(store).get_summary(VIDEO_ID, "words")


class TestAudioPipeline:
    """Test get-or-generate for synthesized audio."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, store: CacheStore) -> None:
        synthesizer = FakeSynthesizer()
        pipeline = ArtifactPipeline(store, synthesizer=synthesizer)

        first = await pipeline.get_audio(VIDEO_ID, "hello", "af_sky")
        second = await pipeline.get_audio(VIDEO_ID, "hello", "af_sky")

        assert first.cached is False
        assert second.cached is True
        assert first.audio == second.audio == b"af_sky:hello"
        assert second.content_type == "audio/mpeg"
        assert synthesizer.calls == 1

    @pytest.mark.asyncio
    async def test_voices_cached_separately(self, store: CacheStore) -> None:
        synthesizer = FakeSynthesizer()
        pipeline = ArtifactPipeline(store, synthesizer=synthesizer)

        await pipeline.get_audio(VIDEO_ID, "hello", "af_sky")
        other = await pipeline.get_audio(VIDEO_ID, "hello", "am_adam")

        assert other.cached is False
        assert other.audio == b"am_adam:hello"
        assert synthesizer.calls == 2

    @pytest.mark.asyncio
    async def test_failure_not_cached(self, store: CacheStore) -> None:
        pipeline = ArtifactPipeline(store, synthesizer=FakeSynthesizer(fail=True))

        with pytest.raises(TTSAPIError):
            await pipeline.get_audio(VIDEO_ID, "hello", "af_sky")

        assert await store.read_audio(VIDEO_ID, "af_sky") is None
        assert await store.list_files() == []

    @pytest.mark.asyncio
    async def test_unwritable_cache_still_returns_audio(self, tmp_path: Path) -> None:
        """
        INVARIANT: Synthesized audio reaches the caller even when caching it fails
        BREAKS: A full or broken cache disk turns every synthesis into a 500
        """
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        store = CacheStore(blocker, ttl_seconds=3600)
        synthesizer = FakeSynthesizer()
        pipeline = ArtifactPipeline(store, synthesizer=synthesizer)

        outcome = await pipeline.get_audio(VIDEO_ID, "hello", "af_sky")

        assert outcome.cached is False
        assert outcome.audio == b"af_sky:hello"
        assert synthesizer.calls == 1
        assert await store.read_audio(VIDEO_ID, "af_sky") is None

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_call(self, store: CacheStore) -> None:
        """
        INVARIANT: Concurrent misses for one key make one upstream call
        BREAKS: Several tabs opening one video overload the TTS server
        """
        synthesizer = FakeSynthesizer()
        synthesizer.gate = asyncio.Event()
        pipeline = ArtifactPipeline(store, synthesizer=synthesizer)

        tasks = [
            asyncio.create_task(pipeline.get_audio(VIDEO_ID, "hello", "af_sky"))
            for _ in range(5)
        ]
        await asyncio.sleep(0.05)
        synthesizer.gate.set()
        outcomes = await asyncio.gather(*tasks)

        assert synthesizer.calls == 1
        assert all(outcome.audio == b"af_sky:hello" for outcome in outcomes)
