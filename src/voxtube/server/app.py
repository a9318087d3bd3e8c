"""FastAPI application exposing the cache and its collaborators."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..cache import CacheStore, EvictionManager, HistoryIndex, VideoMetadata
from ..config import VoxTubeConfig
from ..errors import SummarizerError, TranscriptError, TTSError
from ..llm import Summarizer, create_summarizer, summary_to_speech
from ..pipeline import ArtifactPipeline
from ..tts import KokoroClient, get_voices, is_valid_voice, known_voice_ids
from ..youtube import fetch_transcript, is_valid_video_id, is_valid_youtube_input
from .schemas import SummarizeRequest, SynthesizeRequest, TranscriptRequest

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(
    config: VoxTubeConfig,
    *,
    store: CacheStore | None = None,
    summarizer: Summarizer | None = None,
    synthesizer: KokoroClient | None = None,
) -> FastAPI:
    """Build the VoxTube API.

    Collaborators default to those described by config; tests pass their
    own. Background eviction runs for the lifetime of the app.

    Args:
        config: Loaded configuration
        store: Optional pre-built cache store
        summarizer: Optional summarizer (created from config.llm if omitted)
        synthesizer: Optional TTS client (created from config.tts if omitted)
    """
    store = store or CacheStore(config.cache.dir, config.cache.ttl_seconds)
    history = HistoryIndex(store, known_voice_ids())
    eviction = EvictionManager(store, config.cache.cleanup_interval_hours)

    summarizer_error: str | None = None
    if summarizer is None:
        try:
            summarizer = create_summarizer(config.llm)
        except SummarizerError as e:
            summarizer_error = str(e)
            logger.warning(f"Summarization disabled: {e}")

    synthesizer = synthesizer or KokoroClient(
        config.tts.kokoro_url, timeout=config.tts.timeout_seconds
    )
    pipeline = ArtifactPipeline(store, summarizer, synthesizer)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        eviction.start()
        logger.info(f"VoxTube serving cache at {store.cache_dir}")
        try:
            yield
        finally:
            await eviction.stop()

    app = FastAPI(title="VoxTube", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.history = history
    app.state.eviction = eviction
    app.state.pipeline = pipeline

    @app.get("/api/health")
    async def health() -> dict:
        stats = await store.stats()
        return {
            "status": "ok",
            "timestamp": int(time.time() * 1000),
            "cache": {
                "files": stats.file_count,
                "sizeMB": round(stats.total_bytes / 1024 / 1024, 2),
            },
        }

    @app.get("/api/voices")
    async def voices() -> dict:
        return {"voices": [voice.to_dict() for voice in get_voices()]}

    @app.post("/api/transcript")
    async def transcript(body: TranscriptRequest) -> Response:
        if not body.url:
            return _error("Missing url parameter", 400)
        if not is_valid_youtube_input(body.url):
            return _error("Invalid YouTube URL or video ID", 400)

        try:
            result = await fetch_transcript(
                body.url,
                yt_cli_path=config.youtube.yt_cli_path,
                max_length=config.youtube.max_transcript_length,
                timeout=config.youtube.timeout_seconds,
            )
        except TranscriptError as e:
            return _error(str(e), 400)

        metadata = result.metadata or VideoMetadata()
        return JSONResponse(
            {
                "videoId": result.video_id,
                "transcript": result.text,
                "title": metadata.title,
                "channel": metadata.channel,
            }
        )

    @app.post("/api/summarize")
    async def summarize(body: SummarizeRequest) -> Response:
        if not body.videoId:
            return _error("videoId is required", 400)
        if not is_valid_video_id(body.videoId):
            return _error("Invalid video ID format", 400)
        if not body.transcript:
            return _error("transcript is required", 400)
        if pipeline.summarizer is None:
            return _error(summarizer_error or "Summarization is not configured", 500)

        metadata = VideoMetadata(
            title=body.title, channel=body.channel, duration=body.duration
        )
        try:
            outcome = await pipeline.get_summary(body.videoId, body.transcript, metadata)
        except SummarizerError as e:
            logger.error(f"Summarize error: {e}")
            return _error(str(e), 500)

        return JSONResponse(
            {
                "videoId": body.videoId,
                "summary": outcome.record.summary,
                "summaryForSpeech": summary_to_speech(outcome.record.summary),
                "cached": outcome.cached,
                "model": outcome.record.model,
            }
        )

    @app.post("/api/synthesize")
    async def synthesize(body: SynthesizeRequest) -> Response:
        if not body.videoId or not body.text or not body.voice:
            return _error("Missing required fields: videoId, text, voice", 400)

        # Narrated-summary audio is cached under "{videoId}_summary"
        base_id = body.videoId.removesuffix("_summary")
        if not is_valid_video_id(base_id):
            return _error("Invalid video ID format", 400)
        if not is_valid_voice(body.voice):
            return _error(f"Invalid voice: {body.voice}", 400)

        max_length = config.youtube.max_transcript_length
        if len(body.text) > max_length:
            return _error(
                f"Text too long ({len(body.text)} chars, max {max_length})", 400
            )

        try:
            outcome = await pipeline.get_audio(body.videoId, body.text, body.voice)
        except TTSError as e:
            return _error(str(e), 500)

        return Response(
            content=outcome.audio,
            media_type=outcome.content_type,
            headers={"X-Cache": "HIT" if outcome.cached else "MISS"},
        )

    @app.get("/api/history")
    async def list_history() -> dict:
        entries = await history.list()
        return {"history": [entry.to_dict() for entry in entries]}

    @app.delete("/api/history/{video_id}")
    async def delete_history(video_id: str) -> Response:
        if not is_valid_video_id(video_id):
            return _error("Invalid video ID format", 400)
        result = await history.delete_video(video_id)
        return JSONResponse({"success": True, "deleted": result.deleted})

    static_dir = config.server.static_dir
    if static_dir and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app
