"""Typer CLI definition for VoxTube."""

import asyncio
import logging
from datetime import datetime

import typer

from .cache import CacheStore, EvictionManager, HistoryIndex, VideoMetadata
from .config import VoxTubeConfig, load_config
from .errors import ConfigError, SummarizerError, TranscriptError
from .llm import create_summarizer
from .pipeline import ArtifactPipeline
from .tts import known_voice_ids
from .youtube import fetch_transcript, is_valid_video_id

app = typer.Typer(help="Summarize and listen to YouTube videos")

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure root logging for CLI and server runs."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(debug: bool) -> VoxTubeConfig:
    try:
        return load_config()
    except ConfigError as e:
        if debug:
            typer.echo(f"Debug - Config error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _store(config: VoxTubeConfig) -> CacheStore:
    return CacheStore(config.cache.dir, config.cache.ttl_seconds)


def format_size(total_bytes: int) -> str:
    """Human-readable size in MB with two decimals."""
    return f"{total_bytes / 1024 / 1024:.2f} MB"


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (from config if omitted)"),
    port: int | None = typer.Option(None, "--port", help="Port (from config if omitted)"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging"),
) -> None:
    """Run the HTTP API and web UI."""
    import uvicorn

    from .server import create_app

    configure_logging(debug)
    config = _load(debug)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    typer.echo(f"VoxTube starting on http://{bind_host}:{bind_port}")

    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_level="debug" if debug else "info",
    )


async def _summarize(config: VoxTubeConfig, url_or_id: str) -> str:
    transcript = await fetch_transcript(
        url_or_id,
        yt_cli_path=config.youtube.yt_cli_path,
        max_length=config.youtube.max_transcript_length,
        timeout=config.youtube.timeout_seconds,
    )

    store = _store(config)
    cached = await store.read_summary(transcript.video_id)
    if cached is not None:
        return cached.summary

    pipeline = ArtifactPipeline(store, summarizer=create_summarizer(config.llm))
    outcome = await pipeline.get_summary(
        transcript.video_id, transcript.text, transcript.metadata or VideoMetadata()
    )
    return outcome.record.summary


@app.command()
def summarize(
    url: str = typer.Argument(..., help="YouTube URL or video ID"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Fetch a transcript and print its (cached) summary."""
    if debug:
        configure_logging(debug)
    config = _load(debug)

    try:
        summary = asyncio.run(_summarize(config, url))
    except TranscriptError as e:
        if debug:
            typer.echo(f"Debug - Transcript error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except SummarizerError as e:
        if debug:
            typer.echo(f"Debug - Summarizer error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(summary)


@app.command()
def history() -> None:
    """List cached videos, most recent first."""
    config = _load(False)
    entries = asyncio.run(HistoryIndex(_store(config), known_voice_ids()).list())

    if not entries:
        typer.echo("No cached videos")
        return

    for entry in entries:
        when = datetime.fromtimestamp(entry.created_at / 1000).strftime("%Y-%m-%d %H:%M")
        audio = " [audio]" if entry.has_audio else ""
        duration = f" ({entry.duration})" if entry.duration else ""
        typer.echo(
            f"{when}  {entry.video_id}  {entry.title} - {entry.channel}{duration}{audio}"
        )


@app.command()
def delete(
    video_id: str = typer.Argument(..., help="Video ID to remove from the cache"),
) -> None:
    """Delete a video's summary and audio from the cache."""
    if not is_valid_video_id(video_id):
        typer.echo("Error: Invalid video ID format", err=True)
        raise typer.Exit(1)

    config = _load(False)
    result = asyncio.run(
        HistoryIndex(_store(config), known_voice_ids()).delete_video(video_id)
    )
    typer.echo(f"Deleted {result.deleted} cached files for {video_id}")


@app.command()
def sweep() -> None:
    """Run one eviction pass over the cache directory."""
    config = _load(False)
    manager = EvictionManager(_store(config), config.cache.cleanup_interval_hours)
    result = asyncio.run(manager.sweep_once())
    typer.echo(f"Deleted {result.deleted} expired files ({result.errors} errors)")


@app.command()
def stats() -> None:
    """Show the number and size of cached audio files."""
    config = _load(False)
    result = asyncio.run(_store(config).stats())
    typer.echo(f"Cache: {config.cache.dir}")
    typer.echo(f"Audio files: {result.file_count}")
    typer.echo(f"Total size: {format_size(result.total_bytes)}")
