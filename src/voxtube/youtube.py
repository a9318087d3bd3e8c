"""YouTube URL validation and transcript fetching.

Transcripts come from an external CLI invoked with an argv list, never
through a shell, so the video ID cannot inject commands.
"""

import asyncio
import logging
import re
from dataclasses import dataclass

from .cache.models import VideoMetadata
from .errors import TranscriptError

logger = logging.getLogger(__name__)

YOUTUBE_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?"
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)"
    r"([a-zA-Z0-9_-]{11})(?:[&?].*)?$"
)
VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")


@dataclass
class Transcript:
    """Transcript text for one video."""

    video_id: str
    text: str
    metadata: VideoMetadata | None = None


def is_valid_video_id(value: str) -> bool:
    """True for an 11-character YouTube video ID."""
    return bool(value) and VIDEO_ID_RE.fullmatch(value) is not None


def extract_video_id(url_or_id: str) -> str | None:
    """Extract the video ID from a YouTube URL or bare ID.

    Args:
        url_or_id: Watch/short/embed URL, or an 11-character ID

    Returns:
        The video ID, or None if the input is not a YouTube reference
    """
    if not url_or_id:
        return None

    value = url_or_id.strip()
    match = YOUTUBE_URL_RE.match(value)
    if match:
        return match.group(1)

    if is_valid_video_id(value):
        return value

    return None


def is_valid_youtube_input(value: str) -> bool:
    """Validate that a string is a YouTube URL or video ID."""
    return extract_video_id(value) is not None


async def fetch_transcript(
    url_or_id: str,
    yt_cli_path: str = "yt",
    max_length: int = 50000,
    timeout: float = 60.0,
) -> Transcript:
    """Fetch the transcript for a YouTube video.

    Args:
        url_or_id: YouTube URL or video ID
        yt_cli_path: Transcript CLI executable
        max_length: Maximum accepted transcript length in characters
        timeout: Seconds to wait for the CLI

    Returns:
        Transcript with the resolved video ID

    Raises:
        TranscriptError: If the input is invalid or the transcript cannot be fetched
    """
    video_id = extract_video_id(url_or_id)
    if not video_id:
        raise TranscriptError("Invalid YouTube URL or video ID")

    try:
        proc = await asyncio.create_subprocess_exec(
            yt_cli_path,
            video_id,
            "--format",
            "text",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.error(f"Failed to start transcript CLI {yt_cli_path}: {e}")
        raise TranscriptError(
            f"Transcript CLI not available ({yt_cli_path}): {e}", e
        ) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise TranscriptError(
            f"Timed out fetching transcript after {timeout:g}s", e
        ) from e

    if proc.returncode != 0:
        error_text = stderr.decode("utf-8", errors="replace").strip()
        logger.error(f"yt CLI error (exit {proc.returncode}): {error_text}")
        raise TranscriptError(
            error_text or f"Failed to fetch transcript (exit code {proc.returncode})"
        )

    transcript = stdout.decode("utf-8", errors="replace").strip()
    if not transcript:
        raise TranscriptError("No transcript available for this video")

    if len(transcript) > max_length:
        raise TranscriptError(
            f"Transcript too long ({len(transcript)} chars, max {max_length})"
        )

    return Transcript(video_id=video_id, text=transcript)
