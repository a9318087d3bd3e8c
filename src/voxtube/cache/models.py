"""Data models for cache storage."""

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class VideoMetadata:
    """Optional descriptive fields carried alongside a summary.

    Attributes:
        title: Video title
        channel: Channel name
        duration: Human-readable duration (e.g., "12:34")
    """

    title: str | None = None
    channel: str | None = None
    duration: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("title", self.title),
                ("channel", self.channel),
                ("duration", self.duration),
            )
            if value is not None
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "VideoMetadata":
        """Parse the stored metadata object.

        Raises:
            ValueError: If data is not an object or a field is not a string
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("Summary record metadata must be a JSON object")
        values = {key: data.get(key) for key in ("title", "channel", "duration")}
        for key, value in values.items():
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Summary record metadata {key} must be a string")
        return cls(**values)


@dataclass
class SummaryRecord:
    """Cached LLM summary for a video.

    Serialized to `<digest(videoId)>_summary.json` as
    `{"videoId", "summary", "metadata", "model", "createdAt"}`.

    Attributes:
        video_id: YouTube video ID
        summary: Markdown summary text
        model: Name of the model that produced the summary
        created_at: Creation time in epoch milliseconds
        metadata: Title/channel/duration supplied at write time
    """

    video_id: str
    summary: str
    model: str
    created_at: int
    metadata: VideoMetadata = field(default_factory=VideoMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "videoId": self.video_id,
            "summary": self.summary,
            "metadata": self.metadata.to_dict(),
            "model": self.model,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SummaryRecord":
        """Parse a stored record.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Summary record must be a JSON object")
        try:
            video_id = data["videoId"]
            summary = data["summary"]
            model = data["model"]
            created_at = data["createdAt"]
        except KeyError as e:
            raise ValueError(f"Summary record missing field: {e}") from None
        if not isinstance(video_id, str) or not isinstance(summary, str):
            raise ValueError("Summary record videoId and summary must be strings")
        if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
            raise ValueError("Summary record createdAt must be a number")
        if not math.isfinite(created_at):
            raise ValueError("Summary record createdAt must be finite")
        return cls(
            video_id=video_id,
            summary=summary,
            model=str(model),
            created_at=int(created_at),
            metadata=VideoMetadata.from_dict(data.get("metadata")),
        )


@dataclass
class HistoryEntry:
    """Projection of a non-expired SummaryRecord for the history list."""

    video_id: str
    title: str
    channel: str
    duration: str
    created_at: int
    has_audio: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "videoId": self.video_id,
            "title": self.title,
            "channel": self.channel,
            "duration": self.duration,
            "createdAt": self.created_at,
            "hasAudio": self.has_audio,
        }


@dataclass
class CacheStats:
    """Aggregate size of the cached audio artifacts."""

    file_count: int = 0
    total_bytes: int = 0


@dataclass
class SweepResult:
    """Outcome of one eviction pass."""

    deleted: int = 0
    errors: int = 0


@dataclass
class DeleteResult:
    """Outcome of a per-video delete."""

    deleted: int = 0
