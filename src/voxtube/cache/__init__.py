"""File-based artifact cache for VoxTube.

Caches synthesized audio and LLM summaries per video with TTL eviction,
and derives the history of processed videos from the cached summaries.
"""

from .eviction import EvictionManager
from .history import HistoryIndex
from .keys import audio_key, summary_key
from .models import (
    CacheStats,
    DeleteResult,
    HistoryEntry,
    SummaryRecord,
    SweepResult,
    VideoMetadata,
)
from .singleflight import SingleFlight
from .store import CacheStore

__all__ = [
    "CacheStats",
    "CacheStore",
    "DeleteResult",
    "EvictionManager",
    "HistoryEntry",
    "HistoryIndex",
    "SingleFlight",
    "SummaryRecord",
    "SweepResult",
    "VideoMetadata",
    "audio_key",
    "summary_key",
]
