"""Deterministic cache filenames.

Filenames are SHA-256 hex digests of the logical identity, so the raw
video ID and voice never reach the filesystem.
"""

import hashlib

AUDIO_SUFFIX = ".mp3"
SUMMARY_SUFFIX = "_summary.json"
VOICE_INDEX_SUFFIX = "_voices.json"
TEMP_SUFFIX = ".tmp"

ARTIFACT_SUFFIXES = (AUDIO_SUFFIX, SUMMARY_SUFFIX, VOICE_INDEX_SUFFIX, TEMP_SUFFIX)

# Derived video ID under which narrated-summary audio is cached
NARRATED_SUMMARY_SUFFIX = "_summary"


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def audio_key(video_id: str, voice: str) -> str:
    """Filename of the audio artifact for (video_id, voice)."""
    if video_id is None or voice is None:
        raise ValueError("video_id and voice must be non-None")
    return _digest(f"{video_id}_{voice}") + AUDIO_SUFFIX


def summary_key(video_id: str) -> str:
    """Filename of the summary record for video_id."""
    if video_id is None:
        raise ValueError("video_id must be non-None")
    return _digest(video_id) + SUMMARY_SUFFIX


def voice_index_key(video_id: str) -> str:
    """Filename of the sidecar listing voices cached for video_id."""
    if video_id is None:
        raise ValueError("video_id must be non-None")
    return _digest(video_id) + VOICE_INDEX_SUFFIX


def is_artifact(filename: str) -> bool:
    """True for files the cache owns and the sweeper may evict."""
    return filename.endswith(ARTIFACT_SUFFIXES)


def is_expired(age_seconds: float, ttl_seconds: float) -> bool:
    """Expiry boundary shared by reads, sweeps and history: age >= ttl."""
    return age_seconds >= ttl_seconds
