"""History of processed videos, derived from cached summary records."""

import asyncio
import logging
import os
from collections.abc import Iterable

from .keys import (
    NARRATED_SUMMARY_SUFFIX,
    SUMMARY_SUFFIX,
    audio_key,
    summary_key,
    voice_index_key,
)
from .models import DeleteResult, HistoryEntry
from .store import CacheStore

logger = logging.getLogger(__name__)


class HistoryIndex:
    """Read-only, reverse-chronological view over summary records.

    Audio filenames are one-way digests, so the audio belonging to a video
    is found by recomputing candidate keys from the video's sidecar voice
    index plus the known voice list.
    """

    def __init__(self, store: CacheStore, known_voices: Iterable[str] = ()) -> None:
        self.store = store
        self.known_voices = tuple(known_voices)

    def _candidate_voices(self, video_id: str) -> list[str]:
        voices = list(self.known_voices)
        for voice in self.store.read_voice_index_sync(video_id):
            if voice not in voices:
                voices.append(voice)
        return voices

    def _audio_candidates(self, video_id: str) -> list[str]:
        filenames = []
        for variant in (video_id, video_id + NARRATED_SUMMARY_SUFFIX):
            for voice in self._candidate_voices(variant):
                filenames.append(audio_key(variant, voice))
        return filenames

    def _has_fresh_audio(self, video_id: str) -> bool:
        for filename in self._audio_candidates(video_id):
            try:
                st = self.store.path(filename).stat()
            except OSError:
                continue
            if not self.store.expired(st):
                return True
        return False

    def _list_sync(self) -> list[HistoryEntry]:
        try:
            entries = list(os.scandir(self.store.cache_dir))
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Cannot read history from {self.store.cache_dir}: {e}")
            return []

        history: list[HistoryEntry] = []
        for entry in entries:
            if not entry.name.endswith(SUMMARY_SUFFIX):
                continue
            try:
                # Filter only; deleting expired records is the sweeper's job
                if self.store.expired(entry.stat()):
                    continue
                with open(entry.path, "rb") as f:
                    record = self.store.decode_summary(f.read())
            except OSError:
                continue
            except (ValueError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping unreadable summary record {entry.name}: {e}")
                continue

            history.append(
                HistoryEntry(
                    video_id=record.video_id,
                    title=record.metadata.title or "Unknown Video",
                    channel=record.metadata.channel or "Unknown Channel",
                    duration=record.metadata.duration or "",
                    created_at=record.created_at,
                    has_audio=self._has_fresh_audio(record.video_id),
                )
            )

        history.sort(key=lambda item: (-item.created_at, item.video_id))
        return history

    async def list(self) -> list[HistoryEntry]:
        """List non-expired summaries, most recent first.

        Corrupt records are skipped rather than failing the whole listing.
        """
        return await asyncio.to_thread(self._list_sync)

    def _delete_sync(self, video_id: str) -> DeleteResult:
        result = DeleteResult()

        if self.store.delete_file_sync(summary_key(video_id)):
            result.deleted += 1

        for filename in self._audio_candidates(video_id):
            if self.store.delete_file_sync(filename):
                result.deleted += 1

        for variant in (video_id, video_id + NARRATED_SUMMARY_SUFFIX):
            self.store.delete_file_sync(voice_index_key(variant))

        return result

    async def delete_video(self, video_id: str) -> DeleteResult:
        """Remove the summary and every cached audio file for video_id.

        Covers both the plain transcript audio and the narrated-summary
        audio (cached under `{video_id}_summary`). Deleting nothing is a
        successful no-op.

        Returns:
            Number of summary and audio artifacts removed
        """
        result = await asyncio.to_thread(self._delete_sync, video_id)
        logger.info(f"Deleted {result.deleted} cached files for {video_id}")
        return result
