"""File-based artifact store with TTL freshness checks.

Two artifact kinds share one flat directory: synthesized audio
(`<digest>.mp3`) and summary records (`<digest>_summary.json`). The file's
modification time is the only source of truth for its age; there is no
separate index that could drift from the directory contents.

Every write goes to a temp file in the cache directory and is moved into
place with os.replace, so readers see either the previous file or the
complete new one. Read paths turn filesystem errors into "absent" and
write paths turn them into a False return; nothing here raises on I/O.
"""

import asyncio
import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from .keys import (
    TEMP_SUFFIX,
    AUDIO_SUFFIX,
    audio_key,
    is_expired,
    summary_key,
    voice_index_key,
)
from .models import CacheStats, SummaryRecord, VideoMetadata

logger = logging.getLogger(__name__)


class CacheStore:
    """Owns the cache directory and every read, write and delete in it.

    Example:
        store = CacheStore(Path("./cache"), ttl_seconds=7 * 86400)

        audio = await store.read_audio("dQw4w9WgXcQ", "af_sky")
        if audio is None:
            audio = await synthesizer.synthesize(text, "af_sky")
            await store.write_audio("dQw4w9WgXcQ", "af_sky", audio)
    """

    def __init__(
        self,
        cache_dir: Path,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store. The directory is created on first write.

        Args:
            cache_dir: Cache root directory
            ttl_seconds: Maximum artifact age before it is treated as absent
            clock: Returns the current time in epoch seconds

        Raises:
            ValueError: If ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def path(self, filename: str) -> Path:
        return self.cache_dir / filename

    def age_of(self, st: os.stat_result) -> float:
        """Seconds since the file was last written."""
        return self.clock() - st.st_mtime

    def expired(self, st: os.stat_result) -> bool:
        return is_expired(self.age_of(st), self.ttl_seconds)

    # ------------------------------------------------------------------
    # Synchronous primitives (run in worker threads by the async API)
    # ------------------------------------------------------------------

    def _is_fresh_sync(self, filename: str, evict: bool = True) -> bool:
        path = self.path(filename)
        try:
            st = path.stat()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Cannot stat cache file {filename}: {e}")
            return False

        if self.expired(st):
            if evict:
                logger.debug(f"Lazy eviction of stale cache file {filename}")
                self._delete_sync(filename)
            return False

        return True

    def _read_sync(self, filename: str, evict: bool = True) -> bytes | None:
        if not self._is_fresh_sync(filename, evict):
            return None
        try:
            return self.path(filename).read_bytes()
        except OSError as e:
            logger.debug(f"Cache read failed for {filename}: {e}")
            return None

    def _write_atomic_sync(self, filename: str, data: bytes) -> None:
        """Write data under filename via temp file + rename.

        Raises:
            OSError: If the directory cannot be created or the write fails
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.cache_dir, prefix=".write-", suffix=TEMP_SUFFIX
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path(filename))
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def _delete_sync(self, filename: str) -> bool:
        try:
            self.path(filename).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to delete cache file {filename}: {e}")
            return False

    def _read_voice_index_sync(self, video_id: str, evict: bool = True) -> list[str]:
        raw = self._read_sync(voice_index_key(video_id), evict)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            voices = data.get("voices", []) if isinstance(data, dict) else []
        except (ValueError, UnicodeDecodeError):
            logger.warning(f"Ignoring corrupt voice index for {video_id}")
            return []
        return [v for v in voices if isinstance(v, str)]

    def _record_voice_sync(self, video_id: str, voice: str) -> None:
        voices = self._read_voice_index_sync(video_id)
        if voice not in voices:
            voices.append(voice)
        # Rewritten even when unchanged so the index never expires before its audio
        payload = json.dumps({"videoId": video_id, "voices": voices}).encode("utf-8")
        self._write_atomic_sync(voice_index_key(video_id), payload)

    @staticmethod
    def decode_summary(raw: bytes) -> SummaryRecord:
        """Parse a stored summary record.

        Raises:
            ValueError: If the content is not a valid record
        """
        return SummaryRecord.from_dict(json.loads(raw))

    # ------------------------------------------------------------------
    # Blocking helpers for callers already running in a worker thread
    # ------------------------------------------------------------------

    def read_voice_index_sync(self, video_id: str) -> list[str]:
        """Voices recorded in video_id's sidecar index.

        A stale index is ignored but left on disk for the sweeper.
        """
        return self._read_voice_index_sync(video_id, evict=False)

    def delete_file_sync(self, filename: str) -> bool:
        """Delete one cache file by exact name; True if a file was removed."""
        return self._delete_sync(filename)

    # ------------------------------------------------------------------
    # Public async API
    # ------------------------------------------------------------------

    async def is_fresh(self, filename: str) -> bool:
        """True iff filename exists and is younger than the TTL.

        A stale file is deleted before returning False.
        """
        return await asyncio.to_thread(self._is_fresh_sync, filename)

    async def read_audio(self, video_id: str, voice: str) -> bytes | None:
        """Return cached audio bytes, or None on miss or expiry."""
        return await asyncio.to_thread(self._read_sync, audio_key(video_id, voice))

    async def write_audio(self, video_id: str, voice: str, audio: bytes) -> bool:
        """Cache audio bytes for (video_id, voice).

        Also records the voice in the video's sidecar index so per-video
        deletion can find it later.

        Returns:
            True if the audio is now readable from the cache, False otherwise
        """
        filename = audio_key(video_id, voice)
        try:
            await asyncio.to_thread(self._write_atomic_sync, filename, audio)
        except OSError as e:
            logger.error(f"Failed to write audio cache {filename}: {e}")
            return False

        try:
            await asyncio.to_thread(self._record_voice_sync, video_id, voice)
        except OSError as e:
            logger.warning(f"Failed to update voice index for {video_id}: {e}")

        logger.debug(f"Cached audio {filename} ({len(audio)} bytes)")
        return True

    async def read_voice_index(self, video_id: str) -> list[str]:
        """Voices whose audio was cached for video_id (best effort)."""
        return await asyncio.to_thread(self._read_voice_index_sync, video_id)

    async def read_summary(self, video_id: str) -> SummaryRecord | None:
        """Return the cached summary record, or None on miss, expiry or corruption."""
        filename = summary_key(video_id)
        raw = await asyncio.to_thread(self._read_sync, filename)
        if raw is None:
            return None
        try:
            return self.decode_summary(raw)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring corrupt summary record {filename}: {e}")
            return None

    async def write_summary(
        self,
        video_id: str,
        summary: str,
        model: str,
        metadata: VideoMetadata | None = None,
    ) -> bool:
        """Cache a summary record stamped with the current time.

        Returns:
            True if the record is now readable from the cache, False otherwise
        """
        record = SummaryRecord(
            video_id=video_id,
            summary=summary,
            model=model,
            created_at=int(self.clock() * 1000),
            metadata=metadata or VideoMetadata(),
        )
        filename = summary_key(video_id)
        payload = json.dumps(record.to_dict(), indent=2).encode("utf-8")
        try:
            await asyncio.to_thread(self._write_atomic_sync, filename, payload)
        except OSError as e:
            logger.error(f"Failed to write summary cache {filename}: {e}")
            return False

        logger.debug(f"Cached summary for {video_id} as {filename}")
        return True

    async def delete_file(self, filename: str) -> bool:
        """Delete one cache file by exact name; True if a file was removed."""
        return await asyncio.to_thread(self._delete_sync, filename)

    async def list_files(self) -> list[str]:
        """Names of the files in the cache directory (empty if it is missing)."""

        def _list() -> list[str]:
            try:
                return sorted(os.listdir(self.cache_dir))
            except FileNotFoundError:
                return []
            except OSError as e:
                logger.warning(f"Cannot list cache directory {self.cache_dir}: {e}")
                return []

        return await asyncio.to_thread(_list)

    async def stats(self) -> CacheStats:
        """Count and total size of audio artifacts; summaries are excluded."""

        def _stats() -> CacheStats:
            result = CacheStats()
            try:
                entries = list(os.scandir(self.cache_dir))
            except OSError:
                return result
            for entry in entries:
                if not entry.name.endswith(AUDIO_SUFFIX):
                    continue
                try:
                    size = entry.stat().st_size
                except OSError:
                    continue
                result.file_count += 1
                result.total_bytes += size
            return result

        return await asyncio.to_thread(_stats)
