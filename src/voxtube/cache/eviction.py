"""Background TTL eviction for the artifact cache."""

import asyncio
import logging
import os

from .keys import is_artifact
from .models import SweepResult
from .store import CacheStore

logger = logging.getLogger(__name__)


class EvictionManager:
    """Deletes cache artifacts older than the store's TTL.

    Owns one repeating timer task. `start()` returns immediately and the
    first sweep runs in the background, so server readiness never waits on
    a directory scan. Each tick launches its sweep as a separate task: a
    slow sweep overlaps the next one instead of delaying it, which is safe
    because deleting an already-deleted file is not an error.

    Example:
        manager = EvictionManager(store, interval_hours=12)
        manager.start()
        ...
        await manager.stop()
    """

    def __init__(self, store: CacheStore, interval_hours: float = 12) -> None:
        """Initialize eviction manager.

        Args:
            store: Cache store whose directory and TTL are swept
            interval_hours: Period between background sweeps

        Raises:
            ValueError: If interval_hours is not positive
        """
        if interval_hours <= 0:
            raise ValueError(f"interval_hours must be positive, got {interval_hours}")

        self.store = store
        self.interval_seconds = interval_hours * 60 * 60
        self._timer_task: asyncio.Task[None] | None = None
        self._sweeps: set[asyncio.Task[SweepResult]] = set()

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    def _sweep_sync(self) -> SweepResult:
        result = SweepResult()
        try:
            entries = list(os.scandir(self.store.cache_dir))
        except FileNotFoundError:
            return result
        except OSError as e:
            logger.error(f"Cache sweep cannot list {self.store.cache_dir}: {e}")
            result.errors += 1
            return result

        for entry in entries:
            if not is_artifact(entry.name):
                continue
            try:
                st = entry.stat()
                if not self.store.expired(st):
                    continue
                os.unlink(entry.path)
                result.deleted += 1
            except FileNotFoundError:
                # Removed concurrently by a lazy read or another sweep
                continue
            except OSError as e:
                logger.warning(f"Cache sweep failed on {entry.name}: {e}")
                result.errors += 1

        return result

    async def sweep_once(self) -> SweepResult:
        """Run one full eviction pass over the cache directory.

        Returns:
            Count of deleted files and of files that could not be processed
        """
        result = await asyncio.to_thread(self._sweep_sync)
        if result.deleted or result.errors:
            logger.info(
                f"Cache cleanup: deleted {result.deleted} expired files, "
                f"{result.errors} errors"
            )
        else:
            logger.debug("Cache cleanup: nothing to delete")
        return result

    async def _run_sweep(self) -> SweepResult:
        try:
            return await self.sweep_once()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Cache sweep crashed: {e}")
            return SweepResult(errors=1)

    def _launch_sweep(self) -> None:
        task = asyncio.create_task(self._run_sweep())
        self._sweeps.add(task)
        task.add_done_callback(self._sweeps.discard)

    async def _timer(self) -> None:
        while True:
            self._launch_sweep()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start background sweeps: one immediately, then one per interval.

        Must be called from a running event loop. Calling it twice is a no-op.
        """
        if self.running:
            return
        self._timer_task = asyncio.create_task(self._timer())
        logger.info(
            f"Cache eviction started for {self.store.cache_dir} "
            f"(every {self.interval_seconds / 3600:g}h)"
        )

    async def stop(self) -> None:
        """Cancel the timer and any sweep still in progress."""
        tasks: list[asyncio.Task] = list(self._sweeps)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Cache eviction stopped")
