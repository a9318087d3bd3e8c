"""Coalesce concurrent cache misses for the same key."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class SingleFlight:
    """At most one in-flight producer per key.

    The first caller for a key starts `factory()` as a task; callers that
    arrive while it runs await the same task instead of starting their own.
    The key is released as soon as the task finishes, whether it succeeded
    or failed, so a failure is never remembered.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    def _release(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._release(key, t))
        else:
            logger.debug(f"Joining in-flight request for {key}")

        # Shield so one cancelled waiter does not cancel the shared work
        return await asyncio.shield(task)
