"""Collapse concurrent calls for the same key into one execution."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class SingleFlight:
    """At most one in-flight call per key; concurrent callers share its result.

    The shared task is shielded, so a cancelled caller does not cancel the work
    other callers are waiting on.
    """

    def __init__(self) -> None:
        self._calls: dict[str, asyncio.Task[Any]] = {}

    async def do(self, key: str, func: Callable[[], Awaitable[Any]]) -> Any:
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._calls[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._calls.get(key) is task:
            del self._calls[key]
