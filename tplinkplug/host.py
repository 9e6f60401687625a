"""Boundary to the host automation runtime."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Protocol, Sequence

from .models import Reading

_LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """A pending scheduled callback."""

    def cancel(self) -> None:
        ...


ScheduleFn = Callable[[float, Callable[[], Awaitable[None]]], TimerHandle]


class HostRuntime(Protocol):
    """What a device session needs from the automation runtime."""

    def get_attribute(self, name: str) -> Any:
        """Return a configured attribute, or None if it is not set."""

    def emit_readings(self, device: Any, batch: Sequence[Reading]) -> None:
        """Record a batch of readings as one atomic update."""

    def schedule(self, delay: float, callback: Callable[[], Awaitable[None]]) -> TimerHandle:
        """Run callback after delay seconds."""

    def now(self) -> float:
        """Return the current time as a UNIX timestamp."""

    async def set_extension(self, device: Any, command: str, args: Sequence[str]) -> Any:
        """Handle a set command the device does not implement itself."""


class MemoryHost:
    """In-memory host runtime running on the asyncio event loop."""

    def __init__(self, attributes: dict[str, Any] | None = None) -> None:
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.readings: dict[str, Reading] = {}
        self._tasks: set[asyncio.Task] = set()

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def emit_readings(self, device: Any, batch: Sequence[Reading]) -> None:
        self.readings.update({reading.name: reading for reading in batch})
        _LOGGER.debug("Updated %s readings for %s", len(batch), getattr(device, "host", device))

    def schedule(self, delay: float, callback: Callable[[], Awaitable[None]]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, self._run, callback)

    def _run(self, callback: Callable[[], Awaitable[None]]) -> None:
        task = asyncio.ensure_future(callback())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def now(self) -> float:
        return time.time()

    async def set_extension(self, device: Any, command: str, args: Sequence[str]) -> Any:
        return f"Unknown argument {command}, choose one of on off"
