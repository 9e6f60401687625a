"""Periodic poll scheduling."""

from __future__ import annotations

import enum
import logging
from typing import Awaitable, Callable

from .host import ScheduleFn, TimerHandle

_LOGGER = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    """Whether a poll timer is pending."""

    IDLE = "idle"
    SCHEDULED = "scheduled"


class PollScheduler:
    """Keeps at most one pending poll timer for a device."""

    def __init__(self, schedule: ScheduleFn, callback: Callable[[], Awaitable[None]]) -> None:
        self._schedule = schedule
        self._callback = callback
        self._handle: TimerHandle | None = None

    @property
    def state(self) -> SchedulerState:
        """Whether a poll timer is pending."""
        return SchedulerState.IDLE if self._handle is None else SchedulerState.SCHEDULED

    def arm(self, delay: float) -> None:
        """Replace any pending timer with one firing after delay seconds."""
        self.cancel()
        _LOGGER.debug("Next poll in %s seconds", delay)
        self._handle = self._schedule(delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def _fire(self) -> None:
        self._handle = None
        await self._callback()
