"""Tests for the poll scheduler."""

import pytest

from tplinkplug.scheduler import PollScheduler, SchedulerState

from .conftest import FakeHost


def test_arm_replaces_pending_timer():
    host = FakeHost()
    scheduler = PollScheduler(host.schedule, None)
    assert scheduler.state is SchedulerState.IDLE

    scheduler.arm(2)
    scheduler.arm(300)

    assert scheduler.state is SchedulerState.SCHEDULED
    assert [timer.delay for timer in host.pending] == [300]
    assert host.timers[0].cancelled


def test_cancel_returns_to_idle():
    host = FakeHost()
    scheduler = PollScheduler(host.schedule, None)
    scheduler.arm(5)
    scheduler.cancel()
    assert scheduler.state is SchedulerState.IDLE
    assert host.pending == []


@pytest.mark.asyncio
async def test_firing_runs_callback():
    host = FakeHost()
    fired = []

    async def callback():
        fired.append(scheduler.state)

    scheduler = PollScheduler(host.schedule, callback)
    scheduler.arm(1)
    await host.timers[0].callback()

    assert fired == [SchedulerState.IDLE]
