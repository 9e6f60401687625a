"""Shared fixtures for tplinkplug tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from tplinkplug import TPLinkPlug
from tplinkplug.protocol import encode_frame


class FakeTimer:
    def __init__(self, delay, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeHost:
    """Host runtime that records everything and fires timers on demand."""

    def __init__(self, attributes: dict[str, Any] | None = None) -> None:
        self.attributes = dict(attributes or {})
        self.batches: list[list] = []
        self.timers: list[FakeTimer] = []
        self.extensions: list[tuple] = []

    def get_attribute(self, name):
        return self.attributes.get(name)

    def emit_readings(self, device, batch):
        self.batches.append(list(batch))

    def schedule(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def now(self):
        return 1000.0

    async def set_extension(self, device, command, args):
        self.extensions.append((command, tuple(args)))
        return "extension"

    @property
    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled and not timer.fired]

    async def fire(self) -> None:
        timer = self.pending[0]
        timer.fired = True
        await timer.callback()

    def last_readings(self) -> dict[str, Any]:
        return {reading.name: reading.value for reading in self.batches[-1]}


class FakeExchange:
    """Stands in for protocol.exchange, replying from a queue."""

    def __init__(self) -> None:
        self.replies: list[Any] = []
        self.calls: list[dict] = []

    def reply(self, payload: Any) -> None:
        self.replies.append(json.dumps(payload).encode("utf-8"))

    async def __call__(self, host, command, **kwargs):
        self.calls.append({"host": host, "command": json.loads(command), **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def commands(self) -> list[dict]:
        return [call["command"] for call in self.calls]


class FakeReader:
    def __init__(self, header: bytes, chunks: list[bytes]) -> None:
        self._header = header
        self._chunks = list(chunks)
        self.reads = 0

    async def readexactly(self, size):
        return self._header

    async def read(self, size):
        self.reads += 1
        return self._chunks.pop(0) if self._chunks else b""


class FakeWriter:
    def __init__(self) -> None:
        self.written = bytearray()
        self.closed = 0

    def write(self, data):
        self.written.extend(data)

    async def drain(self):
        pass

    def close(self):
        self.closed += 1

    async def wait_closed(self):
        pass


SYSINFO = {
    "alias": "Desk lamp",
    "hw_ver": "2.0",
    "latitude_i": 523000,
    "longitude_i": 134000,
    "model": "HS110(EU)",
    "next_action": {"type": 1, "schd_sec": 45240, "action": 1},
    "relay_state": 1,
    "rssi": -61,
}

TIME = {"year": 2024, "month": 3, "mday": 7, "hour": 9, "min": 5, "sec": 4}


def status_reply(**overrides) -> dict:
    return {
        "system": {"get_sysinfo": {**SYSINFO, **overrides}},
        "time": {"get_time": dict(TIME)},
    }


def frame(payload: Any) -> bytes:
    return encode_frame(json.dumps(payload).encode("utf-8"))


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def fake_exchange(monkeypatch) -> FakeExchange:
    fake = FakeExchange()
    monkeypatch.setattr("tplinkplug.tplinkplug.exchange", fake)
    return fake


@pytest.fixture
def plug(host) -> TPLinkPlug:
    return TPLinkPlug("192.168.1.20", host)
