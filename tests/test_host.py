"""Tests for the in-memory host runtime."""

from __future__ import annotations

import asyncio
import struct

import pytest

from tplinkplug import MemoryHost, TPLinkPlug
from tplinkplug.models import Reading
from tplinkplug.protocol import decrypt

from .conftest import frame, status_reply


def test_emit_readings_last_write_wins():
    host = MemoryHost()
    host.emit_readings(None, [Reading("state", "on", 1.0), Reading("rssi", -60, 1.0)])
    host.emit_readings(None, [Reading("state", "off", 2.0)])
    assert host.readings["state"].value == "off"
    assert host.readings["rssi"].value == -60


@pytest.mark.asyncio
async def test_schedule_runs_callback():
    host = MemoryHost()
    done = asyncio.Event()

    async def callback():
        done.set()

    host.schedule(0, callback)
    await asyncio.wait_for(done.wait(), 1)


@pytest.mark.asyncio
async def test_cancelled_timer_does_not_run():
    host = MemoryHost()
    fired = []

    async def callback():
        fired.append(True)

    host.schedule(0.01, callback).cancel()
    await asyncio.sleep(0.05)
    assert fired == []


@pytest.mark.asyncio
async def test_plug_against_loopback_device():
    requests = []

    async def handler(reader, writer):
        header = await reader.readexactly(4)
        body = await reader.readexactly(struct.unpack(">I", header)[0])
        requests.append(decrypt(body))
        writer.write(frame(status_reply(hw_ver="1.0", relay_state=0)))
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    host = MemoryHost({"disable": 0})
    plug = TPLinkPlug("127.0.0.1", host, port=port)

    async with server:
        assert await plug.poll() is True

    assert requests == [b'{"system":{"get_sysinfo":{}},"time":{"get_time":{}}}']
    assert host.readings["state"].value == "off"
    assert host.readings["time"].value == "2024-3-7 9:5:4"
    assert host.readings["latitude_i"].value == 523000
