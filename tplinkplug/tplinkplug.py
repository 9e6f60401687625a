"""Main TPLinkPlug class for polling and switching smart plugs."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Sequence

import voluptuous as vol

from .const import (
    ATTR_DISABLE,
    ATTR_INTERVAL,
    ATTR_NIGHTMODE,
    ATTR_TIMEOUT,
    ATTRIBUTE_DEFAULTS,
    ATTRIBUTE_SCHEMA,
    DEFAULT_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    INITIAL_POLL_DELAY,
    NEXT_ACTION,
    NIGHT_MODE_READ_TIMEOUT,
    NO_NEXT_ACTION,
    READ_TIMEOUT,
    READING_DECODE_JSON,
    READING_STATE,
    READING_TIME,
    SECTION_REALTIME,
    SECTION_SYSINFO,
)
from .exceptions import TPLinkDataError, TPLinkDeviceRejectedError, TPLinkError
from .host import HostRuntime
from .models import Command, DeviceResponse, Reading
from .profiles import normalize
from .protocol import exchange
from .scheduler import PollScheduler

_LOGGER = logging.getLogger(__name__)


def format_next_action(next_action: Any) -> str:
    """Render a scheduled action as "HH:MM on", "HH:MM off" or "-None-"."""
    if not isinstance(next_action, dict) or str(next_action.get("type")) != "1":
        return NO_NEXT_ACTION
    try:
        seconds = int(next_action.get("schd_sec", 0))
    except (TypeError, ValueError):
        return NO_NEXT_ACTION
    action = "on" if str(next_action.get("action")) == "1" else "off"
    return f"{seconds // 3600:02d}:{seconds // 60 % 60:02d} {action}"


def relay_state(value: Any) -> str | None:
    """Map relay_state 1/0 to "on"/"off"; anything else has no state."""
    if value == 1:
        return "on"
    if value == 0:
        return "off"
    return None


class TPLinkPlug:
    """Session with a single TP-Link smart plug or bulb."""

    def __init__(
        self,
        host: str,
        runtime: HostRuntime,
        *,
        port: int = DEFAULT_PORT,
        interval: int = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
        emeter: bool = False,
    ) -> None:
        """Initialize the device session.

        Args:
            host: Hostname or IP address of the device
            runtime: Host automation runtime receiving readings and timers
            port: TCP port of the device
            interval: Seconds between periodic polls
            timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds for polls and relay commands
            emeter: Also read the energy meter on every poll
        """
        self._host = host
        self._runtime = runtime
        self.port = port
        self.interval = interval
        self.timeout = timeout
        self.read_timeout = read_timeout
        self.emeter = emeter
        self.night_mode = "off"
        self.disabled = False
        self.last_poll: float | None = None
        self._running = False

        self._lock = asyncio.Lock()
        self._scheduler = PollScheduler(runtime.schedule, self._scheduled_poll)

    @property
    def host(self) -> str:
        """Hostname or IP address of the device."""
        return self._host

    @property
    def scheduler(self) -> PollScheduler:
        """Timer driving the periodic polls."""
        return self._scheduler

    def start(self) -> None:
        """Load configured attributes and schedule the first poll."""
        for name in ATTRIBUTE_SCHEMA:
            value = self._runtime.get_attribute(name)
            if value is None:
                continue
            try:
                self._apply_attribute(name, value)
            except ValueError as err:
                _LOGGER.warning("%s ignoring stored attribute: %s", self._host, err)
        self._running = True
        self._scheduler.arm(INITIAL_POLL_DELAY)
        _LOGGER.info("%s defined", self._host)

    def stop(self) -> None:
        """Cancel periodic polling."""
        self._running = False
        self._scheduler.cancel()
        _LOGGER.info("%s undefined", self._host)

    async def _scheduled_poll(self) -> None:
        try:
            await self.poll()
        except TPLinkError as err:
            _LOGGER.debug("Scheduled poll of %s failed: %s", self._host, err)
        finally:
            if self._running:
                self._scheduler.arm(self.interval)

    async def _send(self, command: Command, read_timeout: float | None = None) -> bytes:
        if read_timeout is None:
            read_timeout = self.read_timeout
        return await exchange(
            self._host,
            command.to_bytes(),
            port=self.port,
            connect_timeout=self.timeout,
            read_timeout=read_timeout,
        )

    def _decode(self, data: bytes) -> DeviceResponse:
        """Parse a reply, recording the outcome as the decode_json reading."""
        try:
            parsed = json.loads(data.decode("utf-8"))
        except ValueError as err:
            self._emit([(READING_DECODE_JSON, str(err))])
            raise TPLinkDataError(f"Failed to parse response from {self._host}: {err}") from err
        return DeviceResponse.from_json(parsed)

    def _emit(self, values: Sequence[tuple[str, Any]]) -> None:
        timestamp = self._runtime.now()
        batch: dict[str, Reading] = {}
        for name, value in values:
            batch[name] = Reading(name, value, timestamp)
        self._runtime.emit_readings(self, list(batch.values()))

    async def poll(self) -> bool:
        """Read the full device status and emit it as readings.

        Returns False if the device is disabled and nothing was done.
        """
        if self.disabled:
            return False
        async with self._lock:
            await self._poll()
        return True

    async def _poll(self) -> None:
        try:
            data = await self._send(Command.get_status(emeter=self.emeter))
        except TPLinkError as err:
            _LOGGER.error("%s Get failed - %s", self._host, err)
            raise

        try:
            response = self._decode(data)
        except TPLinkDataError:
            _LOGGER.error("%s Get failed - parsing", self._host)
            raise

        values: list[tuple[str, Any]] = [(READING_DECODE_JSON, "ok")]
        sysinfo = response.sysinfo or {}
        hw_ver = response.hw_ver
        _LOGGER.debug(
            "%s relay state: %s, RSSI: %s",
            self._host,
            sysinfo.get("relay_state"),
            sysinfo.get("rssi"),
        )
        for key in sorted(sysinfo):
            name, value = normalize(hw_ver, SECTION_SYSINFO, key, sysinfo[key])
            if name == NEXT_ACTION:
                value = format_next_action(value)
            values.append((name, value))

        state = relay_state(sysinfo.get("relay_state"))
        if state is not None:
            values.append((READING_STATE, state))

        if response.time is not None:
            values.append((READING_TIME, str(response.time)))

        if response.realtime is not None:
            for key in sorted(response.realtime):
                values.append(normalize(hw_ver, SECTION_REALTIME, key, response.realtime[key]))

        self._emit(values)
        self.last_poll = self._runtime.now()
        _LOGGER.debug("%s updated %s readings", self._host, len(values))

    async def set_relay(self, on: bool) -> bool:
        """Switch the relay and refresh all readings once acknowledged.

        Returns False if the device is disabled and nothing was sent.

        Raises:
            TPLinkConnectionError: The command could not be delivered
            TPLinkDataError: The reply was not valid JSON
            TPLinkDeviceRejectedError: The device answered with an error code
        """
        if self.disabled:
            return False
        async with self._lock:
            _LOGGER.info("%s set %s", self._host, "on" if on else "off")
            try:
                data = await self._send(Command.set_relay(on))
                response = self._decode(data)
            except TPLinkError as err:
                _LOGGER.error("%s Set failed - %s", self._host, err)
                raise

            if str(response.relay_err_code) != "0":
                _LOGGER.warning(
                    "%s Set failed with error code %s", self._host, response.relay_err_code
                )
                raise TPLinkDeviceRejectedError(response.relay_err_code)

            _LOGGER.debug("%s Set OK - get status data", self._host)
            try:
                await self._poll()
            except TPLinkError as err:
                _LOGGER.debug("Refresh of %s after set failed: %s", self._host, err)
        return True

    async def set_state(self, command: str, *args: str) -> Any:
        """Dispatch a named set command; unknown names go to the host."""
        if command == "on":
            return await self.set_relay(True)
        if command == "off":
            return await self.set_relay(False)
        return await self._runtime.set_extension(self, command, args)

    async def set_attribute(self, name: str, value: Any) -> None:
        """Apply a changed configuration attribute.

        Raises:
            ValueError: The value is not valid for the attribute
        """
        value = self._apply_attribute(name, value)
        if name == ATTR_NIGHTMODE:
            await self._send_night_mode(value == "on")

    async def delete_attribute(self, name: str) -> None:
        """Restore the default for a removed configuration attribute."""
        if name not in ATTRIBUTE_DEFAULTS:
            return
        self._apply_attribute(name, ATTRIBUTE_DEFAULTS[name])
        if name == ATTR_NIGHTMODE:
            _LOGGER.info("%s nightmode attribute removed, nightmode disabled", self._host)
            await self._send_night_mode(False)

    def _apply_attribute(self, name: str, value: Any) -> Any:
        schema = ATTRIBUTE_SCHEMA.get(name)
        if schema is None:
            return value
        try:
            value = schema(value)
        except vol.Invalid as err:
            raise ValueError(f"Invalid value {value!r} for attribute {name}: {err}") from err

        if name == ATTR_INTERVAL:
            self.interval = value
        elif name == ATTR_TIMEOUT:
            self.timeout = value
        elif name == ATTR_DISABLE:
            self.disabled = value == 1
        elif name == ATTR_NIGHTMODE:
            self.night_mode = value
        _LOGGER.info("%s %s set to %s", self._host, name, value)
        return value

    async def _send_night_mode(self, on: bool) -> None:
        """Toggle the status LED, best effort."""
        async with self._lock:
            try:
                data = await self._send(
                    Command.set_night_led(off=on), read_timeout=NIGHT_MODE_READ_TIMEOUT
                )
                json.loads(data.decode("utf-8"))
            except (TPLinkError, ValueError) as err:
                _LOGGER.warning("%s nightmode command failed: %s", self._host, err)
