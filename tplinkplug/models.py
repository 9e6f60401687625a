"""Data models for the TP-Link smart plug library."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .const import (
    SECTION_LED,
    SECTION_REALTIME,
    SECTION_RELAY,
    SECTION_SYSINFO,
    SECTION_TIME,
)


@dataclass(frozen=True)
class Command:
    """A request sent to the device, serialized to a fixed JSON shape."""

    payload: dict[str, Any] = field(hash=False)

    @classmethod
    def get_status(cls, emeter: bool = False) -> Command:
        """Read system info and device clock, optionally the energy meter."""
        payload: dict[str, Any] = {"system": {"get_sysinfo": {}}, "time": {"get_time": {}}}
        if emeter:
            payload["emeter"] = {"get_realtime": {}}
        return cls(payload)

    @classmethod
    def set_relay(cls, on: bool) -> Command:
        """Switch the relay on or off."""
        return cls({"system": {"on_off": {"state": 1 if on else 0}}})

    @classmethod
    def set_night_led(cls, off: bool) -> Command:
        """Turn the status LED off (night mode) or back on."""
        return cls({"system": {"set_led_off": {"off": 1 if off else 0}}})

    def to_bytes(self) -> bytes:
        """Serialize to compact UTF-8 JSON."""
        return json.dumps(self.payload, separators=(",", ":")).encode("utf-8")


_TIME_FIELDS = ("year", "month", "mday", "hour", "min", "sec")


@dataclass(frozen=True)
class DeviceTime:
    """Device clock as reported by time.get_time."""

    year: Any
    month: Any
    mday: Any
    hour: Any
    min: Any
    sec: Any

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceTime | None:
        """Build the clock, or None unless every field is reported."""
        if any(data.get(name) is None for name in _TIME_FIELDS):
            return None
        return cls(**{name: data[name] for name in _TIME_FIELDS})

    def __str__(self) -> str:
        # Device integers are rendered verbatim, without zero padding
        return f"{self.year}-{self.month}-{self.mday} {self.hour}:{self.min}:{self.sec}"


def _section(data: Any, path: tuple[str, str]) -> dict[str, Any] | None:
    for key in path:
        if not isinstance(data, dict) or not isinstance(data.get(key), dict):
            return None
        data = data[key]
    return data


@dataclass
class DeviceResponse:
    """Typed view of a device reply, decoded once."""

    sysinfo: dict[str, Any] | None = None
    time: DeviceTime | None = None
    realtime: dict[str, Any] | None = None
    relay_err_code: Any = None
    led_err_code: Any = None

    @classmethod
    def from_json(cls, data: Any) -> DeviceResponse:
        """Pick the known command subtrees out of a parsed JSON tree."""
        clock = _section(data, SECTION_TIME)
        relay = _section(data, SECTION_RELAY)
        led = _section(data, SECTION_LED)
        return cls(
            sysinfo=_section(data, SECTION_SYSINFO),
            time=DeviceTime.from_dict(clock) if clock is not None else None,
            realtime=_section(data, SECTION_REALTIME),
            relay_err_code=relay.get("err_code") if relay is not None else None,
            led_err_code=led.get("err_code") if led is not None else None,
        )

    @property
    def hw_ver(self) -> str | None:
        """Hardware version reported in system info."""
        if self.sysinfo is None:
            return None
        return self.sysinfo.get("hw_ver")


@dataclass(frozen=True)
class FieldMapping:
    """Normalized name and scale factor for a raw device field."""

    name: str
    factor: float = 1


@dataclass(frozen=True)
class Reading:
    """Represents a named, timestamped value."""

    name: str
    value: Any
    timestamp: float
