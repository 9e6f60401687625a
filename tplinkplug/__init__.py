"""Python library for TP-Link smart plugs and bulbs."""

from .exceptions import (
    TPLinkConnectFailedError,
    TPLinkConnectionError,
    TPLinkDataError,
    TPLinkDeviceRejectedError,
    TPLinkError,
    TPLinkShortBodyError,
    TPLinkShortHeaderError,
)
from .host import HostRuntime, MemoryHost
from .models import Command, DeviceResponse, Reading
from .tplinkplug import TPLinkPlug

__all__ = [
    "Command",
    "DeviceResponse",
    "HostRuntime",
    "MemoryHost",
    "Reading",
    "TPLinkConnectFailedError",
    "TPLinkConnectionError",
    "TPLinkDataError",
    "TPLinkDeviceRejectedError",
    "TPLinkError",
    "TPLinkPlug",
    "TPLinkShortBodyError",
    "TPLinkShortHeaderError",
]
