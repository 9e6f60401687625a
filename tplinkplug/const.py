"""Constants for the TP-Link smart plug library."""

from types import MappingProxyType

import voluptuous as vol

DEFAULT_PORT = 9999

# XOR autokey cipher seed
INITIAL_KEY = 171

HEADER_SIZE = 4

# Consecutive zero-byte body reads tolerated before giving up
MAX_EMPTY_READS = 2

# Defaults, in seconds
DEFAULT_INTERVAL = 300
DEFAULT_TIMEOUT = 1.0
READ_TIMEOUT = 2.5
NIGHT_MODE_READ_TIMEOUT = 0.5
INITIAL_POLL_DELAY = 2

# Response sections
SECTION_SYSINFO = ("system", "get_sysinfo")
SECTION_TIME = ("time", "get_time")
SECTION_REALTIME = ("emeter", "get_realtime")
SECTION_RELAY = ("system", "set_relay_state")
SECTION_LED = ("system", "set_led_off")

# Reading names not taken from the device verbatim
READING_STATE = "state"
READING_TIME = "time"
READING_DECODE_JSON = "decode_json"
NEXT_ACTION = "next_action"
NO_NEXT_ACTION = "-None-"

# Configuration attributes
ATTR_INTERVAL = "interval"
ATTR_TIMEOUT = "timeout"
ATTR_DISABLE = "disable"
ATTR_NIGHTMODE = "nightmode"

ATTRIBUTE_SCHEMA = {
    ATTR_INTERVAL: vol.Schema(vol.All(vol.Coerce(int), vol.Range(min=1))),
    ATTR_TIMEOUT: vol.Schema(vol.All(vol.Coerce(float), vol.Range(min=0))),
    ATTR_DISABLE: vol.Schema(vol.All(vol.Coerce(int), vol.In([0, 1]))),
    ATTR_NIGHTMODE: vol.Schema(vol.In(["on", "off"])),
}

ATTRIBUTE_DEFAULTS = MappingProxyType(
    {
        ATTR_INTERVAL: DEFAULT_INTERVAL,
        ATTR_TIMEOUT: DEFAULT_TIMEOUT,
        ATTR_DISABLE: 0,
        ATTR_NIGHTMODE: "off",
    }
)

# Raw field remapping per hardware version and response section:
# (new name, scale factor). Unlisted fields are reported unchanged.
_EMETER_MILLI = {
    "power_mw": ("power", 0.001),
    "voltage_mv": ("voltage", 0.001),
    "current_ma": ("current", 0.001),
    "total_wh": ("total", 0.001),
    "err_code": ("err_code", 1),
}

HARDWARE_PROFILES = MappingProxyType(
    {
        "1.0": {
            SECTION_SYSINFO: {
                "longitude": ("longitude", 1),
                "latitude": ("latitude", 1),
            },
            SECTION_REALTIME: {
                "power": ("power", 1),
                "voltage": ("voltage", 1),
                "current": ("current", 1),
                "total": ("total", 1),
                "err_code": ("err_code", 1),
            },
        },
        "2.0": {
            SECTION_SYSINFO: {
                "longitude_i": ("longitude", 0.0001),
                "latitude_i": ("latitude", 0.0001),
            },
            SECTION_REALTIME: _EMETER_MILLI,
        },
        "4.0": {
            SECTION_REALTIME: _EMETER_MILLI,
        },
    }
)
