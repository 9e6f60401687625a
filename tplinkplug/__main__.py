"""Command-line access to a single TP-Link smart plug."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .const import DEFAULT_PORT, DEFAULT_TIMEOUT
from .exceptions import TPLinkError
from .host import MemoryHost
from .tplinkplug import TPLinkPlug


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tplinkplug",
        description="Read and switch a TP-Link smart plug",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 192.168.1.20 info            Show all readings
  %(prog)s 192.168.1.20 on              Switch the relay on
  %(prog)s 192.168.1.20 nightmode on    Turn the status LED off
        """,
    )
    parser.add_argument("host", help="Hostname or IP address of the device")
    parser.add_argument("command", choices=["info", "on", "off", "nightmode"], help="Command to execute")
    parser.add_argument("value", nargs="?", choices=["on", "off"], help="Night mode value")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Device TCP port")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Connect timeout in seconds")
    parser.add_argument("--emeter", action="store_true", help="Include energy meter readings")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    return parser


async def _run(args: argparse.Namespace) -> int:
    runtime = MemoryHost()
    plug = TPLinkPlug(args.host, runtime, port=args.port, timeout=args.timeout, emeter=args.emeter)
    try:
        if args.command == "info":
            await plug.poll()
        elif args.command == "nightmode":
            await plug.set_attribute("nightmode", args.value)
            return 0
        else:
            await plug.set_state(args.command)
    except TPLinkError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    for reading in sorted(runtime.readings.values(), key=lambda reading: reading.name):
        print(f"{reading.name}: {reading.value}")
    return 0


def main() -> int:
    parser = _parser()
    args = parser.parse_args()
    if args.command == "nightmode" and args.value is None:
        parser.error("nightmode command requires on or off")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
