"""TP-Link Smart Home Protocol: cipher, framing and transport.

Messages are UTF-8 JSON, obfuscated with an XOR autokey cipher (initial key
171) and prefixed with a 4-byte big-endian length. Each exchange opens a
fresh TCP connection to port 9999, writes one request, reads one response
and closes the connection.
"""

from __future__ import annotations

import asyncio
import logging
import struct

from .const import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    HEADER_SIZE,
    INITIAL_KEY,
    MAX_EMPTY_READS,
    READ_TIMEOUT,
)
from .exceptions import (
    TPLinkConnectFailedError,
    TPLinkConnectionError,
    TPLinkDataError,
    TPLinkShortBodyError,
    TPLinkShortHeaderError,
)

_LOGGER = logging.getLogger(__name__)


def encrypt(plaintext: bytes) -> bytes:
    """Encrypt with the XOR autokey cipher, keyed on the previous output byte."""
    key = INITIAL_KEY
    result = bytearray()
    for byte in plaintext:
        key ^= byte
        result.append(key)
    return bytes(result)


def decrypt(ciphertext: bytes) -> bytes:
    """Decrypt with the XOR autokey cipher, keyed on the previous input byte."""
    key = INITIAL_KEY
    result = bytearray()
    for byte in ciphertext:
        result.append(key ^ byte)
        key = byte
    return bytes(result)


def encode_frame(plaintext: bytes) -> bytes:
    """Encrypt a payload and prefix it with its big-endian length."""
    return struct.pack(">I", len(plaintext)) + encrypt(plaintext)


def decode_length(header: bytes) -> int:
    """Parse the 4-byte big-endian length header."""
    if len(header) != HEADER_SIZE:
        raise TPLinkShortHeaderError(
            f"Could not read {HEADER_SIZE} length bytes, got {len(header)}"
        )
    return struct.unpack(">I", header)[0]


def decode_frame(header: bytes, body: bytes) -> bytes:
    """Check the body against the header length and decrypt it."""
    length = decode_length(header)
    if len(body) < length:
        raise TPLinkShortBodyError(expected=length, received=len(body))
    if len(body) > length:
        raise TPLinkDataError(f"Frame body is {len(body)} bytes, header announced {length}")
    return decrypt(body)


def _timeout(value: float | None) -> float | None:
    # Zero means wait indefinitely
    return value or None


async def _read_body(reader: asyncio.StreamReader, length: int, read_timeout: float | None) -> bytes:
    data = bytearray()
    empty_reads = 0
    while len(data) < length:
        try:
            chunk = await asyncio.wait_for(reader.read(length - len(data)), read_timeout)
        except (OSError, asyncio.TimeoutError) as err:
            raise TPLinkShortBodyError(expected=length, received=len(data)) from err
        if not chunk:
            empty_reads += 1
            if empty_reads >= MAX_EMPTY_READS:
                raise TPLinkShortBodyError(expected=length, received=len(data))
            continue
        empty_reads = 0
        data.extend(chunk)
    return bytes(data)


async def exchange(
    host: str,
    command: bytes,
    *,
    port: int = DEFAULT_PORT,
    connect_timeout: float | None = DEFAULT_TIMEOUT,
    read_timeout: float | None = READ_TIMEOUT,
) -> bytes:
    """Send one command and return the decrypted response payload.

    Args:
        host: Hostname or IP address of the device
        command: Plaintext JSON request
        port: TCP port of the device
        connect_timeout: Seconds allowed for opening the connection
        read_timeout: Seconds allowed for each read from the connection

    Raises:
        TPLinkConnectFailedError: The connection could not be opened
        TPLinkShortHeaderError: The length header could not be read
        TPLinkShortBodyError: The response ended before its announced length
    """
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), _timeout(connect_timeout)
        )
    except (OSError, asyncio.TimeoutError) as err:
        raise TPLinkConnectFailedError(f"Couldn't connect to {host}:{port}: {err!r}") from err

    try:
        _LOGGER.debug("Sending to %s:%s: %s", host, port, command)
        try:
            writer.write(encode_frame(command))
            await writer.drain()
        except OSError as err:
            raise TPLinkConnectionError(f"Failed to send command to {host}:{port}: {err}") from err

        try:
            header = await asyncio.wait_for(
                reader.readexactly(HEADER_SIZE), _timeout(read_timeout)
            )
        except asyncio.IncompleteReadError as err:
            raise TPLinkShortHeaderError(
                f"Could not read {HEADER_SIZE} length bytes, got {len(err.partial)}"
            ) from err
        except (OSError, asyncio.TimeoutError) as err:
            raise TPLinkShortHeaderError(f"Could not read {HEADER_SIZE} length bytes") from err

        length = decode_length(header)
        _LOGGER.debug("Response length from %s: %s", host, length)
        body = await _read_body(reader, length, _timeout(read_timeout))
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as err:
            _LOGGER.debug("Error closing connection to %s: %s", host, err)

    data = decode_frame(header, body)
    _LOGGER.debug("Received from %s: %s", host, data)
    return data
