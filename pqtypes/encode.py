"""Conversion of values to and from PostgreSQL's wire representations."""

import datetime
import math
import re
import struct
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Optional, Union

from .oid import Oid
from .timestamps import Timestamp, format_ts, parse_time, parse_ts

_HEX = re.compile(rb"(?:[0-9a-fA-F]{2})*")
_INTEGER = re.compile(rb"[+-]?[0-9]+")
_OCTAL = re.compile(rb"[0-7]{3}")
_COPY_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"})


class Format(IntEnum):
    """Wire format of a value."""

    TEXT = 0
    BINARY = 1


@dataclass
class ParameterStatus:
    """Server settings that affect encoding and decoding."""

    server_version: int = 0
    current_location: Optional[datetime.tzinfo] = None


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _unknown_type(value: Any) -> TypeError:
    return TypeError(f"pq: encode: unknown type for {type(value).__name__}")


def encode(status: ParameterStatus, value: Any, type_oid: int) -> bytes:
    """Encode a value in text format for a parameter of type ``type_oid``."""
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, int):
        return str(value).encode()
    if isinstance(value, float):
        return _format_float(value).encode()
    if isinstance(value, (bytes, bytearray)):
        if type_oid == Oid.BYTEA:
            return encode_bytea(status.server_version, bytes(value))
        return bytes(value)
    if isinstance(value, str):
        if type_oid == Oid.BYTEA:
            return encode_bytea(status.server_version, value.encode())
        return value.encode()
    if isinstance(value, (Timestamp, datetime.datetime)):
        return format_ts(value)
    raise _unknown_type(value)


def binary_encode(status: ParameterStatus, value: Any) -> bytes:
    """Encode a parameter sent in binary mode: bytes go through unchanged."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return encode(status, value, Oid.UNKNOWN)


def _parse_int(data: bytes) -> int:
    if not _INTEGER.fullmatch(data):
        raise ValueError(f"pq: invalid integer {data!r}")
    number = int(data)
    if not -(2**63) <= number < 2**63:
        raise ValueError(f"pq: integer out of range {data!r}")
    return number


def decode(
    status: ParameterStatus, data: bytes, type_oid: int, fmt: Format = Format.TEXT
) -> Any:
    """Decode a column value received from the server."""
    if fmt == Format.BINARY:
        if type_oid == Oid.BYTEA:
            return data
        if type_oid == Oid.INT8:
            return struct.unpack(">q", data[:8])[0]
        if type_oid == Oid.INT4:
            return struct.unpack(">i", data[:4])[0]
        if type_oid == Oid.INT2:
            return struct.unpack(">h", data[:2])[0]
        raise ValueError(
            f"pq: don't know how to decode binary parameter of type {int(type_oid)}"
        )

    if type_oid in (Oid.CHAR, Oid.VARCHAR, Oid.TEXT):
        return data.decode("utf-8")
    if type_oid == Oid.BYTEA:
        return parse_bytea(data)
    if type_oid == Oid.TIMESTAMPTZ:
        return parse_ts(data.decode(), status.current_location)
    if type_oid in (Oid.TIMESTAMP, Oid.DATE):
        return parse_ts(data.decode(), None)
    if type_oid == Oid.TIME:
        return parse_time(data.decode(), False)
    if type_oid == Oid.TIMETZ:
        return parse_time(data.decode(), True)
    if type_oid == Oid.BOOL:
        return data[:1] == b"t"
    if type_oid in (Oid.INT8, Oid.INT4, Oid.INT2):
        return _parse_int(data)
    if type_oid in (Oid.FLOAT4, Oid.FLOAT8):
        try:
            return float(data)
        except ValueError:
            raise ValueError(f"pq: invalid float {data!r}") from None
    return data


def escape_copy_text(text: str) -> str:
    """Escape backslash, newline, carriage return and tab for COPY text."""
    return text.translate(_COPY_ESCAPES)


def encode_copy_text(status: ParameterStatus, value: Any) -> bytes:
    """Encode one column value in COPY text format; None becomes \\N."""
    if value is None:
        return b"\\N"
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, int):
        return str(value).encode()
    if isinstance(value, float):
        return _format_float(value).encode()
    if isinstance(value, (bytes, bytearray)):
        encoded = encode_bytea(status.server_version, bytes(value))
        return escape_copy_text(encoded.decode("ascii")).encode("ascii")
    if isinstance(value, str):
        return escape_copy_text(value).encode()
    if isinstance(value, (Timestamp, datetime.datetime)):
        return format_ts(value)
    raise _unknown_type(value)


def parse_bytea(data: bytes) -> bytes:
    """Decode a bytea value in either "hex" or legacy "escape" output."""
    if data[:2] == b"\\x":
        digits = data[2:]
        if not _HEX.fullmatch(digits):
            raise ValueError(f"pq: invalid hex bytea {digits!r}")
        return bytes.fromhex(digits.decode("ascii"))

    result = bytearray()
    pos = 0
    while pos < len(data):
        slash = data.find(b"\\", pos)
        if slash < 0:
            result += data[pos:]
            break
        result += data[pos:slash]
        if data[slash + 1:slash + 2] == b"\\":
            result += b"\\"
            pos = slash + 2
            continue
        if len(data) - slash < 4:
            raise ValueError(f"invalid bytea sequence {data[slash:]!r}")
        octal = data[slash + 1:slash + 4]
        if not _OCTAL.fullmatch(octal) or int(octal, 8) > 255:
            raise ValueError(f"could not parse bytea value: {octal!r}")
        result.append(int(octal, 8))
        pos = slash + 4
    return bytes(result)


def encode_bytea(server_version: int, data: Union[bytes, bytearray]) -> bytes:
    """Encode bytes as bytea: hex for servers 9.0 and later, else escape."""
    if server_version >= 90000:
        return b"\\x" + bytes(data).hex().encode("ascii")
    out = bytearray()
    for byte in data:
        if byte == 0x5C:
            out += b"\\\\"
        elif byte < 0x20 or byte > 0x7E:
            out += b"\\%03o" % byte
        else:
            out.append(byte)
    return bytes(out)