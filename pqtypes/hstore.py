"""Encoding and decoding of hstore values (string keys, nullable string values)."""

from typing import Dict, Mapping, Optional, Union

_BACKSLASH = ord("\\")
_QUOTE = ord('"')
_EQUALS = ord("=")
_ARROW_END = ord(">")
_COMMA = ord(",")
_WHITESPACE = frozenset(b" \t\n\r")

Hstore = Dict[str, Optional[str]]


def _quote(text: Optional[str]) -> str:
    if text is None:
        return "NULL"
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_hstore(mapping: Optional[Mapping[str, Optional[str]]]) -> Optional[bytes]:
    """Render a mapping in hstore text form; None maps to SQL NULL (None)."""
    if mapping is None:
        return None
    parts = (f"{_quote(key)}=>{_quote(value)}" for key, value in mapping.items())
    return ",".join(parts).encode("utf-8")


def parse_hstore(data: Union[bytes, bytearray, str, None]) -> Optional[Hstore]:
    """Parse the hstore text form into a dict; SQL NULL (None) gives None.

    Values written as an unquoted NULL (in any letter case) become None.
    """
    if data is None:
        return None
    if isinstance(data, str):
        data = data.encode("utf-8")

    result: Hstore = {}
    pair = [bytearray(), bytearray()]
    index = 0
    in_quote = False
    did_quote = False
    saw_slash = False

    def store() -> None:
        value = pair[1].decode("utf-8")
        key = pair[0].decode("utf-8")
        if not did_quote and len(pair[1]) == 4 and value.lower() == "null":
            result[key] = None
        else:
            result[key] = value

    for byte in data:
        if saw_slash:
            pair[index].append(byte)
            saw_slash = False
            continue
        if byte == _BACKSLASH:
            saw_slash = True
            continue
        if byte == _QUOTE:
            in_quote = not in_quote
            did_quote = True
            continue
        if not in_quote:
            if byte in _WHITESPACE or byte == _EQUALS:
                continue
            if byte == _ARROW_END:
                index = 1
                did_quote = False
                continue
            if byte == _COMMA:
                store()
                pair = [bytearray(), bytearray()]
                index = 0
                continue
        pair[index].append(byte)

    if len(data) > 1:
        store()
    return result