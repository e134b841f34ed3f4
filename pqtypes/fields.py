"""Column descriptions as reported by the server for a result set."""

import datetime
from dataclasses import dataclass
from typing import Optional, Tuple

from .oid import Oid, type_name as _oid_type_name

HEADER_SIZE = 4
MAX_LENGTH = 2**63 - 1

_SCAN_TYPES = {
    Oid.INT8: int,
    Oid.INT4: int,
    Oid.INT2: int,
    Oid.VARCHAR: str,
    Oid.TEXT: str,
    Oid.BOOL: bool,
    Oid.DATE: datetime.datetime,
    Oid.TIME: datetime.datetime,
    Oid.TIMETZ: datetime.datetime,
    Oid.TIMESTAMP: datetime.datetime,
    Oid.TIMESTAMPTZ: datetime.datetime,
    Oid.BYTEA: bytes,
}


@dataclass(frozen=True)
class FieldDescription:
    """One column: its type OID, type size (pg_type.typlen) and type modifier."""

    oid: int
    size: int = 0
    modifier: int = 0

    def scan_type(self) -> type:
        """Return the Python type values of this column decode to."""
        return _SCAN_TYPES.get(self.oid, object)

    def type_name(self) -> str:
        """Return the server's upper-case name of the column type."""
        return _oid_type_name(self.oid)

    def length(self) -> Optional[int]:
        """Return the length of a variable-length type, or None for others."""
        if self.oid in (Oid.TEXT, Oid.BYTEA):
            return MAX_LENGTH
        if self.oid in (Oid.VARCHAR, Oid.BPCHAR):
            return self.modifier - HEADER_SIZE
        return None

    def precision_scale(self) -> Optional[Tuple[int, int]]:
        """Return (precision, scale) for numeric types, or None for others."""
        if self.oid in (Oid.NUMERIC, Oid.NUMERIC_ARRAY):
            mod = self.modifier - HEADER_SIZE
            return (mod >> 16) & 0xFFFF, mod & 0xFFFF
        return None