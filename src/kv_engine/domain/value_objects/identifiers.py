"""Core identifiers and type-safe primitives for the key-value engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType


Offset = NewType("Offset", int)
"""Byte offset from the start of the log file. Stable once written."""

Timestamp = NewType("Timestamp", int)
"""Record creation time in whole seconds since the Unix epoch (unsigned 32-bit)."""

# Fixed-width header: timestamp, key_size, value_size (3 x u32)
RECORD_HEADER_SIZE = 12


@dataclass(frozen=True, slots=True)
class RecordLocation:
    """Where the latest record for a key lives in the log.

    Storing the length alongside the offset lets a read fetch the whole
    record in one call instead of parsing the header first.

    Attributes:
        offset: Byte offset at which the encoded record starts
        length: Total encoded length, header included

    Example:
        >>> loc = RecordLocation(Offset(0), 22)
        >>> loc.end
        22
    """

    offset: Offset
    length: int

    def __post_init__(self) -> None:
        """Validate the location."""
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if self.length < RECORD_HEADER_SIZE:
            raise ValueError(
                f"length must be at least {RECORD_HEADER_SIZE}, got {self.length}"
            )

    @property
    def end(self) -> Offset:
        """Offset of the first byte after this record."""
        return Offset(self.offset + self.length)

    def __repr__(self) -> str:
        return f"RecordLocation({self.offset}+{self.length})"
