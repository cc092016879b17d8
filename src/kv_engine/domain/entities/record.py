"""Record entity and its on-disk encoding.

A record is the unit of persistence: one key-value pair plus the time it was
written. Records are appended to the log and never modified in place; a later
record with the same key supersedes an earlier one.

Record Format (all integers unsigned 32-bit little-endian):
    [timestamp (4)] [key_size (4)] [value_size (4)] [key bytes] [value bytes]

There is no checksum and no padding, so an encoded record is exactly
12 + key_size + value_size bytes long.
"""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass
from typing import ClassVar

from kv_engine.domain.errors import CorruptRecordError, RecordTooLargeError
from kv_engine.domain.value_objects import RECORD_HEADER_SIZE, Offset, Timestamp

# Largest value representable by a u32 size or timestamp field
MAX_FIELD_VALUE = 0xFFFFFFFF


@dataclass(frozen=True)
class RecordHeader:
    """Fixed-size prefix of every encoded record.

    Size: 12 bytes
        - timestamp: 4 bytes
        - key_size: 4 bytes
        - value_size: 4 bytes
    """

    timestamp: Timestamp
    key_size: int
    value_size: int

    HEADER_SIZE: ClassVar[int] = RECORD_HEADER_SIZE
    HEADER_FORMAT: ClassVar[str] = "<III"  # 3 x uint32, little-endian

    @property
    def body_size(self) -> int:
        """Number of key and value bytes following the header."""
        return self.key_size + self.value_size

    @property
    def record_size(self) -> int:
        """Total encoded size of the record this header describes."""
        return self.HEADER_SIZE + self.body_size

    def to_bytes(self) -> bytes:
        """Serialize header to bytes."""
        return struct.pack(self.HEADER_FORMAT, self.timestamp, self.key_size, self.value_size)

    @classmethod
    def from_bytes(cls, data: bytes, offset: Offset | None = None) -> RecordHeader:
        """Deserialize header from the first 12 bytes of data.

        Args:
            data: Buffer starting with an encoded header.
            offset: Log offset of the buffer, used in error messages.

        Raises:
            CorruptRecordError: If fewer than 12 bytes are available.
        """
        if len(data) < cls.HEADER_SIZE:
            raise CorruptRecordError(
                f"Record header requires {cls.HEADER_SIZE} bytes, got {len(data)}",
                offset=offset,
            )

        timestamp, key_size, value_size = struct.unpack_from(cls.HEADER_FORMAT, data)
        return cls(timestamp=Timestamp(timestamp), key_size=key_size, value_size=value_size)


@dataclass(frozen=True)
class Record:
    """A key-value pair as persisted in the log.

    Example:
        >>> record = Record(Timestamp(10), "hello", "world")
        >>> data = record.to_bytes()
        >>> len(data)
        22
        >>> Record.from_bytes(data) == record
        True
    """

    timestamp: Timestamp
    key: str
    value: str

    @classmethod
    def new(cls, key: str, value: str, timestamp: Timestamp | None = None) -> Record:
        """Create a record stamped with the current time.

        Args:
            key: The record key.
            value: The record value (may be empty).
            timestamp: Explicit timestamp; defaults to now.

        Returns:
            A new Record instance.

        Raises:
            RecordTooLargeError: If the UTF-8 key or value does not fit in
                a 32-bit size field.
        """
        key_size = len(key.encode("utf-8"))
        if key_size > MAX_FIELD_VALUE:
            raise RecordTooLargeError("key", key_size, MAX_FIELD_VALUE)

        value_size = len(value.encode("utf-8"))
        if value_size > MAX_FIELD_VALUE:
            raise RecordTooLargeError("value", value_size, MAX_FIELD_VALUE)

        if timestamp is None:
            # Wraps in 2106
            timestamp = Timestamp(int(time.time()) & MAX_FIELD_VALUE)

        return cls(timestamp=timestamp, key=key, value=value)

    @property
    def encoded_size(self) -> int:
        """Length of the encoded record in bytes."""
        return (
            RecordHeader.HEADER_SIZE
            + len(self.key.encode("utf-8"))
            + len(self.value.encode("utf-8"))
        )

    def to_bytes(self) -> bytes:
        """Serialize record to bytes for storage."""
        key_bytes = self.key.encode("utf-8")
        value_bytes = self.value.encode("utf-8")
        header = RecordHeader(
            timestamp=self.timestamp,
            key_size=len(key_bytes),
            value_size=len(value_bytes),
        )
        return header.to_bytes() + key_bytes + value_bytes

    @classmethod
    def from_bytes(cls, data: bytes, offset: Offset | None = None) -> Record:
        """Deserialize exactly one record from bytes.

        Args:
            data: The encoded record, with nothing before or after it.
            offset: Log offset of the record, used in error messages.

        Raises:
            CorruptRecordError: If the header is short, the declared sizes do
                not match the buffer, or key/value are not valid UTF-8.
        """
        header = RecordHeader.from_bytes(data, offset=offset)

        available = len(data) - RecordHeader.HEADER_SIZE
        if header.body_size > available:
            raise CorruptRecordError(
                f"Record declares {header.body_size} body bytes, only {available} available",
                offset=offset,
            )
        if header.body_size < available:
            raise CorruptRecordError(
                f"Record declares {header.body_size} body bytes, got {available}",
                offset=offset,
            )

        key_start = RecordHeader.HEADER_SIZE
        value_start = key_start + header.key_size

        try:
            key = bytes(data[key_start:value_start]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptRecordError(f"Error decoding key: {e}", offset=offset) from e

        try:
            value = bytes(data[value_start:]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptRecordError(f"Error decoding value: {e}", offset=offset) from e

        return cls(timestamp=header.timestamp, key=key, value=value)
