"""Exception hierarchy for the key-value engine.

Every failure surfaced by the engine is one of a closed set of kinds:

    KVEngineError
    ├── LogIOError           - the log file could not be opened, written or read
    ├── CorruptRecordError   - bytes in the log do not form a valid record
    └── RecordTooLargeError  - a key or value does not fit the 32-bit size field
"""

from __future__ import annotations

from pathlib import Path


class KVEngineError(Exception):
    """Base exception for all key-value engine errors."""

    pass


class LogIOError(KVEngineError):
    """Raised when the underlying log file cannot be opened, written or read.

    Also raised for reads past end-of-file, which indicate that the index and
    the log disagree (or the file was truncated externally).
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class CorruptRecordError(KVEngineError):
    """Raised when bytes read from the log cannot be decoded as a record."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


class RecordTooLargeError(KVEngineError, ValueError):
    """Raised when a key or value exceeds the maximum encodable size."""

    def __init__(self, field: str, size: int, limit: int) -> None:
        super().__init__(f"{field} is {size} bytes, maximum is {limit} bytes")
        self.field = field
        self.size = size
        self.limit = limit
