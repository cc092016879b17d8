"""Log Store port for append-only record persistence.

This outbound port defines the contract for the single log file that backs
the key-value store. The log store deals only in raw bytes and offsets;
it never decodes keys or values.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Iterator, Protocol

from kv_engine.domain.value_objects import Offset


class SyncMode(Enum):
    """Append sync modes with different durability/performance tradeoffs.

    FSYNC: Full durability - sync file and metadata (safest)
    FDATASYNC: Data durability - sync file data only (faster on Linux)
    NONE: No sync - rely on OS buffering (fastest, but unsafe)
    """

    FSYNC = "fsync"
    FDATASYNC = "fdatasync"
    NONE = "none"


class LogStore(Protocol):
    """Protocol for append-only byte storage with positional reads.

    Key guarantees:
    - append() returns strictly increasing offsets
    - Bytes at an offset returned by append() never change
    - append() is durable (per sync mode) when it returns

    Thread Safety:
        Single-writer assumed. No internal locking.
    """

    @property
    @abstractmethod
    def path(self) -> Path | None:
        """Return the backing file path, if any."""
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        """Return the current end-of-file offset."""
        ...

    @property
    @abstractmethod
    def sync_mode(self) -> SyncMode:
        """Return the current sync mode."""
        ...

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Return True once close() has been called."""
        ...

    @abstractmethod
    def append(self, data: bytes) -> Offset:
        """Append bytes at the end of the log.

        Args:
            data: Encoded record bytes.

        Returns:
            The offset at which the write began.

        Raises:
            LogIOError: If the write or sync fails.
        """
        ...

    @abstractmethod
    def read_at(self, offset: Offset, length: int) -> bytes:
        """Read exactly length bytes starting at offset.

        Raises:
            LogIOError: If the read would run past end-of-file or fails.
        """
        ...

    @abstractmethod
    def stream_from(self, offset: Offset) -> Iterator[tuple[Offset, bytes]]:
        """Iterate complete raw records starting at offset.

        Used during recovery. The sequence is lazy, finite and forward-only;
        an incomplete trailing record ends it silently.

        Yields:
            (record_offset, record_bytes) pairs in log order.

        Raises:
            LogIOError: If reading fails.
        """
        ...

    @abstractmethod
    def truncate(self, offset: Offset) -> None:
        """Discard all bytes at and after offset.

        Only used to drop an incomplete trailing write found by recovery.

        Raises:
            LogIOError: If the truncate fails.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Flush and close the log. Safe to call more than once."""
        ...
