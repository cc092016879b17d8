"""Key-value store port - the public contract of the engine.

References:
    - Sheehy & Smith, "Bitcask: A Log-Structured Hash Table for Fast
      Key/Value Data" (2010)
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from kv_engine.domain.value_objects import Offset


@dataclass
class RecoveryStats:
    """Statistics from replaying the log at startup."""

    records_replayed: int = 0  # Complete records decoded
    keys_indexed: int = 0  # Distinct keys in the index afterwards
    valid_end_offset: Offset = Offset(0)  # End of the last complete record
    torn_tail_bytes: int = 0  # Bytes of an incomplete trailing write
    tail_truncated: bool = False  # Whether those bytes were cut
    duration_ms: float = 0.0  # Total recovery time

    def to_dict(self) -> dict[str, Any]:
        """Return the statistics as a plain dictionary."""
        return asdict(self)


class KVStore(Protocol):
    """Protocol for a string key-value store.

    Lifecycle:
        Closed --open()--> Open --close()--> Closed

    get() and set() are only valid while Open.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Check whether the store is open."""
        ...

    @abstractmethod
    def open(self) -> RecoveryStats:
        """Open the store and rebuild the index from the log.

        Raises:
            LogIOError: If the log cannot be opened or read.
            CorruptRecordError: If a complete record cannot be decoded.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, superseding any previous value.

        Raises:
            LogIOError: If the append fails. The previous value stays visible.
        """
        ...

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the latest value for key, or None if it was never set.

        Raises:
            LogIOError: If the record cannot be read.
            CorruptRecordError: If the record cannot be decoded.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the log and drop the index."""
        ...
