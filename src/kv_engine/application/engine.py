"""KV Engine - Unified entry point for the key-value store.

This module provides the KVEngine class that composes the log store, the
record codec and the key index into a get/set store, and runs recovery
when the store is opened.

Usage:
    from kv_engine.application import KVEngine

    with KVEngine("/path/to/data.log") as db:
        db.set("hello", "world")
        db.get("hello")  # -> "world"
        db.get("missing")  # -> None

Each KVEngine is an independent instance owning its own file and index;
any number of them may coexist in one process on distinct files.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from kv_engine.adapters.outbound.file_log_store import FileLogStore
from kv_engine.domain.entities import Record
from kv_engine.domain.errors import CorruptRecordError
from kv_engine.domain.services import KeyIndex, RecoveryService
from kv_engine.infrastructure.config import get_config
from kv_engine.infrastructure.logging import get_logger
from kv_engine.infrastructure.metrics import MetricsRegistry, get_metrics
from kv_engine.infrastructure.tracing import trace_span
from kv_engine.ports.inbound.kv_store import RecoveryStats
from kv_engine.ports.outbound.log_store import LogStore, SyncMode

logger = get_logger(__name__)


class KVEngine:
    """Bitcask-style key-value engine over a single append-only log.

    The engine is the sole owner of its log store and index: both are
    created by open() and released together by close().

    Features:
        - Durable set() via append + sync
        - Single-read get() via the in-memory index
        - Index rebuild from the log on open, tolerating a torn last write

    Thread Safety:
        Not thread-safe. One engine per file, used from one thread.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        sync_mode: SyncMode | str | None = None,
        truncate_torn_tail: bool | None = None,
        log_store: LogStore | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the engine in the closed state.

        Args:
            path: Log file path. Created on open() if it does not exist.
            sync_mode: Append sync mode (default from config).
            truncate_torn_tail: Cut an incomplete trailing write during
                recovery (default from config).
            log_store: Pre-built log store to use instead of opening path.
                The engine takes ownership and closes it. If open() fails
                the store is closed and a retry reopens from its path.
            metrics: Metrics registry (default: process-wide registry).

        Raises:
            ValueError: If neither or both of path and log_store are given.
        """
        if (path is None) == (log_store is None):
            raise ValueError("Exactly one of path or log_store must be given")

        config = get_config()
        self._path = Path(path) if path is not None else log_store.path
        self._sync_mode = SyncMode(sync_mode) if sync_mode is not None else None
        self._truncate_torn_tail = (
            truncate_torn_tail
            if truncate_torn_tail is not None
            else config.storage.truncate_torn_tail
        )
        self._metrics = metrics or get_metrics()

        self._provided_log_store = log_store
        self._log_store: LogStore | None = None
        self._index: KeyIndex | None = None
        self._recovery_stats: RecoveryStats | None = None

    @property
    def path(self) -> Path | None:
        """Get the log file path."""
        return self._path

    @property
    def is_open(self) -> bool:
        """Check if the engine is open."""
        return self._log_store is not None

    @property
    def recovery_stats(self) -> RecoveryStats | None:
        """Statistics from the most recent open()."""
        return self._recovery_stats

    def open(self) -> RecoveryStats:
        """Open the log and rebuild the index by replaying it.

        Returns:
            Statistics from the replay.

        Raises:
            RuntimeError: If already open.
            LogIOError: If the log cannot be opened or read.
            CorruptRecordError: If a complete record cannot be decoded.
        """
        if self.is_open:
            raise RuntimeError("KV engine already open")
        if self._provided_log_store is None and self._path is None:
            raise RuntimeError("KV engine has no log to open")

        with trace_span("kv_engine.open", {"kv.path": str(self._path)}):
            log_store = self._provided_log_store or FileLogStore(
                self._path, sync_mode=self._sync_mode
            )
            index = KeyIndex()

            try:
                stats = RecoveryService(
                    log_store, index, truncate_torn_tail=self._truncate_torn_tail
                ).recover()
            except Exception:
                # A retried open() reopens from path
                self._provided_log_store = None
                log_store.close()
                raise

        self._log_store = log_store
        self._index = index
        self._recovery_stats = stats

        self._metrics.recovery_duration_seconds.set(stats.duration_ms / 1000)
        self._metrics.recovery_records_replayed.inc(stats.records_replayed)
        self._metrics.torn_tail_bytes.inc(stats.torn_tail_bytes)
        self._metrics.index_keys.set(len(index))

        logger.info(
            "kv_engine_opened",
            path=str(self._path),
            keys=stats.keys_indexed,
            log_size=log_store.size,
        )
        return stats

    def close(self) -> None:
        """Close the log store and drop the index.

        Raises:
            RuntimeError: If not open.
        """
        if not self.is_open:
            raise RuntimeError("KV engine not open")

        log_store = self._log_store
        self._log_store = None
        self._index = None
        self._provided_log_store = None
        log_store.close()

        logger.info("kv_engine_closed", path=str(self._path))

    def set(self, key: str, value: str) -> None:
        """Store value under key.

        The record is appended and synced before the index is updated, so a
        failed append leaves the previous value (or absence) in place.

        Args:
            key: Non-empty string key.
            value: String value, possibly empty.

        Raises:
            RuntimeError: If not open.
            TypeError: If key or value is not a string.
            ValueError: If key is empty.
            RecordTooLargeError: If key or value exceeds 4 GiB when encoded.
            LogIOError: If the append fails.
        """
        self._require_open()

        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("key and value must be str")
        if not key:
            raise ValueError("key must not be empty")

        data = Record.new(key, value).to_bytes()

        start = time.perf_counter()
        offset = self._log_store.append(data)
        self._metrics.append_latency_seconds.observe(time.perf_counter() - start)

        self._index.insert(key, offset, len(data))

        self._metrics.sets_total.inc()
        self._metrics.bytes_appended_total.inc(len(data))
        self._metrics.index_keys.set(len(self._index))
        logger.debug("kv_set", key=key, offset=offset, length=len(data))

    def get(self, key: str) -> str | None:
        """Return the latest value stored under key.

        Args:
            key: The key to look up.

        Returns:
            The value, or None if the key was never set.

        Raises:
            RuntimeError: If not open.
            LogIOError: If the indexed record cannot be read.
            CorruptRecordError: If the indexed record cannot be decoded or
                belongs to a different key.
        """
        self._require_open()

        location = self._index.lookup(key)
        if location is None:
            self._metrics.gets_total.labels(result="miss").inc()
            return None

        data = self._log_store.read_at(location.offset, location.length)
        record = Record.from_bytes(data, offset=location.offset)
        if record.key != key:
            raise CorruptRecordError(
                f"Index points {key!r} at a record for {record.key!r}",
                offset=location.offset,
            )

        self._metrics.gets_total.labels(result="hit").inc()
        return record.value

    def get_stats(self) -> dict[str, Any]:
        """Get engine statistics.

        Returns:
            Dictionary with various statistics.
        """
        stats: dict[str, Any] = {
            "open": self.is_open,
            "path": str(self._path) if self._path is not None else None,
        }

        if self.is_open:
            stats["keys"] = len(self._index)
            stats["log_size_bytes"] = self._log_store.size
            stats["sync_mode"] = self._log_store.sync_mode.value

        if self._recovery_stats is not None:
            stats["recovery"] = self._recovery_stats.to_dict()

        return stats

    def _require_open(self) -> None:
        if not self.is_open:
            raise RuntimeError("KV engine not open")

    def __enter__(self) -> KVEngine:
        """Context manager entry. Opens the engine unless open_engine() already did."""
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


def open_engine(path: str | Path, **options: Any) -> KVEngine:
    """Create a KVEngine for path and open it.

    Args:
        path: Log file path.
        **options: Keyword arguments forwarded to KVEngine.

    Returns:
        An open engine.
    """
    engine = KVEngine(path, **options)
    engine.open()
    return engine
