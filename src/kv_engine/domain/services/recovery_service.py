"""Startup recovery: rebuild the key index by replaying the log.

Recovery scans the log from offset 0 and inserts every complete record into
the index in log order, so the last record for each key wins.

Crash Model:
    The only failure the log format defends against is a single incomplete
    trailing write (e.g. the process died mid-append). Such a torn tail is
    treated as absent. Any complete record that fails to decode is real
    corruption and is raised to the caller.
"""

from __future__ import annotations

import time

from kv_engine.domain.entities import Record
from kv_engine.domain.services.key_index import KeyIndex
from kv_engine.domain.value_objects import Offset
from kv_engine.infrastructure.logging import get_logger
from kv_engine.infrastructure.tracing import trace_span
from kv_engine.ports.inbound.kv_store import RecoveryStats
from kv_engine.ports.outbound.log_store import LogStore

logger = get_logger(__name__)


class RecoveryService:
    """Log replay into a KeyIndex.

    Usage:
        recovery = RecoveryService(log_store, index)
        stats = recovery.recover()
        print(f"Recovered {stats.keys_indexed} keys")

    Thread Safety:
        Recovery runs once, single-threaded, before the engine accepts calls.
    """

    def __init__(
        self,
        log_store: LogStore,
        index: KeyIndex,
        truncate_torn_tail: bool = True,
    ) -> None:
        """Initialize the recovery service.

        Args:
            log_store: The log to replay.
            index: The index to populate.
            truncate_torn_tail: Cut an incomplete trailing write so later
                appends follow the last complete record.
        """
        self._log_store = log_store
        self._index = index
        self._truncate_torn_tail = truncate_torn_tail

    def recover(self) -> RecoveryStats:
        """Replay the whole log into the index.

        Returns:
            Statistics about the replay.

        Raises:
            LogIOError: If the log cannot be read or truncated.
            CorruptRecordError: If a complete record cannot be decoded.
        """
        start_time = time.time()
        stats = RecoveryStats()
        position = Offset(0)

        with trace_span("kv_engine.recover", {"log.size": self._log_store.size}):
            for offset, data in self._log_store.stream_from(Offset(0)):
                record = Record.from_bytes(data, offset=offset)
                self._index.insert(record.key, offset, len(data))
                stats.records_replayed += 1
                position = Offset(offset + len(data))

            stats.valid_end_offset = position
            stats.torn_tail_bytes = self._log_store.size - position

            if stats.torn_tail_bytes > 0:
                logger.warning(
                    "torn_tail_detected",
                    valid_end_offset=position,
                    torn_tail_bytes=stats.torn_tail_bytes,
                )
                if self._truncate_torn_tail:
                    self._log_store.truncate(position)
                    stats.tail_truncated = True
                    logger.info("torn_tail_truncated", new_size=position)

        stats.keys_indexed = len(self._index)
        stats.duration_ms = (time.time() - start_time) * 1000

        logger.info(
            "recovery_completed",
            records_replayed=stats.records_replayed,
            keys_indexed=stats.keys_indexed,
            valid_end_offset=stats.valid_end_offset,
            duration_ms=round(stats.duration_ms, 3),
        )
        return stats
