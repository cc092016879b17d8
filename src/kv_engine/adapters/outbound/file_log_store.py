"""File-based Log Store implementation.

This adapter implements the LogStore protocol on a single flat file.

File Format:
    A plain concatenation of encoded records - no file header, no footer,
    no checksums, no segments. A record's identity is its byte offset.

Durability:
    The file is unbuffered, so every append reaches the OS in full or fails.
    It is then synced according to the configured SyncMode before the offset
    is returned.

Thread Safety:
    Single-writer assumed. No internal locking.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterator

from kv_engine.domain.entities import RecordHeader
from kv_engine.domain.errors import LogIOError
from kv_engine.domain.value_objects import Offset
from kv_engine.infrastructure.config import get_config
from kv_engine.infrastructure.logging import get_logger
from kv_engine.ports.outbound.log_store import SyncMode

logger = get_logger(__name__)


class FileLogStore:
    """File-based implementation of the LogStore protocol.

    The file is opened unbuffered in append mode, so writes always land at
    end-of-file regardless of where the last read left the file position.

    Attributes:
        path: Path to the log file.
        size: Current end-of-file offset.
        sync_mode: How appends are synced to disk.
    """

    def __init__(
        self,
        file_path: str | Path,
        sync_mode: SyncMode | None = None,
    ) -> None:
        """Open the log file, creating it if it does not exist.

        The parent directory must already exist. Nothing is read from the
        file here; replaying it is the caller's job.

        Args:
            file_path: Path to the log file.
            sync_mode: Sync mode for durability (default from config).

        Raises:
            LogIOError: If the file cannot be opened or created.
        """
        self._path = Path(file_path)
        self._sync_mode = sync_mode or SyncMode(get_config().storage.sync_mode)
        self._closed = False

        try:
            self._file: BinaryIO = open(self._path, "a+b", buffering=0)
        except OSError as e:
            raise LogIOError(f"Cannot open log file {self._path}: {e}", self._path) from e

        try:
            self._size = os.fstat(self._file.fileno()).st_size
        except OSError as e:
            self._file.close()
            raise LogIOError(f"Cannot stat log file {self._path}: {e}", self._path) from e

        logger.info(
            "log_store_opened",
            path=str(self._path),
            size=self._size,
            sync_mode=self._sync_mode.value,
        )

    @property
    def path(self) -> Path:
        """Return the log file path."""
        return self._path

    @property
    def size(self) -> int:
        """Return the current end-of-file offset."""
        return self._size

    @property
    def sync_mode(self) -> SyncMode:
        """Return the current sync mode."""
        return self._sync_mode

    @property
    def closed(self) -> bool:
        """Return True once the store has been closed."""
        return self._closed

    def _require_open(self) -> None:
        if self._closed:
            raise LogIOError("Log store is closed", self._path)

    def _sync(self) -> None:
        """Push written data to stable storage according to the sync mode."""
        if self._sync_mode == SyncMode.FSYNC:
            os.fsync(self._file.fileno())
        elif self._sync_mode == SyncMode.FDATASYNC:
            # fdatasync not available on Windows/macOS, fall back to fsync
            getattr(os, "fdatasync", os.fsync)(self._file.fileno())
        # SyncMode.NONE - no sync

    def append(self, data: bytes) -> Offset:
        """Append bytes at end-of-file.

        The write always starts at the end of the last acknowledged record.
        Bytes past that point were left by a failed append and are cut off
        first. If the write or sync fails, the partial record is cut off
        again so the log keeps ending on a record boundary.

        Args:
            data: Encoded record bytes.

        Returns:
            The offset at which the write began.

        Raises:
            LogIOError: If the write or sync fails, or the file has shrunk
                below the acknowledged end.
        """
        self._require_open()

        offset = Offset(self._size)
        try:
            end = self._file.seek(0, os.SEEK_END)
            if end < offset:
                raise LogIOError(
                    f"Log file {self._path} shrank to {end} bytes, expected {offset}",
                    self._path,
                )
            if end > offset:
                logger.warning(
                    "discarding_unacknowledged_bytes",
                    offset=offset,
                    length=end - offset,
                )
                self._file.truncate(offset)

            self._write_all(data)
            self._sync()
        except OSError as e:
            self._discard_partial_write(offset)
            raise LogIOError(f"Append to {self._path} failed: {e}", self._path) from e

        self._size = offset + len(data)
        logger.debug("log_appended", offset=offset, length=len(data))
        return offset

    def _write_all(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = self._file.write(view)
            view = view[written:]

    def _discard_partial_write(self, offset: Offset) -> None:
        """Best-effort cut back to offset after a failed append.

        On failure the stray bytes stay until the next append removes them.
        """
        try:
            self._file.truncate(offset)
        except OSError as e:
            logger.error(
                "partial_write_not_discarded",
                path=str(self._path),
                offset=offset,
                error=str(e),
            )

    def read_at(self, offset: Offset, length: int) -> bytes:
        """Read exactly length bytes starting at offset.

        Args:
            offset: Byte offset to start reading from.
            length: Number of bytes to read.

        Returns:
            The requested bytes.

        Raises:
            ValueError: If offset or length is negative.
            LogIOError: If the range extends past end-of-file or the read fails.
        """
        self._require_open()

        if offset < 0 or length < 0:
            raise ValueError(f"Invalid read range: offset={offset}, length={length}")

        if offset + length > self._size:
            raise LogIOError(
                f"Read of {length} bytes at offset {offset} runs past end of log "
                f"(size {self._size})",
                self._path,
            )

        try:
            self._file.seek(offset)
            data = self._file.read(length)
        except OSError as e:
            raise LogIOError(f"Read from {self._path} failed: {e}", self._path) from e

        if len(data) != length:
            raise LogIOError(
                f"Short read: got {len(data)} bytes, expected {length}", self._path
            )

        return data

    def stream_from(self, offset: Offset) -> Iterator[tuple[Offset, bytes]]:
        """Iterate complete raw records starting at offset.

        Reads through a separate read-only handle so the write handle's
        position is left alone. A record whose header or body is cut short
        by end-of-file ends the iteration. Declared sizes are checked against
        the file size before the body is read.

        Args:
            offset: Offset of the first record to read.

        Yields:
            (record_offset, record_bytes) pairs in log order.

        Raises:
            LogIOError: If the file cannot be read.
        """
        self._require_open()

        try:
            with open(self._path, "rb") as f:
                file_size = os.fstat(f.fileno()).st_size
                f.seek(offset)
                position = offset

                while True:
                    header_data = f.read(RecordHeader.HEADER_SIZE)
                    if not header_data:
                        break  # EOF

                    if len(header_data) < RecordHeader.HEADER_SIZE:
                        logger.warning(
                            "partial_header_at_eof",
                            offset=position,
                            available=len(header_data),
                        )
                        break

                    header = RecordHeader.from_bytes(header_data, offset=Offset(position))
                    available = file_size - position - RecordHeader.HEADER_SIZE
                    if header.body_size > available:
                        logger.warning(
                            "partial_record_at_eof",
                            offset=position,
                            declared=header.body_size,
                            available=available,
                        )
                        break

                    body = f.read(header.body_size)
                    if len(body) < header.body_size:
                        # File shrank while scanning
                        logger.warning(
                            "partial_record_at_eof",
                            offset=position,
                            declared=header.body_size,
                            available=len(body),
                        )
                        break

                    yield Offset(position), header_data + body
                    position += header.record_size
        except OSError as e:
            raise LogIOError(f"Scan of {self._path} failed: {e}", self._path) from e

    def truncate(self, offset: Offset) -> None:
        """Discard all bytes at and after offset.

        Args:
            offset: New end-of-file offset.

        Raises:
            ValueError: If offset is outside the file.
            LogIOError: If the truncate or sync fails.
        """
        self._require_open()

        if offset < 0 or offset > self._size:
            raise ValueError(f"Cannot truncate to {offset} (size {self._size})")

        try:
            self._file.truncate(offset)
            self._sync()
        except OSError as e:
            raise LogIOError(f"Truncate of {self._path} failed: {e}", self._path) from e

        logger.info("log_truncated", path=str(self._path), old_size=self._size, new_size=offset)
        self._size = offset

    def close(self) -> None:
        """Sync and close the log file."""
        if self._closed:
            return

        self._closed = True
        try:
            self._sync()
        except OSError as e:
            raise LogIOError(f"Close of {self._path} failed: {e}", self._path) from e
        finally:
            self._file.close()

        logger.info("log_store_closed", path=str(self._path), size=self._size)

    def __enter__(self) -> FileLogStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
