"""Outbound adapters - implementations of outbound ports.

These adapters implement external dependencies like the log file on disk.
"""

from kv_engine.adapters.outbound.file_log_store import FileLogStore

__all__ = [
    "FileLogStore",
]
