"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
engine depends on, such as the log file on disk.
"""

from kv_engine.ports.outbound.log_store import LogStore, SyncMode

__all__ = [
    "LogStore",
    "SyncMode",
]
