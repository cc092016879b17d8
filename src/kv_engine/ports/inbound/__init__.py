"""Inbound ports - APIs offered to clients of the engine."""

from kv_engine.ports.inbound.kv_store import KVStore, RecoveryStats

__all__ = [
    "KVStore",
    "RecoveryStats",
]
