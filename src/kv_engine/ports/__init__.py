"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (KVStore)
- Outbound ports: Dependencies on external systems (LogStore)

Adapters implement these ports with concrete functionality.
"""

from kv_engine.ports.inbound import KVStore, RecoveryStats
from kv_engine.ports.outbound import LogStore, SyncMode

__all__ = [
    # Inbound ports
    "KVStore",
    "RecoveryStats",
    # Outbound ports
    "LogStore",
    "SyncMode",
]
