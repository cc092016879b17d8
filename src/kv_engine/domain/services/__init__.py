"""Domain services for engine logic.

Services implement domain logic that doesn't naturally fit within a single
entity: the key index and the log replay that rebuilds it.
"""

from kv_engine.domain.services.key_index import KeyIndex
from kv_engine.domain.services.recovery_service import RecoveryService

__all__ = [
    "KeyIndex",
    "RecoveryService",
]
