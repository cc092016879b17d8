"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (disk)
"""

from kv_engine.adapters.outbound import FileLogStore

__all__ = [
    # Outbound adapters
    "FileLogStore",
]
