"""Application layer for the key-value engine.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    - KVEngine: Main entry point for the key-value store
    - open_engine: Construct and open a KVEngine in one call
"""

from kv_engine.application.engine import KVEngine, open_engine

__all__ = [
    "KVEngine",
    "open_engine",
]
