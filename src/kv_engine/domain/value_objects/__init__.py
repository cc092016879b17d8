"""Value objects for the key-value engine domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    - Offset: Byte position within the log file
    - Timestamp: Record creation time (seconds, u32)
    - RecordLocation: (offset, length) of a record in the log
    - RECORD_HEADER_SIZE: Size of the fixed record header in bytes
"""

from kv_engine.domain.value_objects.identifiers import (
    RECORD_HEADER_SIZE,
    Offset,
    RecordLocation,
    Timestamp,
)

__all__ = [
    "Offset",
    "Timestamp",
    "RecordLocation",
    "RECORD_HEADER_SIZE",
]
