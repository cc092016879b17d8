"""Domain entities for the key-value engine.

Exports:
    Record:
        - RecordHeader: 12-byte prefix (timestamp, key_size, value_size)
        - Record: Immutable key-value pair with creation timestamp
        - MAX_FIELD_VALUE: Largest value a u32 header field can hold
"""

from kv_engine.domain.entities.record import MAX_FIELD_VALUE, Record, RecordHeader

__all__ = [
    "Record",
    "RecordHeader",
    "MAX_FIELD_VALUE",
]
