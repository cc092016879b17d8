"""In-memory key directory.

Maps each key to the location of its most recent record in the log. The
index is never persisted; it is a cache derived from the log and rebuilt by
replaying the log on every open.
"""

from __future__ import annotations

from kv_engine.domain.value_objects import Offset, RecordLocation


class KeyIndex:
    """Hash index from key to RecordLocation with last-write-wins semantics.

    Both operations are O(1) amortized. No removal or iteration: the store
    has no deletes and no range queries.

    Example:
        >>> index = KeyIndex()
        >>> index.insert("hello", Offset(0), 22)
        >>> index.insert("hello", Offset(22), 21)
        >>> index.lookup("hello")
        RecordLocation(22+21)
        >>> index.lookup("missing") is None
        True
    """

    def __init__(self) -> None:
        self._entries: dict[str, RecordLocation] = {}

    def insert(self, key: str, offset: Offset, length: int) -> None:
        """Point key at the record stored at (offset, length).

        Any existing entry for key is overwritten.
        """
        self._entries[key] = RecordLocation(offset=offset, length=length)

    def lookup(self, key: str) -> RecordLocation | None:
        """Return the location of the latest record for key, if any."""
        return self._entries.get(key)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
