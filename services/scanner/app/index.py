"""
In-memory index over the inventory records fetched from the store.

The index is a derived view: it is rebuilt from every fetch and never
persisted. Iteration order is the order of the input sequence.
"""
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .schemas import InventoryRecord

Entry = Tuple[str, InventoryRecord]


class InventoryIndex:
    """Lookup by rack ID and substring search over inventory records."""

    def __init__(self, records: Optional[Dict[str, InventoryRecord]] = None):
        self._records: Dict[str, InventoryRecord] = dict(records or {})

    @classmethod
    def build(cls, records: Iterable[Entry]) -> "InventoryIndex":
        """
        Build an index from ``(rack_id, record)`` pairs.

        If a rack ID repeats, the later record replaces the earlier one but
        keeps the earlier position.
        """
        by_rack: Dict[str, InventoryRecord] = {}
        for rack_id, record in records:
            by_rack[rack_id] = record
        return cls(by_rack)

    @classmethod
    def from_records(cls, records: Iterable[InventoryRecord]) -> "InventoryIndex":
        return cls.build((record.rack_id, record) for record in records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._records.items())

    def lookup(self, rack_id: str) -> Optional[InventoryRecord]:
        return self._records.get(rack_id)

    def search(self, term: str) -> Iterator[Entry]:
        """
        Yield entries whose display name, rack ID or category contains ``term``.

        Matching is case-insensitive; a blank term yields every entry.
        """
        needle = term.strip().lower()
        for rack_id, record in self._records.items():
            if not needle:
                yield rack_id, record
                continue
            fields = (record.display_name, rack_id, record.category or "")
            if any(needle in field.lower() for field in fields):
                yield rack_id, record
