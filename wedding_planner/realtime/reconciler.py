"""
Generic list reconciliation: apply change events to an in-memory list mirror
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from wedding_planner.realtime.events import ChangeEvent, ChangeType

Record = Dict[str, Any]


class InsertPosition(str, Enum):
    PREPEND = "prepend"
    APPEND = "append"


def record_id(record: Record) -> Any:
    return record.get("id")


def preserving(*fields: str) -> Callable[[Record, Record], Record]:
    """Merge that keeps client-only ``fields`` the incoming payload does not carry"""
    def merge(current: Record, incoming: Record) -> Record:
        merged = dict(incoming)
        for field in fields:
            if field not in merged and field in current:
                merged[field] = current[field]
        return merged
    return merge


class ListReconciler:
    """Applies insert/update/delete events to a list of records keyed by id.

    ``apply`` never mutates the list it is given; it returns the new list so
    callers can swap state in one assignment.
    """

    def __init__(
        self,
        id_of: Callable[[Record], Any] = record_id,
        merge: Optional[Callable[[Record, Record], Record]] = None,
        position: InsertPosition = InsertPosition.PREPEND,
        scope_column: Optional[str] = None,
        scope_value: Any = None,
        accept: Optional[Callable[[Record], bool]] = None,
        evict_on_reject: bool = False,
    ):
        self.id_of = id_of
        self.merge = merge or preserving()
        self.position = position
        self.scope_column = scope_column
        self.scope_value = scope_value
        self.accept = accept
        self.evict_on_reject = evict_on_reject

    def in_scope(self, event: ChangeEvent) -> bool:
        if self.scope_column is None or self.scope_value is None:
            return True
        return event.matches(self.scope_column, self.scope_value)

    def apply(self, items: List[Record], event: ChangeEvent) -> List[Record]:
        if not self.in_scope(event):
            return items

        if event.type is ChangeType.INSERT:
            return self._insert(items, event.new or {})
        if event.type is ChangeType.UPDATE:
            return self._update(items, event.new or {})
        if event.type is ChangeType.DELETE:
            return self._delete(items, event.record)
        return items

    def _index_of(self, items: List[Record], key: Any) -> int:
        for index, item in enumerate(items):
            if self.id_of(item) == key:
                return index
        return -1

    def _insert(self, items: List[Record], record: Record) -> List[Record]:
        if self.accept is not None and not self.accept(record):
            return items

        index = self._index_of(items, self.id_of(record))
        if index >= 0:
            # Already mirrored (snapshot and feed raced): replace in place
            updated = list(items)
            updated[index] = self.merge(items[index], record)
            return updated

        if self.position is InsertPosition.APPEND:
            return [*items, record]
        return [record, *items]

    def _update(self, items: List[Record], record: Record) -> List[Record]:
        index = self._index_of(items, self.id_of(record))
        if index < 0:
            return items
        if self.evict_on_reject and self.accept is not None and not self.accept(record):
            # Moved out of the accepted set (e.g. approved off a moderation queue)
            return self._delete(items, record)
        updated = list(items)
        updated[index] = self.merge(items[index], record)
        return updated

    def _delete(self, items: List[Record], record: Record) -> List[Record]:
        key = self.id_of(record)
        if self._index_of(items, key) < 0:
            return items
        return [item for item in items if self.id_of(item) != key]
