"""
Live mirrors: an in-memory list kept in sync with a remote table.

A mirror fetches a snapshot, subscribes to the table's change feed, applies
each event through a ``ListReconciler`` and raises toasts for selected
transitions. Subscriptions are owned by the mirror: ``activate`` acquires
them, ``dispose`` releases them, and the mirror is usable as a context
manager.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from wedding_planner.realtime.events import ChangeEvent, ChangeType
from wedding_planner.realtime.feed import ChangeFeed, Subscription
from wedding_planner.realtime.notifications import Toast, log_toast
from wedding_planner.realtime.reconciler import InsertPosition, ListReconciler, preserving

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

UNKNOWN_GUEST = "Unknown Guest"


@dataclass(frozen=True)
class Join:
    """Display field resolved by a point lookup on a parent table"""
    field: str
    table: str
    foreign_key: str
    source: str = "name"
    fallback: str = UNKNOWN_GUEST


@dataclass(frozen=True)
class MirrorSpec:
    """Per-entity configuration of a live mirror"""
    name: str
    table: str
    order_by: Optional[str] = "created_at"
    descending: bool = True
    position: InsertPosition = InsertPosition.PREPEND
    scope_column: Optional[str] = None
    scope_required: bool = False
    joins: Tuple[Join, ...] = ()
    accept: Optional[Callable[[Record], bool]] = None
    evict_on_reject: bool = False
    toast: Optional[Callable[[ChangeEvent], Optional[Toast]]] = None
    summarize: Optional[Callable[[List[Record]], Dict[str, Any]]] = None
    snapshot_filters: Dict[str, Any] = field(default_factory=dict)

    def reconciler(self, scope: Any = None) -> ListReconciler:
        return ListReconciler(
            merge=preserving(*(join.field for join in self.joins)),
            position=self.position,
            scope_column=self.scope_column,
            scope_value=scope,
            accept=self.accept,
            evict_on_reject=self.evict_on_reject,
        )


class LiveMirror:
    def __init__(
        self,
        spec: MirrorSpec,
        store,
        feed: ChangeFeed,
        scope: Any = None,
        notify: Optional[Callable[[Toast], None]] = None,
    ):
        self.spec = spec
        self.store = store
        self.feed = feed
        self.scope = scope
        self.notify = notify or log_toast

        self.items: List[Record] = []
        self.loading = True
        self.error: Optional[Exception] = None

        self._reconciler = spec.reconciler(scope)
        self._subscriptions: List[Subscription] = []
        self._listeners: List[Callable[["LiveMirror", ChangeEvent], None]] = []
        self._lock = threading.RLock()
        self._active = False
        self._disposed = False

    # -- lifecycle --

    def activate(self) -> "LiveMirror":
        if self._active or self._disposed:
            return self
        self._active = True

        if self.spec.scope_required and self.scope is None:
            self.items = []
            self.loading = False
            return self

        filter = (self.spec.scope_column, self.scope) if self.spec.scope_column and self.scope is not None else None
        self._subscriptions.append(self.feed.subscribe(self.spec.table, self.handle, filter))
        self._load_snapshot()
        return self

    def dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            subscriptions, self._subscriptions = self._subscriptions, []
            self._listeners.clear()
        for subscription in subscriptions:
            subscription.unsubscribe()

    def __enter__(self) -> "LiveMirror":
        return self.activate()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_listener(self, listener: Callable[["LiveMirror", ChangeEvent], None]) -> None:
        self._listeners.append(listener)

    # -- state --

    def summary(self) -> Optional[Dict[str, Any]]:
        if self.spec.summarize is None:
            return None
        return self.spec.summarize(self.items)

    def state(self) -> Dict[str, Any]:
        return {
            "channel": self.spec.name,
            "items": list(self.items),
            "loading": self.loading,
            "error": str(self.error) if self.error else None,
            "summary": self.summary(),
        }

    def _load_snapshot(self) -> None:
        filters = dict(self.spec.snapshot_filters)
        if self.spec.scope_column and self.scope is not None:
            filters[self.spec.scope_column] = self.scope

        self.loading = True
        try:
            rows = self.store.select(
                self.spec.table,
                filters=filters or None,
                order_by=self.spec.order_by,
                descending=self.spec.descending,
            )
            rows = [self._join(row) for row in rows]
            with self._lock:
                if self._disposed:
                    return
                # Rows the feed delivered while the fetch was in flight are newer
                fresh = {row.get("id"): row for row in self.items}
                merged = [fresh.pop(row.get("id"), row) for row in rows]
                extra = list(fresh.values())
                if self.spec.position is InsertPosition.APPEND:
                    self.items = merged + extra
                else:
                    self.items = extra + merged
        except Exception as e:
            self.error = e
            logger.error(f"Error fetching {self.spec.name}: {e}")
        finally:
            self.loading = False

    def _join(self, record: Record) -> Record:
        if not self.spec.joins:
            return record
        joined = dict(record)
        for join in self.spec.joins:
            if join.field in joined and joined[join.field]:
                continue
            joined[join.field] = self._lookup(join, record.get(join.foreign_key))
        return joined

    def _lookup(self, join: Join, key: Any) -> Any:
        if key is None:
            return join.fallback
        try:
            parent = self.store.get(join.table, key)
        except Exception as e:
            logger.warning(f"Lookup of {join.table} {key} failed, using '{join.fallback}': {e}")
            return join.fallback
        if not parent or not parent.get(join.source):
            return join.fallback
        return parent[join.source]

    def _previous(self, record: Record) -> Optional[Record]:
        """Mirrored copy of ``record`` minus joined fields, for feeds that omit the old row"""
        key = self._reconciler.id_of(record)
        for item in self.items:
            if self._reconciler.id_of(item) == key:
                previous = dict(item)
                for join in self.spec.joins:
                    if join.field not in record:
                        previous.pop(join.field, None)
                return previous
        return None

    # -- events --

    def handle(self, event: ChangeEvent) -> None:
        if self._disposed or not self._reconciler.in_scope(event):
            return

        if event.type is ChangeType.INSERT and self.spec.joins and event.new is not None:
            event = ChangeEvent(event.table, event.type, new=self._join(event.new), old=event.old)

        with self._lock:
            if self._disposed:
                return
            if event.type is ChangeType.UPDATE and event.old is None and event.new is not None:
                event = ChangeEvent(event.table, event.type, new=event.new, old=self._previous(event.new))
            before = self.items
            self.items = self._reconciler.apply(self.items, event)
            changed = self.items is not before
            listeners = list(self._listeners)

        if not changed:
            return

        if self.spec.toast is not None:
            toast = self.spec.toast(event)
            if toast is not None:
                self.notify(toast)

        for listener in listeners:
            listener(self, event)
