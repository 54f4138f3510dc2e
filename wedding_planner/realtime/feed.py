"""
Change-feed clients: subscribe to row-level changes of a table.

Two feeds exist, matching the two table stores:

* ``InProcessChangeFeed`` is fed by the SQL table store after each commit.
* ``FirestoreChangeFeed`` wraps Firestore ``on_snapshot`` listeners.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from wedding_planner.realtime.events import ChangeEvent, ChangeType

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]
ColumnFilter = Tuple[str, Any]


class Subscription:
    """Handle for one open subscription; ``unsubscribe`` may be called repeatedly"""

    def __init__(self, table: str, close: Callable[[], None]):
        self.table = table
        self._close = close
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._close()
        logger.info(f"Unsubscribed from {self.table} changes")


class ChangeFeed(ABC):
    @abstractmethod
    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        filter: Optional[ColumnFilter] = None,
    ) -> Subscription:
        """Deliver every change of ``table`` (optionally ``column == value``) to ``callback``"""


class InProcessChangeFeed(ChangeFeed):
    """Pub/sub fan-out inside this process"""

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Optional[ColumnFilter], ChangeCallback]]] = {}
        self._lock = threading.Lock()

    def subscribe(self, table, callback, filter=None) -> Subscription:
        entry = (filter, callback)
        with self._lock:
            self._listeners.setdefault(table, []).append(entry)
        logger.info(f"Subscribed to {table} changes (filter={filter})")

        def close():
            with self._lock:
                listeners = self._listeners.get(table, [])
                if entry in listeners:
                    listeners.remove(entry)
                if not listeners:
                    self._listeners.pop(table, None)

        return Subscription(table, close)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event.table, []))

        for filter, callback in listeners:
            if filter is not None and not event.matches(*filter):
                continue
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Error delivering {event.type.value} on {event.table}: {e}")

    def listener_count(self, table: str) -> int:
        with self._lock:
            return len(self._listeners.get(table, []))


_FIRESTORE_CHANGE_TYPES = {
    "ADDED": ChangeType.INSERT,
    "MODIFIED": ChangeType.UPDATE,
    "REMOVED": ChangeType.DELETE,
}


class FirestoreChangeFeed(ChangeFeed):
    """Change feed over Firestore ``on_snapshot`` listeners"""

    def __init__(self, client):
        self.client = client

    def subscribe(self, table, callback, filter=None) -> Subscription:
        query = self.client.collection(table)
        if filter is not None:
            query = query.where(filter[0], "==", filter[1])

        # The first snapshot replays every matching document as ADDED;
        # live mirrors load that state through their own snapshot fetch.
        initial = {"pending": True}

        def on_snapshot(docs, changes, read_time):
            if initial["pending"]:
                initial["pending"] = False
                return
            for change in changes:
                change_type = _FIRESTORE_CHANGE_TYPES.get(change.type.name)
                if change_type is None:
                    continue
                record = change.document.to_dict() or {}
                record["id"] = change.document.id
                if change_type is ChangeType.DELETE:
                    event = ChangeEvent(table, change_type, old=record)
                else:
                    event = ChangeEvent(table, change_type, new=record)
                try:
                    callback(event)
                except Exception as e:
                    logger.error(f"Error delivering {change_type.value} on {table}: {e}")

        watch = query.on_snapshot(on_snapshot)
        logger.info(f"Listening to Firestore collection {table} (filter={filter})")
        return Subscription(table, watch.unsubscribe)


# Shared by the SQL table store and every live mirror in this process
local_feed = InProcessChangeFeed()


@lru_cache(maxsize=1)
def get_change_feed() -> ChangeFeed:
    from wedding_planner.services.repositories import use_firestore
    from wedding_planner.services.firebase_client import get_firestore_client

    if use_firestore():
        return FirestoreChangeFeed(get_firestore_client())
    return local_feed
