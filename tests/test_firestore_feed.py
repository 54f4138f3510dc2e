"""
Tests for the Firestore change feed, using an in-memory stand-in for the client
"""

from types import SimpleNamespace

import pytest

from wedding_planner.realtime.events import ChangeType
from wedding_planner.realtime.feed import FirestoreChangeFeed

class FakeWatch:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True

class FakeQuery:
    """Collection reference recording ``where`` clauses and snapshot listeners"""

    def __init__(self, name):
        self.name = name
        self.clauses = []
        self.listeners = []
        self.watches = []

    def where(self, field, op, value):
        self.clauses.append((field, op, value))
        return self

    def on_snapshot(self, callback):
        self.listeners.append(callback)
        watch = FakeWatch()
        self.watches.append(watch)
        return watch

    def emit(self, *changes):
        for listener in self.listeners:
            listener([], list(changes), None)

class FakeClient:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeQuery(name))

def doc_change(kind, doc_id, data):
    document = SimpleNamespace(id=doc_id, to_dict=lambda: dict(data) if data is not None else None)
    return SimpleNamespace(type=SimpleNamespace(name=kind), document=document)

@pytest.fixture
def client():
    return FakeClient()

@pytest.fixture
def feed(client):
    return FirestoreChangeFeed(client)

def test_initial_snapshot_is_skipped(feed, client):
    events = []
    feed.subscribe("guests", events.append)

    client.collection("guests").emit(doc_change("ADDED", "g1", {"name": "Ann"}))
    assert events == []

    client.collection("guests").emit(doc_change("ADDED", "g2", {"name": "Bob"}))
    assert [event.record_id for event in events] == ["g2"]

def test_change_types_map_to_events(feed, client):
    events = []
    feed.subscribe("guests", events.append)
    guests = client.collection("guests")
    guests.emit()

    guests.emit(
        doc_change("ADDED", "g1", {"name": "Ann"}),
        doc_change("MODIFIED", "g1", {"name": "Ann B."}),
        doc_change("REMOVED", "g1", {"name": "Ann B."}),
    )

    assert [event.type for event in events] == [ChangeType.INSERT, ChangeType.UPDATE, ChangeType.DELETE]
    inserted, updated, removed = events
    assert inserted.new == {"name": "Ann", "id": "g1"}
    assert updated.new == {"name": "Ann B.", "id": "g1"}
    # Firestore does not send the previous document
    assert updated.old is None
    assert removed.old == {"name": "Ann B.", "id": "g1"}
    assert removed.new is None
    assert all(event.table == "guests" for event in events)

def test_document_id_injected_when_body_is_empty(feed, client):
    events = []
    feed.subscribe("seats", events.append)
    seats = client.collection("seats")
    seats.emit()

    seats.emit(doc_change("REMOVED", "s9", None))

    assert events[0].old == {"id": "s9"}

def test_filter_becomes_where_clause(feed, client):
    feed.subscribe("vendor_payments", lambda event: None, ("vendor_id", "v1"))

    assert client.collection("vendor_payments").clauses == [("vendor_id", "==", "v1")]

def test_unsubscribe_stops_the_listener(feed, client):
    subscription = feed.subscribe("guests", lambda event: None)

    subscription.unsubscribe()

    assert client.collection("guests").watches[0].unsubscribed is True

def test_callback_errors_do_not_stop_delivery(feed, client):
    seen = []

    def callback(event):
        seen.append(event.record_id)
        if event.record_id == "g1":
            raise RuntimeError("listener failed")

    feed.subscribe("guests", callback)
    guests = client.collection("guests")
    guests.emit()
    guests.emit(doc_change("ADDED", "g1", {}), doc_change("ADDED", "g2", {}))

    assert seen == ["g1", "g2"]
