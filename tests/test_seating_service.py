"""
Tests for seating service functionality
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.events import ChangeType
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore
from wedding_planner.services.seating_service import SeatingService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_seating.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

@pytest.fixture
def feed():
    return InProcessChangeFeed()

@pytest.fixture
def store(feed):
    """Create test table store"""
    Base.metadata.create_all(bind=engine)
    try:
        yield SqlTableStore(TestingSessionLocal, feed)
    finally:
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def guests(store):
    return [
        GuestService.create_guest(store, {"name": "John Doe", "email": "john@example.com", "rsvp_status": "confirmed"}),
        GuestService.create_guest(store, {"name": "Jane Smith", "email": "jane@example.com", "rsvp_status": "pending"}),
        GuestService.create_guest(store, {"name": "Bob Johnson", "email": "bob@example.com", "rsvp_status": "declined"}),
    ]

def test_create_table_with_seats(store):
    result = SeatingService.create_table(store, {"name": "Head Table", "shape": "rectangle", "capacity": 6})

    table = result["table"]
    assert table["position"] == {"x": 400, "y": 300}
    assert table["dimensions"] == {"width": 300, "height": 150}
    assert table["rotation"] == 0
    assert len(result["seats"]) == 6
    assert all(seat["guest_id"] is None for seat in result["seats"])

def test_round_table_dimensions(store):
    table = SeatingService.create_table(store, {"name": "A1", "shape": "round", "capacity": 8})["table"]

    assert table["dimensions"] == {"width": 200, "height": 200}

def test_assign_guest_moves_between_seats(store, guests, feed):
    john = guests[0]
    seats = SeatingService.create_table(store, {"name": "A1", "capacity": 4})["seats"]

    SeatingService.assign_guest_to_seat(store, seats[0]["id"], john["id"])
    SeatingService.assign_guest_to_seat(store, seats[1]["id"], john["id"])

    holders = store.select("seats", {"guest_id": john["id"]})
    assert [seat["id"] for seat in holders] == [seats[1]["id"]]
    assert store.get("seats", seats[0]["id"])["guest_id"] is None

def test_assign_publishes_both_seat_changes(store, guests, feed):
    john = guests[0]
    seats = SeatingService.create_table(store, {"name": "A1", "capacity": 2})["seats"]
    SeatingService.assign_guest_to_seat(store, seats[0]["id"], john["id"])

    received = []
    feed.subscribe("seats", received.append)
    SeatingService.assign_guest_to_seat(store, seats[1]["id"], john["id"])

    assert [event.type for event in received] == [ChangeType.UPDATE, ChangeType.UPDATE]
    assert received[0].new["id"] == seats[0]["id"] and received[0].new["guest_id"] is None
    assert received[1].new["id"] == seats[1]["id"] and received[1].new["guest_id"] == john["id"]

def test_assign_unknown_guest_fails(store):
    seats = SeatingService.create_table(store, {"name": "A1", "capacity": 1})["seats"]

    with pytest.raises(RecordNotFound):
        SeatingService.assign_guest_to_seat(store, seats[0]["id"], "no-such-guest")

def test_grow_table_adds_seats(store):
    table = SeatingService.create_table(store, {"name": "A1", "capacity": 4})["table"]

    SeatingService.update_table(store, table["id"], {"capacity": 7})

    assert len(store.select("seats", {"table_id": table["id"]})) == 7

def test_shrink_table_removes_empty_seats_first(store, guests):
    john, jane = guests[0], guests[1]
    result = SeatingService.create_table(store, {"name": "A1", "capacity": 5})
    table, seats = result["table"], result["seats"]
    SeatingService.assign_guest_to_seat(store, seats[0]["id"], john["id"])
    SeatingService.assign_guest_to_seat(store, seats[4]["id"], jane["id"])

    SeatingService.update_table(store, table["id"], {"capacity": 2})

    remaining = store.select("seats", {"table_id": table["id"]})
    assert len(remaining) == 2
    assert {seat["guest_id"] for seat in remaining} == {john["id"], jane["id"]}

def test_delete_table_removes_seats(store):
    table = SeatingService.create_table(store, {"name": "A1", "capacity": 3})["table"]

    SeatingService.delete_table(store, table["id"])

    assert store.select("tables") == []
    assert store.select("seats") == []

def test_delete_guest_frees_seat(store, guests):
    john = guests[0]
    seats = SeatingService.create_table(store, {"name": "A1", "capacity": 2})["seats"]
    SeatingService.assign_guest_to_seat(store, seats[0]["id"], john["id"])

    GuestService.delete_guest(store, john["id"])

    assert store.get("seats", seats[0]["id"])["guest_id"] is None

def test_seating_summary(store, guests):
    john = guests[0]
    seats = SeatingService.create_table(store, {"name": "A1", "capacity": 4})["seats"]
    SeatingService.create_table(store, {"name": "B1", "capacity": 2})
    SeatingService.assign_guest_to_seat(store, seats[0]["id"], john["id"])

    summary = SeatingService.get_seating_summary(store)

    assert summary["total_tables"] == 2
    assert summary["total_seats"] == 6
    assert summary["seated_guests"] == 1
    # Jane still needs a seat; Bob declined
    assert summary["unseated_guests"] == 1
    a1 = next(t for t in summary["tables"] if t["table_name"] == "A1")
    assert a1["occupied"] == 1
    assert a1["available_seats"] == 3

def test_delete_group_unassigns_tables(store):
    group = SeatingService.create_group(store, {"name": "Bride's family", "color": "#f9a"})
    table = SeatingService.create_table(store, {"name": "A1", "capacity": 2})["table"]
    SeatingService.assign_table_to_group(store, table["id"], group["id"])

    SeatingService.delete_group(store, group["id"])

    assert store.get("tables", table["id"])["group_id"] is None
    assert SeatingService.list_groups(store) == []

def test_assign_table_to_unknown_group_fails(store):
    table = SeatingService.create_table(store, {"name": "A1", "capacity": 2})["table"]

    with pytest.raises(RecordNotFound):
        SeatingService.assign_table_to_group(store, table["id"], "no-such-group")
