"""
Tests for guest list and RSVP operations
"""

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_guests.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

@pytest.fixture
def store():
    """Create test table store"""
    Base.metadata.create_all(bind=engine)
    try:
        yield SqlTableStore(TestingSessionLocal, InProcessChangeFeed())
    finally:
        Base.metadata.drop_all(bind=engine)

def test_create_guest_normalizes_email(store):
    guest = GuestService.create_guest(store, {"name": "John Doe", "email": "  John@Example.COM "})

    assert guest["email"] == "john@example.com"
    assert guest["rsvp_status"] == "pending"
    assert GuestService.find_by_email(store, "JOHN@example.com")["id"] == guest["id"]

def test_find_by_email_missing(store):
    assert GuestService.find_by_email(store, "nobody@example.com") is None

def test_get_missing_guest_raises(store):
    with pytest.raises(RecordNotFound):
        GuestService.get_guest(store, "missing")

def test_list_guests_filters(store):
    GuestService.create_guest(store, {"name": "A", "email": "a@example.com", "category": "family"})
    GuestService.create_guest(store, {"name": "B", "email": "b@example.com", "category": "friend", "rsvp_status": "confirmed"})

    assert [g["name"] for g in GuestService.list_guests(store, category="family")] == ["A"]
    assert [g["name"] for g in GuestService.list_guests(store, rsvp_status="confirmed")] == ["B"]
    assert len(GuestService.list_guests(store)) == 2

def test_update_rsvp_stamps_response_date(store):
    guest = GuestService.create_guest(store, {"name": "A", "email": "a@example.com"})
    answered_at = datetime(2025, 5, 1, 12, 0)

    updated = GuestService.update_rsvp_status(store, guest["id"], "confirmed", answered_at)

    assert updated["rsvp_status"] == "confirmed"
    assert updated["rsvp_response_date"] == answered_at

def test_update_rsvp_rejects_unknown_status(store):
    guest = GuestService.create_guest(store, {"name": "A", "email": "a@example.com"})

    with pytest.raises(ValueError):
        GuestService.update_rsvp_status(store, guest["id"], "maybe")

def test_pending_rsvps_past_deadline(store):
    now = datetime(2025, 6, 1)
    GuestService.create_guest(store, {"name": "Late", "email": "late@example.com", "rsvp_deadline": now - timedelta(days=1)})
    GuestService.create_guest(store, {"name": "Early", "email": "early@example.com", "rsvp_deadline": now + timedelta(days=10)})
    GuestService.create_guest(store, {"name": "Open", "email": "open@example.com"})
    GuestService.create_guest(store, {"name": "Done", "email": "done@example.com", "rsvp_status": "confirmed"})

    pending = GuestService.get_pending_rsvps(store, now)

    assert sorted(g["name"] for g in pending) == ["Late", "Open"]

def test_summarize_rsvp_counts_plus_ones():
    guests = [
        {"id": 1, "rsvp_status": "confirmed", "plus_one": True},
        {"id": 2, "rsvp_status": "confirmed", "plus_one": False},
        {"id": 3, "rsvp_status": "declined", "plus_one": True},
        {"id": 4, "rsvp_status": "pending"},
    ]

    stats = GuestService.summarize_rsvp(guests)

    assert stats == {"confirmed": 2, "pending": 1, "declined": 1, "total": 4, "attending": 3}

def test_pending_rsvps_with_aware_deadline(store):
    GuestService.create_guest(store, {"name": "Late", "email": "late@example.com", "rsvp_deadline": datetime(2025, 5, 31, 12)})
    GuestService.create_guest(store, {"name": "Early", "email": "early@example.com", "rsvp_deadline": datetime(2025, 6, 1, 12)})

    # 14:00 at UTC+2 is noon UTC
    deadline = datetime(2025, 6, 1, 14, tzinfo=timezone(timedelta(hours=2)))
    pending = GuestService.get_pending_rsvps(store, deadline)

    assert [g["name"] for g in pending] == ["Late"]
