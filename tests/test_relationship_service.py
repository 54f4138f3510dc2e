"""
Tests for guest relationships
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.relationship_service import RelationshipService
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore, StoreError

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_relationships.db"
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

@pytest.fixture
def guests(store):
    return [
        GuestService.create_guest(store, {"name": name, "email": f"{name.lower()}@example.com"})
        for name in ("Ann", "Bob", "Cat")
    ]

def test_relinking_a_pair_in_either_direction_updates_it(store, guests):
    ann, bob, _ = guests
    created = RelationshipService.create_relationship(store, ann["id"], bob["id"], "friend", 5)

    relinked = RelationshipService.create_relationship(store, bob["id"], ann["id"], "family", 8)

    assert relinked["id"] == created["id"]
    assert relinked["relationship_type"] == "family"
    assert relinked["strength"] == 8
    assert len(RelationshipService.list_relationships(store)) == 1

def test_list_for_guest_matches_either_side(store, guests):
    ann, bob, cat = guests
    RelationshipService.create_relationship(store, ann["id"], bob["id"], "friend")
    RelationshipService.create_relationship(store, cat["id"], ann["id"], "colleague")
    RelationshipService.create_relationship(store, bob["id"], cat["id"], "avoid")

    types = sorted(r["relationship_type"] for r in RelationshipService.list_for_guest(store, ann["id"]))

    assert types == ["colleague", "friend"]

def test_invalid_relationships_rejected(store, guests):
    ann, bob, _ = guests
    with pytest.raises(ValueError):
        RelationshipService.create_relationship(store, ann["id"], ann["id"], "friend")
    with pytest.raises(ValueError):
        RelationshipService.create_relationship(store, ann["id"], bob["id"], "enemy")
    with pytest.raises(RecordNotFound):
        RelationshipService.create_relationship(store, ann["id"], "missing", "friend")

def test_update_and_delete(store, guests):
    ann, bob, _ = guests
    link = RelationshipService.create_relationship(store, ann["id"], bob["id"], "friend")

    updated = RelationshipService.update_relationship(store, link["id"], {"strength": 2})
    assert updated["strength"] == 2
    with pytest.raises(StoreError):
        RelationshipService.update_relationship(store, link["id"], {})

    RelationshipService.delete_relationship(store, link["id"])
    assert RelationshipService.list_relationships(store) == []

def test_deleting_a_guest_removes_their_relationships(store, guests):
    ann, bob, cat = guests
    RelationshipService.create_relationship(store, ann["id"], bob["id"], "friend")
    RelationshipService.create_relationship(store, cat["id"], ann["id"], "family")
    RelationshipService.create_relationship(store, bob["id"], cat["id"], "friend")

    GuestService.delete_guest(store, ann["id"])

    remaining = RelationshipService.list_relationships(store)
    assert [(r["guest_id"], r["related_guest_id"]) for r in remaining] == [(bob["id"], cat["id"])]
