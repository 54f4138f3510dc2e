"""
Tests for vendor review moderation and helpfulness votes
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore
from wedding_planner.services.review_service import ReviewService
from wedding_planner.services.vendor_service import VendorService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_reviews.db"
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
def vendor(store):
    return VendorService.create_vendor(store, {"name": "Sweet Tiers", "category": "cake"})

@pytest.fixture
def review(store, vendor):
    created = ReviewService.create_review(store, vendor["id"], {"user_id": "u1", "rating": 5, "title": "Lovely"})
    return ReviewService.moderate_review(store, created["id"], "approved")

def test_new_review_awaits_moderation(store, vendor):
    created = ReviewService.create_review(store, vendor["id"], {"user_id": "u1", "rating": 4})

    assert created["status"] == "pending"
    assert created["helpful_votes"] == 0
    assert ReviewService.list_by_vendor(store, vendor["id"]) == []
    assert len(ReviewService.list_by_vendor(store, vendor["id"], include_non_approved=True)) == 1
    assert [r["id"] for r in ReviewService.list_pending_reviews(store)] == [created["id"]]

def test_review_for_missing_vendor(store):
    with pytest.raises(RecordNotFound):
        ReviewService.create_review(store, "missing", {"user_id": "u1", "rating": 3})

def test_invalid_moderation_status(store, review):
    with pytest.raises(ValueError):
        ReviewService.moderate_review(store, review["id"], "hidden")

def test_invalid_sort(store, vendor):
    with pytest.raises(ValueError):
        ReviewService.list_by_vendor(store, vendor["id"], sort_by="random")

def test_sort_by_rating(store, vendor, review):
    other = ReviewService.create_review(store, vendor["id"], {"user_id": "u2", "rating": 2})
    ReviewService.moderate_review(store, other["id"], "approved")

    ratings = [r["rating"] for r in ReviewService.list_by_vendor(store, vendor["id"], sort_by="rating")]

    assert ratings == [5, 2]

def test_vote_counts(store, review):
    ReviewService.vote_on_review(store, review["id"], "a", True)
    ReviewService.vote_on_review(store, review["id"], "b", True)
    ReviewService.vote_on_review(store, review["id"], "c", False)

    assert ReviewService.get_vote_counts(store, review["id"]) == {"helpful": 2, "unhelpful": 1}

def test_repeat_vote_is_kept(store, review):
    first = ReviewService.vote_on_review(store, review["id"], "a", True)
    again = ReviewService.vote_on_review(store, review["id"], "a", True)

    assert again["id"] == first["id"]
    assert len(ReviewService.get_votes(store, review["id"])) == 1
    assert ReviewService.get_vote_counts(store, review["id"]) == {"helpful": 1, "unhelpful": 0}

def test_flip_vote(store, review):
    first = ReviewService.vote_on_review(store, review["id"], "a", True)
    flipped = ReviewService.vote_on_review(store, review["id"], "a", False)

    assert flipped["id"] == first["id"]
    assert flipped["is_helpful"] is False
    assert ReviewService.get_vote_counts(store, review["id"]) == {"helpful": 0, "unhelpful": 1}

def test_remove_vote(store, review):
    ReviewService.vote_on_review(store, review["id"], "a", True)

    assert ReviewService.remove_vote(store, review["id"], "a") is True
    assert ReviewService.remove_vote(store, review["id"], "a") is False
    assert ReviewService.get_user_vote(store, review["id"], "a") is None
    assert ReviewService.get_vote_counts(store, review["id"]) == {"helpful": 0, "unhelpful": 0}

def test_delete_review_removes_votes(store, review):
    ReviewService.vote_on_review(store, review["id"], "a", True)

    ReviewService.delete_review(store, review["id"])

    assert ReviewService.get_votes(store, review["id"]) == []
    with pytest.raises(RecordNotFound):
        ReviewService.get_review(store, review["id"])
