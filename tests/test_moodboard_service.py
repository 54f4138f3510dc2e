"""
Tests for mood boards: boards, items, uploads, comments and sharing
"""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.moodboard_service import MoodBoardService, UNKNOWN_USER
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore
from wedding_planner.services.storage import LocalObjectStorage

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_moodboards.db"
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
def storage(tmp_path):
    return LocalObjectStorage(str(tmp_path), "http://testserver")

@pytest.fixture
def board(store):
    return MoodBoardService.create_board(store, "couple", {"title": "Flowers", "description": "Peonies"})

def test_owned_boards_then_shared_boards(store, board):
    other = MoodBoardService.create_board(store, "planner", {"title": "Venue"})
    MoodBoardService.share_board(store, other["id"], "couple", "edit")

    boards = MoodBoardService.list_boards(store, "couple")

    assert [b["title"] for b in boards] == ["Flowers", "Venue"]
    assert "shared" not in boards[0]
    assert boards[1]["shared"] is True
    assert boards[1]["permission"] == "edit"

def test_sharing_again_changes_permission(store, board):
    first = MoodBoardService.share_board(store, board["id"], "maid-of-honour", "view")
    second = MoodBoardService.share_board(store, board["id"], "maid-of-honour", "admin")

    assert second["id"] == first["id"]
    assert [s["permission"] for s in MoodBoardService.list_shares(store, board["id"])] == ["admin"]
    with pytest.raises(ValueError):
        MoodBoardService.share_board(store, board["id"], "couple")
    with pytest.raises(ValueError):
        MoodBoardService.update_share(store, first["id"], "owner")

def test_upload_image_adds_item(store, storage, board, tmp_path):
    item = MoodBoardService.upload_image(store, storage, board["id"], "bouquet.png", b"png", "image/png", "Bouquet")

    assert item["item_type"] == "image"
    assert item["content"] == "Bouquet"
    assert item["file_path"].startswith(f"mood-board-images/{board['id']}-")
    assert item["image_url"] == f"http://testserver/uploads/{item['file_path']}"
    assert os.path.exists(tmp_path / item["file_path"])

    MoodBoardService.delete_item(store, storage, item["id"])
    assert not os.path.exists(tmp_path / item["file_path"])
    assert MoodBoardService.list_items(store, board["id"]) == []

def test_items_in_insertion_order(store, board):
    MoodBoardService.add_item(store, board["id"], {"item_type": "color", "content": "#f8c8dc"})
    MoodBoardService.add_item(store, board["id"], {"item_type": "note", "content": "Soft pastels"})

    assert [i["content"] for i in MoodBoardService.list_items(store, board["id"])] == ["#f8c8dc", "Soft pastels"]
    with pytest.raises(ValueError):
        MoodBoardService.add_item(store, board["id"], {"item_type": "video"})
    with pytest.raises(RecordNotFound):
        MoodBoardService.add_item(store, "missing", {"item_type": "note"})

def test_comments(store, board):
    MoodBoardService.add_comment(store, board["id"], "couple", "  Love these  ", user_name="Jane")
    MoodBoardService.add_comment(store, board["id"], "someone", "Me too")

    comments = MoodBoardService.list_comments(store, board["id"])

    assert [(c["content"], c["user_name"]) for c in comments] == [("Love these", "Jane"), ("Me too", UNKNOWN_USER)]
    with pytest.raises(ValueError):
        MoodBoardService.add_comment(store, board["id"], "couple", "   ")

def test_shareable_link_makes_board_public(store, board):
    with pytest.raises(RecordNotFound):
        MoodBoardService.get_public_board(store, board["id"])

    link = MoodBoardService.shareable_link(store, board["id"])

    assert link.endswith(f"/mood-board/{board['id']}")
    public = MoodBoardService.get_public_board(store, board["id"])
    assert public["is_public"] is True
    assert public["items"] == []

def test_delete_board_removes_children(store, storage, board, tmp_path):
    item = MoodBoardService.upload_image(store, storage, board["id"], "a.jpg", b"jpeg", "image/jpeg")
    MoodBoardService.add_comment(store, board["id"], "couple", "Nice")
    MoodBoardService.share_board(store, board["id"], "friend")

    MoodBoardService.delete_board(store, storage, board["id"])

    assert store.select("mood_board_items") == []
    assert store.select("mood_board_comments") == []
    assert store.select("mood_board_shares") == []
    assert not os.path.exists(tmp_path / item["file_path"])
    with pytest.raises(RecordNotFound):
        MoodBoardService.get_board(store, board["id"])
