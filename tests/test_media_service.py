"""
Tests for photos, comments and the music wishlist
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.realtime.mirror import UNKNOWN_GUEST
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.media_service import MediaService
from wedding_planner.services.repositories import RecordNotFound, SqlTableStore, StoreError
from wedding_planner.services.storage import LocalObjectStorage, build_object_path

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_media.db"
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
def guest(store):
    return GuestService.create_guest(store, {"name": "Jane Smith", "email": "jane@example.com"})

@pytest.fixture
def photo(store, storage, guest):
    return MediaService.upload_photo(store, storage, guest["id"], "cake.jpg", b"jpeg", "image/jpeg", "The cake")

def test_upload_photo_for_unknown_guest(store, storage):
    with pytest.raises(RecordNotFound):
        MediaService.upload_photo(store, storage, "missing", "a.jpg", b"x")

def test_comments_carry_guest_names(store, photo, guest):
    MediaService.add_comment(store, photo["id"], guest["id"], "  Looks delicious  ")
    MediaService.add_comment(store, photo["id"], "gone", "Who am I?")

    comments = MediaService.list_comments(store, photo["id"])

    assert [c["content"] for c in comments] == ["Looks delicious", "Who am I?"]
    assert [c["guest_name"] for c in comments] == ["Jane Smith", UNKNOWN_GUEST]

def test_empty_comment_rejected(store, photo, guest):
    with pytest.raises(ValueError):
        MediaService.add_comment(store, photo["id"], guest["id"], "   ")

def test_delete_photo_removes_file_and_comments(store, storage, photo, guest, tmp_path):
    MediaService.add_comment(store, photo["id"], guest["id"], "Nice")
    assert (tmp_path / photo["file_path"]).exists()

    MediaService.delete_photo(store, storage, photo["id"])

    assert not (tmp_path / photo["file_path"]).exists()
    assert MediaService.list_photos(store) == []
    assert MediaService.list_comments(store, photo["id"]) == []

def test_song_wishlist(store, guest):
    song = MediaService.add_song(store, guest["id"], {"title": "September", "artist": "Earth, Wind & Fire"})
    assert song["guest_name"] == "Jane Smith"
    assert song["status"] == "pending"

    updated = MediaService.update_song_status(store, song["id"], "approved")
    assert updated["status"] == "approved"

    with pytest.raises(ValueError):
        MediaService.update_song_status(store, song["id"], "skipped")
    with pytest.raises(StoreError):
        MediaService.update_song(store, song["id"], {"status": "played"})

    MediaService.delete_song(store, song["id"])
    assert MediaService.list_songs(store, guest["id"]) == []

@pytest.mark.parametrize("filename,ext", [
    ("party.JPG", "jpg"),
    ("../../etc/passwd", "bin"),
    ("x.a/b", "bin"),
    ("no-extension", "bin"),
    ("weird.p%20g", "bin"),
    (None, "bin"),
])
def test_object_path_extension(filename, ext):
    path = build_object_path("wedding-photos", "g1", filename)

    folder, name = path.split("/")
    assert folder == "wedding-photos"
    assert name.startswith("g1-")
    assert name.rsplit(".", 1)[1] == ext
