"""
Tests for the planning endpoints: mood boards, guest relationships and the timeline
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from wedding_planner.core.config import settings
from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.repositories import SqlTableStore, get_store
from wedding_planner.services.storage import LocalObjectStorage, get_object_storage

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_planning_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

@pytest.fixture
def store():
    """Create test table store"""
    Base.metadata.create_all(bind=engine)
    try:
        yield SqlTableStore(TestingSessionLocal, InProcessChangeFeed())
    finally:
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(store, tmp_path):
    storage = LocalObjectStorage(str(tmp_path), "http://testserver")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_object_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def board(client):
    response = client.post(
        "/admin/mood-boards",
        params={"user_id": "couple"},
        json={"title": "Colours"},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 201
    return response.json()["data"]

def test_mood_board_requires_token(client):
    response = client.get("/admin/mood-boards", params={"user_id": "couple"}, headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401

def test_mood_board_image_upload(client, board, tmp_path):
    response = client.post(
        f"/admin/mood-boards/{board['id']}/images",
        files={"file": ("swatch.png", b"\x89PNG fake", "image/png")},
        data={"caption": "Blush"},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 201
    item = response.json()["data"]
    assert item["content"] == "Blush"
    assert (tmp_path / item["file_path"]).read_bytes() == b"\x89PNG fake"

    detail = client.get(f"/admin/mood-boards/{board['id']}", headers=ADMIN_HEADERS).json()["data"]
    assert [i["id"] for i in detail["items"]] == [item["id"]]

def test_mood_board_upload_rejects_non_images(client, board):
    response = client.post(
        f"/admin/mood-boards/{board['id']}/images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 400

def test_shareable_link_opens_publicly(client, board):
    assert client.get(f"/mood-board/{board['id']}").status_code == 404

    link = client.post(f"/admin/mood-boards/{board['id']}/link", headers=ADMIN_HEADERS).json()["data"]["link"]

    assert link == f"{settings.BASE_URL}/mood-board/{board['id']}"
    public = client.get(f"/mood-board/{board['id']}")
    assert public.status_code == 200
    assert public.json()["data"]["title"] == "Colours"

def test_relationship_endpoints(client, store):
    ann = GuestService.create_guest(store, {"name": "Ann", "email": "ann@example.com"})
    bob = GuestService.create_guest(store, {"name": "Bob", "email": "bob@example.com"})

    created = client.post(
        "/admin/relationships",
        json={"guest_id": ann["id"], "related_guest_id": bob["id"], "relationship_type": "partner", "strength": 10},
        headers=ADMIN_HEADERS
    )
    assert created.status_code == 201

    listed = client.get("/admin/relationships", params={"guest_id": bob["id"]}, headers=ADMIN_HEADERS).json()["data"]
    assert [r["relationship_type"] for r in listed] == ["partner"]

    invalid = client.post(
        "/admin/relationships",
        json={"guest_id": ann["id"], "related_guest_id": bob["id"], "relationship_type": "partner", "strength": 11},
        headers=ADMIN_HEADERS
    )
    assert invalid.status_code == 422

def test_timeline_generate_and_tick_task(client):
    generated = client.post(
        "/admin/timeline/generate",
        params={"user_id": "couple"},
        json={"wedding_date": "2099-06-14"},
        headers=ADMIN_HEADERS
    )
    assert generated.status_code == 200
    milestones = generated.json()["data"]["milestones"]
    assert milestones[0]["title"] == "Initial Planning"

    task_id = milestones[0]["tasks"][0]["id"]
    updated = client.patch(f"/admin/timeline/tasks/{task_id}", json={"completed": True}, headers=ADMIN_HEADERS)
    assert updated.json()["data"]["completed"] is True

    loaded = client.get("/admin/timeline", params={"user_id": "couple"}, headers=ADMIN_HEADERS).json()["data"]
    assert loaded["wedding_date"].startswith("2099-06-14")
    assert loaded["milestones"][0]["tasks"][0]["completed"] is True
