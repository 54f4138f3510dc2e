"""
Tests for the guest area and admin API endpoints
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
from wedding_planner.utils.security import guest_rate_limiter

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
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
    """API client wired to the test store and a temporary upload folder"""
    storage = LocalObjectStorage(str(tmp_path), "http://testserver")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_object_storage] = lambda: storage
    guest_rate_limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def guest(store):
    return GuestService.create_guest(store, {"name": "Jane Smith", "email": "jane@example.com"})

def test_lookup_by_email(client, guest):
    response = client.post("/guest/lookup", json={"email": "Jane@Example.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["id"] == guest["id"]
    assert body["data"]["rsvp_status"] == "pending"

def test_lookup_unknown_email(client, guest):
    response = client.post("/guest/lookup", json={"email": "nobody@example.com"})

    assert response.status_code == 404
    assert response.json()["success"] is False

def test_lookup_invalid_email(client):
    response = client.post("/guest/lookup", json={"email": "not-an-email"})

    assert response.status_code == 422

def test_guest_rsvp(client, guest):
    response = client.put(
        f"/guest/{guest['id']}/rsvp",
        json={"rsvp_status": "confirmed", "plus_one": True, "dietary_restrictions": "vegetarian"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rsvp_status"] == "confirmed"
    assert data["plus_one"] is True
    assert data["dietary_restrictions"] == "vegetarian"
    assert data["rsvp_response_date"] is not None

def test_rsvp_for_unknown_guest(client):
    response = client.put("/guest/missing/rsvp", json={"rsvp_status": "declined"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"

def test_photo_upload(client, guest, tmp_path):
    response = client.post(
        f"/guest/{guest['id']}/photos",
        files={"file": ("dance.png", b"\x89PNG fake", "image/png")},
        data={"caption": "First dance"}
    )

    assert response.status_code == 201
    photo = response.json()["data"]
    assert photo["caption"] == "First dance"
    assert (tmp_path / photo["file_path"]).read_bytes() == b"\x89PNG fake"

    listed = client.get("/guest/photos", params={"guest_id": guest["id"]}).json()["data"]
    assert [p["id"] for p in listed] == [photo["id"]]

def test_photo_upload_rejects_non_images(client, guest):
    response = client.post(
        f"/guest/{guest['id']}/photos",
        files={"file": ("notes.txt", b"hello", "text/plain")}
    )

    assert response.status_code == 400

def test_guest_endpoints_are_rate_limited(client, guest, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MINUTE", 2)

    statuses = [client.post("/guest/lookup", json={"email": "jane@example.com"}).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]

def test_admin_requires_token(client):
    response = client.get("/admin/guests", headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401

def test_admin_duplicate_guest(client, guest):
    response = client.post(
        "/admin/guests",
        json={"name": "Other Jane", "email": "JANE@example.com"},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "DUPLICATE_EMAIL"

def test_public_rsvp_stats(client, store, guest):
    GuestService.create_guest(store, {"name": "Bob", "email": "bob@example.com", "rsvp_status": "confirmed"})

    data = client.get("/rsvp/stats").json()["data"]

    assert data["total"] == 2
    assert data["confirmed"] == 1
    assert data["pending"] == 1
