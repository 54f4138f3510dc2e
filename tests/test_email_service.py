"""
Tests for outbound email notifications
"""

import json
import pytest
import httpx
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_planner.core.config import settings
from wedding_planner.core.db import Base
from wedding_planner.realtime.feed import InProcessChangeFeed
from wedding_planner.services.email_service import EmailService
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.repositories import SqlTableStore

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_email.db"
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
def guest(store):
    return GuestService.create_guest(store, {"name": "Jane Smith", "email": "jane@example.com"})

@pytest.fixture
def email_function(monkeypatch):
    """Route the email function through a mock transport; yields the received requests"""
    monkeypatch.setattr(settings, "FUNCTIONS_BASE_URL", "https://functions.test")
    monkeypatch.setattr(settings, "FUNCTIONS_API_KEY", "secret")
    requests = []
    status = {"code": 200, "body": None}

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if status["code"] != 200:
            return httpx.Response(status["code"], text="boom")
        return httpx.Response(200, json=status["body"] or {"success": True, "message": "queued"})

    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "Client", client_factory)
    yield requests, status

def test_unconfigured_email_function(store, guest, monkeypatch):
    monkeypatch.setattr(settings, "FUNCTIONS_BASE_URL", None)

    result = EmailService.send_rsvp_reminder(guest, "2025-05-01", store=store)

    assert result["success"] is False
    assert "not configured" in result["error"]
    logs = EmailService.get_email_logs(store)
    assert len(logs) == 1
    assert logs[0]["status"] == "failed"
    assert logs[0]["email_type"] == "rsvp_reminder"

def test_send_rsvp_reminder(store, guest, email_function):
    requests, _ = email_function

    result = EmailService.send_rsvp_reminder(guest, "2025-05-01", event_name="Jane & John", store=store)

    assert result == {"success": True, "message": "queued"}
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "https://functions.test/send-email"
    assert request.headers["Authorization"] == "Bearer secret"
    body = json.loads(request.content)
    assert body["emailType"] == "rsvp_reminder"
    assert body["recipient"] == {"email": "jane@example.com", "name": "Jane Smith"}
    assert body["data"]["eventName"] == "Jane & John"
    assert body["data"]["rsvpLink"].endswith("/guest-area?email=jane%40example.com")

    logs = EmailService.get_email_logs(store, "jane@example.com")
    assert [log["status"] for log in logs] == ["sent"]

def test_email_function_error(store, guest, email_function):
    _, status = email_function
    status["code"] = 500

    result = EmailService.send_seating_update(guest, "Table 1", 3, store=store)

    assert result["success"] is False
    assert "500" in result["error"]
    assert EmailService.get_email_logs(store)[0]["error_message"].startswith("Email function returned 500")

def test_failure_body_is_logged_as_failed(store, guest, email_function):
    _, status = email_function
    status["body"] = {"success": False, "error": "template missing"}

    result = EmailService.send_rsvp_reminder(guest, "2025-05-01", store=store)

    assert result["success"] is False
    assert result["error"] == "template missing"
    logs = EmailService.get_email_logs(store)
    assert [log["status"] for log in logs] == ["failed"]
    assert logs[0]["error_message"] == "template missing"

def test_bulk_reminders_continue_after_failures(store, guest, email_function):
    requests, _ = email_function

    result = EmailService.send_rsvp_reminders(store, [guest["id"], "missing"], "2025-05-01")

    assert result["success"] is False
    assert result["sent"] == 1
    assert result["failed"] == 1
    assert result["errors"] == [{"guest_id": "missing", "error": "Guest not found"}]
    assert len(requests) == 1

def test_invitation_link_carries_access_code(store, guest, email_function):
    requests, _ = email_function

    EmailService.send_invitation(guest, {
        "eventDate": "2025-06-14",
        "eventTime": "16:00",
        "eventLocation": "Rose Garden",
        "rsvpDeadline": "2025-05-01",
        "accessCode": "ROSE25",
    })

    data = json.loads(requests[0].content)["data"]
    assert data["accessCode"] == "ROSE25"
    assert data["rsvpLink"].endswith("&code=ROSE25")
