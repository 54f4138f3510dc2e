"""
Outbound email notifications.

Emails are rendered and delivered by a serverless function; this module only
invokes it by name with a typed payload and records every attempt in
``email_logs``.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from wedding_planner.core.config import settings
from wedding_planner.services.repositories import TableStore

logger = logging.getLogger(__name__)

class EmailType(str, Enum):
    RSVP_REMINDER = "rsvp_reminder"
    SEATING_UPDATE = "seating_update"
    INVITATION = "invitation"

class EmailRecipient(BaseModel):
    email: str
    name: str

class RsvpReminderData(BaseModel):
    eventName: str
    rsvpDeadline: str
    rsvpLink: str

class SeatingUpdateData(BaseModel):
    eventName: str
    tableName: str
    seatNumber: str
    viewLink: str

class InvitationData(BaseModel):
    eventName: str
    eventDate: str
    eventTime: str
    eventLocation: str
    rsvpDeadline: str
    rsvpLink: str
    accessCode: str

EmailData = Union[RsvpReminderData, SeatingUpdateData, InvitationData]

def guest_area_link(email: str, access_code: Optional[str] = None) -> str:
    link = f"{settings.BASE_URL}/guest-area?email={quote(email)}"
    if access_code:
        link += f"&code={access_code}"
    return link

class EmailService:
    """Sends notification emails through the configured email function"""

    @staticmethod
    def _log_attempt(store: Optional[TableStore], recipient: EmailRecipient, kind: EmailType, error: Optional[str]) -> None:
        if store is None:
            return
        try:
            store.insert("email_logs", {
                "recipient_email": recipient.email,
                "email_type": kind.value,
                "status": "failed" if error else "sent",
                "error_message": error,
                "sent_at": datetime.utcnow(),
            })
        except Exception as e:
            logger.error(f"Failed to record email log for {recipient.email}: {e}")

    @staticmethod
    def send_email(
        kind: EmailType,
        recipient: EmailRecipient,
        data: EmailData,
        store: Optional[TableStore] = None,
    ) -> Dict[str, Any]:
        """Invoke the email function; returns ``{"success", "message"|"error"}``"""
        if not settings.FUNCTIONS_BASE_URL:
            error = "Email function is not configured (FUNCTIONS_BASE_URL missing)"
            logger.warning(f"Email NOT sent to {recipient.email}: {error}")
            EmailService._log_attempt(store, recipient, kind, error)
            return {"success": False, "error": error}

        url = f"{settings.FUNCTIONS_BASE_URL.rstrip('/')}/{settings.EMAIL_FUNCTION_NAME}"
        headers = {}
        if settings.FUNCTIONS_API_KEY:
            headers["Authorization"] = f"Bearer {settings.FUNCTIONS_API_KEY}"
        body = {
            "emailType": kind.value,
            "recipient": recipient.model_dump(),
            "data": data.model_dump(),
        }

        try:
            with httpx.Client(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
                response = client.post(url, json=body, headers=headers)
            if not 200 <= response.status_code < 300:
                error = f"Email function returned {response.status_code}: {response.text[:500]}"
                logger.error(f"Email to {recipient.email} failed: {error}")
                EmailService._log_attempt(store, recipient, kind, error)
                return {"success": False, "error": error}
        except httpx.HTTPError as e:
            error = f"{type(e).__name__}: {e}"
            logger.error(f"Email to {recipient.email} failed: {error}")
            EmailService._log_attempt(store, recipient, kind, error)
            return {"success": False, "error": error}

        try:
            result = response.json()
        except ValueError:
            result = None
        if not isinstance(result, dict) or "success" not in result:
            result = {"success": True, "message": f"{kind.value} email sent"}

        if result.get("success") is False:
            # 2xx with a failure body: the function ran but did not deliver
            error = str(result.get("error") or "Email function reported failure")
            logger.error(f"Email to {recipient.email} failed: {error}")
            EmailService._log_attempt(store, recipient, kind, error)
            return {**result, "error": error}

        logger.info(f"Sent {kind.value} email to {recipient.email}")
        EmailService._log_attempt(store, recipient, kind, None)
        return result

    @staticmethod
    def send_rsvp_reminder(
        guest: Dict[str, Any],
        rsvp_deadline: str,
        event_name: Optional[str] = None,
        store: Optional[TableStore] = None,
    ) -> Dict[str, Any]:
        return EmailService.send_email(
            EmailType.RSVP_REMINDER,
            EmailRecipient(email=guest["email"], name=guest["name"]),
            RsvpReminderData(
                eventName=event_name or settings.EVENT_NAME,
                rsvpDeadline=rsvp_deadline,
                rsvpLink=guest_area_link(guest["email"]),
            ),
            store,
        )

    @staticmethod
    def send_seating_update(
        guest: Dict[str, Any],
        table_name: str,
        seat_number: str,
        event_name: Optional[str] = None,
        store: Optional[TableStore] = None,
    ) -> Dict[str, Any]:
        return EmailService.send_email(
            EmailType.SEATING_UPDATE,
            EmailRecipient(email=guest["email"], name=guest["name"]),
            SeatingUpdateData(
                eventName=event_name or settings.EVENT_NAME,
                tableName=table_name,
                seatNumber=str(seat_number),
                viewLink=guest_area_link(guest["email"]),
            ),
            store,
        )

    @staticmethod
    def send_invitation(
        guest: Dict[str, Any],
        event_details: Dict[str, str],
        store: Optional[TableStore] = None,
    ) -> Dict[str, Any]:
        details = {"eventName": settings.EVENT_NAME, **event_details}
        return EmailService.send_email(
            EmailType.INVITATION,
            EmailRecipient(email=guest["email"], name=guest["name"]),
            InvitationData(
                **details,
                rsvpLink=guest_area_link(guest["email"], details.get("accessCode")),
            ),
            store,
        )

    @staticmethod
    def send_rsvp_reminders(store: TableStore, guest_ids: List[str], rsvp_deadline: str) -> Dict[str, Any]:
        """Bulk reminders; one failed guest never stops the rest"""
        sent, failed, errors = 0, 0, []
        for guest_id in guest_ids:
            guest = store.get("guests", guest_id)
            if guest is None:
                failed += 1
                errors.append({"guest_id": guest_id, "error": "Guest not found"})
                continue

            result = EmailService.send_rsvp_reminder(guest, rsvp_deadline, store=store)
            if result.get("success"):
                sent += 1
            else:
                failed += 1
                errors.append({"guest_id": guest_id, "email": guest["email"], "error": result.get("error")})

        return {"success": failed == 0, "sent": sent, "failed": failed, "errors": errors}

    @staticmethod
    def get_email_logs(store: TableStore, email: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"recipient_email": email} if email else None
        return store.select("email_logs", filters, order_by="sent_at", descending=True)
