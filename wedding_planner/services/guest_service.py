"""
Guest list and RSVP service
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from wedding_planner.services.repositories import RecordNotFound, TableStore
from wedding_planner.utils.dates import as_naive_utc

logger = logging.getLogger(__name__)

RSVP_STATUSES = ("confirmed", "pending", "declined")
GUEST_CATEGORIES = ("family", "friend", "colleague", "other")

class GuestService:
    """Thin CRUD over the guests table plus RSVP helpers"""

    @staticmethod
    def list_guests(
        store: TableStore,
        rsvp_status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        filters = {}
        if rsvp_status:
            filters["rsvp_status"] = rsvp_status
        if category:
            filters["category"] = category
        return store.select("guests", filters or None, order_by="created_at", descending=True)

    @staticmethod
    def get_guest(store: TableStore, guest_id: str) -> Dict[str, Any]:
        guest = store.get("guests", guest_id)
        if guest is None:
            raise RecordNotFound("guests", guest_id)
        return guest

    @staticmethod
    def find_by_email(store: TableStore, email: str) -> Optional[Dict[str, Any]]:
        guests = store.select("guests", {"email": email.strip().lower()}, limit=1)
        return guests[0] if guests else None

    @staticmethod
    def create_guest(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(data)
        values["email"] = values["email"].strip().lower()
        values.setdefault("rsvp_status", "pending")
        return store.insert("guests", values)

    @staticmethod
    def update_guest(store: TableStore, guest_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(data)
        if values.get("email"):
            values["email"] = values["email"].strip().lower()
        return store.update("guests", guest_id, values)

    @staticmethod
    def delete_guest(store: TableStore, guest_id: str) -> None:
        # Free the guest's seat first so no seat points at a missing guest
        store.update_where("seats", {"guest_id": guest_id}, {"guest_id": None})
        store.delete_where("guest_relationships", {"guest_id": guest_id})
        store.delete_where("guest_relationships", {"related_guest_id": guest_id})
        store.delete("guests", guest_id)

    @staticmethod
    def update_rsvp_status(
        store: TableStore,
        guest_id: str,
        status: str,
        response_date: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        if status not in RSVP_STATUSES:
            raise ValueError(f"Invalid RSVP status '{status}'")
        return store.update("guests", guest_id, {
            "rsvp_status": status,
            "rsvp_response_date": response_date or datetime.utcnow(),
        })

    @staticmethod
    def get_pending_rsvps(store: TableStore, deadline: datetime) -> List[Dict[str, Any]]:
        """Pending guests whose own RSVP deadline is unset or falls before ``deadline``"""
        pending = store.select("guests", {"rsvp_status": "pending"}, order_by="name")
        cutoff = as_naive_utc(deadline)
        return [
            guest for guest in pending
            if guest.get("rsvp_deadline") is None or as_naive_utc(guest["rsvp_deadline"]) < cutoff
        ]

    @staticmethod
    def summarize_rsvp(guests: List[Dict[str, Any]]) -> Dict[str, int]:
        stats = {status: 0 for status in RSVP_STATUSES}
        attending = 0
        for guest in guests:
            status = guest.get("rsvp_status") or "pending"
            stats[status] = stats.get(status, 0) + 1
            if status == "confirmed":
                attending += 2 if guest.get("plus_one") else 1
        stats["total"] = len(guests)
        stats["attending"] = attending
        return stats
