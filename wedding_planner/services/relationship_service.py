"""
Guest relationships used when planning who sits together
"""

import logging
from typing import Any, Dict, List, Optional

from wedding_planner.services.repositories import RecordNotFound, StoreError, TableStore

logger = logging.getLogger(__name__)

RELATIONSHIP_TYPES = ("family", "partner", "friend", "colleague", "avoid")

class RelationshipService:
    """A relationship is undirected: (a, b) and (b, a) are the same row"""

    @staticmethod
    def find_between(store: TableStore, guest_id: str, related_guest_id: str) -> Optional[Dict[str, Any]]:
        for filters in (
            {"guest_id": guest_id, "related_guest_id": related_guest_id},
            {"guest_id": related_guest_id, "related_guest_id": guest_id},
        ):
            rows = store.select("guest_relationships", filters, limit=1)
            if rows:
                return rows[0]
        return None

    @staticmethod
    def create_relationship(
        store: TableStore,
        guest_id: str,
        related_guest_id: str,
        relationship_type: str,
        strength: int = 5,
    ) -> Dict[str, Any]:
        """Create the link, or update it in place when the pair is already linked"""
        if guest_id == related_guest_id:
            raise ValueError("A guest cannot be related to themselves")
        if relationship_type not in RELATIONSHIP_TYPES:
            raise ValueError(f"Invalid relationship type '{relationship_type}'")
        for key in (guest_id, related_guest_id):
            if store.get("guests", key) is None:
                raise RecordNotFound("guests", key)

        existing = RelationshipService.find_between(store, guest_id, related_guest_id)
        if existing:
            logger.info(f"Relationship {existing['id']} already links {guest_id} and {related_guest_id}; updating")
            return store.update("guest_relationships", existing["id"], {
                "relationship_type": relationship_type,
                "strength": strength,
            })

        return store.insert("guest_relationships", {
            "guest_id": guest_id,
            "related_guest_id": related_guest_id,
            "relationship_type": relationship_type,
            "strength": strength,
        })

    @staticmethod
    def list_for_guest(store: TableStore, guest_id: str) -> List[Dict[str, Any]]:
        rows = store.select("guest_relationships", {"guest_id": guest_id})
        rows += store.select("guest_relationships", {"related_guest_id": guest_id})
        return sorted(rows, key=lambda row: str(row.get("created_at") or ""))

    @staticmethod
    def list_relationships(store: TableStore) -> List[Dict[str, Any]]:
        return store.select("guest_relationships", order_by="created_at")

    @staticmethod
    def update_relationship(store: TableStore, relationship_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {key: data[key] for key in ("relationship_type", "strength") if data.get(key) is not None}
        if not allowed:
            raise StoreError("No relationship fields to update")
        if "relationship_type" in allowed and allowed["relationship_type"] not in RELATIONSHIP_TYPES:
            raise ValueError(f"Invalid relationship type '{allowed['relationship_type']}'")
        return store.update("guest_relationships", relationship_id, allowed)

    @staticmethod
    def delete_relationship(store: TableStore, relationship_id: str) -> None:
        store.delete("guest_relationships", relationship_id)
