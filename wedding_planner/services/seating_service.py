"""
Seating arrangement service: tables, seats, guest groups
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from wedding_planner.services.repositories import RecordNotFound, TableStore

logger = logging.getLogger(__name__)

DEFAULT_TABLE_POSITION = {"x": 400, "y": 300}
ROUND_DIMENSIONS = {"width": 200, "height": 200}
RECTANGLE_DIMENSIONS = {"width": 300, "height": 150}

class SeatingService:
    """Service for seating arrangement operations"""

    @staticmethod
    def _blank_seats(table_id: str, count: int) -> List[Dict[str, Any]]:
        # Seat positions are laid out by the planner UI
        return [{"table_id": table_id, "position": {"x": 0, "y": 0}} for _ in range(count)]

    @staticmethod
    def create_table(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a table together with ``capacity`` empty seats"""
        shape = data.get("shape", "round")
        table = store.insert("tables", {
            **data,
            "shape": shape,
            "position": dict(DEFAULT_TABLE_POSITION),
            "dimensions": dict(ROUND_DIMENSIONS if shape == "round" else RECTANGLE_DIMENSIONS),
            "rotation": 0,
        })
        seats = store.insert_many("seats", SeatingService._blank_seats(table["id"], table["capacity"]))
        logger.info(f"Created table {table['name']} with {len(seats)} seats")
        return {"table": table, "seats": seats}

    @staticmethod
    def update_table(store: TableStore, table_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update a table; a capacity change adds or removes seats to match"""
        table = store.update("tables", table_id, data)
        seats = store.select("seats", {"table_id": table_id})
        capacity = table["capacity"]

        if capacity > len(seats):
            store.insert_many("seats", SeatingService._blank_seats(table_id, capacity - len(seats)))
        elif capacity < len(seats):
            # Empty seats go first, then the newest
            ordered = sorted(seats, key=lambda seat: seat.get("created_at") or datetime.min, reverse=True)
            ordered.sort(key=lambda seat: seat.get("guest_id") is not None)
            for seat in ordered[:len(seats) - capacity]:
                store.delete("seats", seat["id"])
        return table

    @staticmethod
    def update_table_position(
        store: TableStore,
        table_id: str,
        position: Dict[str, float],
        rotation: float,
    ) -> Dict[str, Any]:
        return store.update("tables", table_id, {"position": position, "rotation": rotation})

    @staticmethod
    def delete_table(store: TableStore, table_id: str) -> None:
        store.delete_where("seats", {"table_id": table_id})
        store.delete("tables", table_id)

    @staticmethod
    def get_all_tables(store: TableStore) -> List[Dict[str, Any]]:
        """All tables, newest first, each with its seats"""
        tables = store.select("tables", order_by="created_at", descending=True)
        seats = store.select("seats", order_by="created_at")

        seats_by_table: Dict[str, List[Dict[str, Any]]] = {}
        for seat in seats:
            seats_by_table.setdefault(seat["table_id"], []).append(seat)

        return [{**table, "seats": seats_by_table.get(table["id"], [])} for table in tables]

    @staticmethod
    def assign_guest_to_seat(store: TableStore, seat_id: str, guest_id: str) -> Dict[str, Any]:
        """Seat a guest, vacating any seat they held before, in one transaction"""
        if store.get("guests", guest_id) is None:
            raise RecordNotFound("guests", guest_id)
        return store.assign_exclusive("seats", "guest_id", guest_id, seat_id)

    @staticmethod
    def remove_guest_from_seat(store: TableStore, seat_id: str) -> Dict[str, Any]:
        return store.update("seats", seat_id, {"guest_id": None})

    @staticmethod
    def get_seating_summary(store: TableStore) -> Dict[str, Any]:
        """Per-table occupancy and how many non-declined guests still need a seat"""
        tables = SeatingService.get_all_tables(store)
        guests = store.select("guests")

        seated = set()
        table_stats = []
        for table in tables:
            occupied = [seat["guest_id"] for seat in table["seats"] if seat.get("guest_id")]
            seated.update(occupied)
            table_stats.append({
                "table_id": table["id"],
                "table_name": table["name"],
                "capacity": len(table["seats"]),
                "occupied": len(occupied),
                "available_seats": len(table["seats"]) - len(occupied),
            })

        unseated = [
            guest for guest in guests
            if guest["id"] not in seated and guest.get("rsvp_status") != "declined"
        ]

        return {
            "total_tables": len(tables),
            "total_seats": sum(t["capacity"] for t in table_stats),
            "seated_guests": len(seated),
            "unseated_guests": len(unseated),
            "tables": table_stats,
        }

    # -------- guest groups --------

    @staticmethod
    def create_group(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.insert("guest_groups", data)

    @staticmethod
    def list_groups(store: TableStore) -> List[Dict[str, Any]]:
        return store.select("guest_groups", order_by="created_at", descending=True)

    @staticmethod
    def delete_group(store: TableStore, group_id: str) -> None:
        store.update_where("tables", {"group_id": group_id}, {"group_id": None})
        store.delete("guest_groups", group_id)

    @staticmethod
    def assign_table_to_group(store: TableStore, table_id: str, group_id: Optional[str]) -> Dict[str, Any]:
        if group_id is not None and store.get("guest_groups", group_id) is None:
            raise RecordNotFound("guest_groups", group_id)
        return store.update("tables", table_id, {"group_id": group_id})
