"""
Vendor service: vendors, appointments, contracts and payments
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from wedding_planner.core.config import settings
from wedding_planner.services.repositories import RecordNotFound, TableStore
from wedding_planner.services.storage import ObjectStorage, build_object_path
from wedding_planner.utils.dates import as_date

logger = logging.getLogger(__name__)

class VendorService:
    """Thin CRUD over the vendor tables; every vendor-scoped list is keyed by vendor_id"""

    # -------- vendors --------

    @staticmethod
    def list_vendors(store: TableStore, category: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"category": category} if category else None
        return store.select("vendors", filters, order_by="created_at", descending=True)

    @staticmethod
    def get_vendor(store: TableStore, vendor_id: str) -> Dict[str, Any]:
        vendor = store.get("vendors", vendor_id)
        if vendor is None:
            raise RecordNotFound("vendors", vendor_id)
        return vendor

    @staticmethod
    def create_vendor(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.insert("vendors", data)

    @staticmethod
    def update_vendor(store: TableStore, vendor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("vendors", vendor_id, data)

    @staticmethod
    def delete_vendor(store: TableStore, vendor_id: str) -> None:
        store.delete("vendors", vendor_id)

    # -------- appointments --------

    @staticmethod
    def list_appointments(store: TableStore, vendor_id: str) -> List[Dict[str, Any]]:
        return store.select("vendor_appointments", {"vendor_id": vendor_id}, order_by="start_time")

    @staticmethod
    def create_appointment(store: TableStore, vendor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        VendorService.get_vendor(store, vendor_id)
        return store.insert("vendor_appointments", {**data, "vendor_id": vendor_id})

    @staticmethod
    def update_appointment(store: TableStore, appointment_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("vendor_appointments", appointment_id, data)

    @staticmethod
    def delete_appointment(store: TableStore, appointment_id: str) -> None:
        store.delete("vendor_appointments", appointment_id)

    # -------- contracts --------

    @staticmethod
    def list_contracts(store: TableStore, vendor_id: str) -> List[Dict[str, Any]]:
        return store.select("vendor_contracts", {"vendor_id": vendor_id}, order_by="created_at", descending=True)

    @staticmethod
    def create_contract(
        store: TableStore,
        storage: ObjectStorage,
        vendor_id: str,
        data: Dict[str, Any],
        filename: Optional[str] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        VendorService.get_vendor(store, vendor_id)
        values = {**data, "vendor_id": vendor_id}
        if content is not None:
            path = build_object_path(settings.CONTRACT_BUCKET, vendor_id, filename or "contract.pdf")
            values["file_url"] = storage.upload(path, content, content_type)
            values["file_path"] = path
        return store.insert("vendor_contracts", values)

    @staticmethod
    def replace_contract_file(
        store: TableStore,
        storage: ObjectStorage,
        contract_id: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        contract = store.get("vendor_contracts", contract_id)
        if contract is None:
            raise RecordNotFound("vendor_contracts", contract_id)

        path = build_object_path(settings.CONTRACT_BUCKET, contract["vendor_id"], filename)
        url = storage.upload(path, content, content_type)
        updated = store.update("vendor_contracts", contract_id, {"file_url": url, "file_path": path})
        if contract.get("file_path"):
            storage.remove(contract["file_path"])
        return updated

    @staticmethod
    def update_contract(store: TableStore, contract_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("vendor_contracts", contract_id, data)

    @staticmethod
    def delete_contract(store: TableStore, storage: ObjectStorage, contract_id: str) -> None:
        contract = store.get("vendor_contracts", contract_id)
        if contract is None:
            raise RecordNotFound("vendor_contracts", contract_id)
        store.delete("vendor_contracts", contract_id)
        if contract.get("file_path"):
            storage.remove(contract["file_path"])

    @staticmethod
    def get_expiring_contracts(store: TableStore, days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Active contracts expiring between today and ``days`` from now"""
        today = today or date.today()
        threshold = today + timedelta(days=days)
        contracts = store.select("vendor_contracts", {"status": "active"}, order_by="expiration_date")
        return [
            c for c in contracts
            if c.get("expiration_date") is not None and today <= as_date(c["expiration_date"]) <= threshold
        ]

    @staticmethod
    def expire_contracts(store: TableStore, today: Optional[date] = None) -> int:
        """Mark active contracts past their expiration date as expired"""
        today = today or date.today()
        expired = 0
        for contract in store.select("vendor_contracts", {"status": "active"}):
            if contract.get("expiration_date") is not None and as_date(contract["expiration_date"]) < today:
                store.update("vendor_contracts", contract["id"], {"status": "expired"})
                expired += 1
        if expired:
            logger.info(f"Expired {expired} vendor contracts")
        return expired

    # -------- payments --------

    @staticmethod
    def list_payments(store: TableStore, vendor_id: str) -> List[Dict[str, Any]]:
        return store.select("vendor_payments", {"vendor_id": vendor_id}, order_by="due_date")

    @staticmethod
    def create_payment(store: TableStore, vendor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        VendorService.get_vendor(store, vendor_id)
        return store.insert("vendor_payments", {**data, "vendor_id": vendor_id})

    @staticmethod
    def update_payment(store: TableStore, payment_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("vendor_payments", payment_id, data)

    @staticmethod
    def mark_payment_paid(store: TableStore, payment_id: str, paid_date: Optional[date] = None) -> Dict[str, Any]:
        return store.update("vendor_payments", payment_id, {"status": "paid", "paid_date": paid_date or date.today()})

    @staticmethod
    def delete_payment(store: TableStore, payment_id: str) -> None:
        store.delete("vendor_payments", payment_id)

    @staticmethod
    def summarize_payments(payments: List[Dict[str, Any]], today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        total = sum(p.get("amount") or 0 for p in payments)
        paid = sum(p.get("amount") or 0 for p in payments if p.get("status") == "paid")
        pending = [p for p in payments if p.get("status") == "pending"]

        by_due = sorted(pending, key=lambda p: as_date(p["due_date"]))
        upcoming = [p for p in by_due if as_date(p["due_date"]) > today]
        overdue = [p for p in by_due if as_date(p["due_date"]) < today]

        return {
            "total_contract_value": total,
            "paid_amount": paid,
            "pending_amount": sum(p.get("amount") or 0 for p in pending),
            "remaining_balance": total - paid,
            "payment_progress": paid / total * 100 if total > 0 else 0,
            "upcoming_payments": upcoming,
            "overdue_payments": overdue,
            "next_payment": upcoming[0] if upcoming else None,
            "is_overdue": bool(overdue),
        }

    @staticmethod
    def get_payment_summary(store: TableStore, vendor_id: str) -> Dict[str, Any]:
        return VendorService.summarize_payments(VendorService.list_payments(store, vendor_id))
