"""
Budget service: expenses, budget categories and reports
"""

import io
import logging
from datetime import date, datetime
from typing import Any, Dict, List

import pandas as pd

from wedding_planner.core.config import settings
from wedding_planner.services.repositories import RecordNotFound, TableStore
from wedding_planner.services.storage import ObjectStorage, build_object_path
from wedding_planner.utils.dates import as_date

logger = logging.getLogger(__name__)

EXPENSE_STATUSES = ("paid", "pending", "cancelled")
REPORT_COLUMNS = ["Date", "Expense", "Category", "Amount", "Status", "Vendor", "Notes"]

class BudgetService:
    """CRUD over expenses and budget categories plus client-side aggregation"""

    # -------- expenses --------

    @staticmethod
    def list_expenses(store: TableStore) -> List[Dict[str, Any]]:
        return store.select("expenses", order_by="date", descending=True)

    @staticmethod
    def get_expense(store: TableStore, expense_id: str) -> Dict[str, Any]:
        expense = store.get("expenses", expense_id)
        if expense is None:
            raise RecordNotFound("expenses", expense_id)
        return expense

    @staticmethod
    def create_expense(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.insert("expenses", data)

    @staticmethod
    def update_expense(store: TableStore, expense_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("expenses", expense_id, data)

    @staticmethod
    def delete_expense(store: TableStore, expense_id: str) -> None:
        store.delete("expenses", expense_id)

    @staticmethod
    def upload_receipt(
        store: TableStore,
        storage: ObjectStorage,
        expense_id: str,
        filename: str,
        content: bytes,
        content_type: str = None,
    ) -> str:
        BudgetService.get_expense(store, expense_id)
        path = build_object_path(settings.RECEIPT_BUCKET, expense_id, filename)
        url = storage.upload(path, content, content_type)
        store.update("expenses", expense_id, {"receipt_url": url})
        return url

    # -------- categories --------

    @staticmethod
    def list_categories(store: TableStore) -> List[Dict[str, Any]]:
        return store.select("budget_categories", order_by="name")

    @staticmethod
    def create_category(store: TableStore, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.insert("budget_categories", data)

    @staticmethod
    def update_category(store: TableStore, category_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.update("budget_categories", category_id, data)

    @staticmethod
    def delete_category(store: TableStore, category_id: str) -> None:
        store.delete("budget_categories", category_id)

    # -------- aggregation --------

    @staticmethod
    def summarize_expenses(expenses: List[Dict[str, Any]]) -> Dict[str, float]:
        active = [e for e in expenses if e.get("status") != "cancelled"]
        return {
            "total": sum(e.get("amount") or 0 for e in active),
            "paid": sum(e.get("amount") or 0 for e in active if e.get("status") == "paid"),
            "pending": sum(e.get("amount") or 0 for e in active if e.get("status") == "pending"),
            "count": len(active),
        }

    @staticmethod
    def generate_report(store: TableStore) -> Dict[str, Any]:
        """Budget report; cancelled expenses never count as spending"""
        expenses = BudgetService.list_expenses(store)
        categories = store.select("budget_categories")

        total_budget = sum(c.get("amount") or 0 for c in categories)
        active = [e for e in expenses if e.get("status") != "cancelled"]
        total_spent = sum(e.get("amount") or 0 for e in active)

        spending_by_category: Dict[str, float] = {}
        monthly_spending: Dict[str, float] = {}
        for expense in active:
            amount = expense.get("amount") or 0
            spending_by_category[expense["category"]] = spending_by_category.get(expense["category"], 0) + amount
            month = as_date(expense["date"]).strftime("%b %Y")
            monthly_spending[month] = monthly_spending.get(month, 0) + amount

        def percent(part: float, whole: float) -> int:
            return round(part / whole * 100) if whole > 0 else 0

        return {
            "generated_at": datetime.utcnow().isoformat(),
            "total_budget": total_budget,
            "total_spent": total_spent,
            "remaining": total_budget - total_spent,
            "percentage_used": percent(total_spent, total_budget),
            "categories": [
                {
                    "name": category["name"],
                    "allocated": category.get("amount") or 0,
                    "spent": spending_by_category.get(category["name"], 0),
                    "remaining": (category.get("amount") or 0) - spending_by_category.get(category["name"], 0),
                    "percentage_used": percent(spending_by_category.get(category["name"], 0), category.get("amount") or 0),
                }
                for category in categories
            ],
            "expenses": expenses,
            "spending_by_category": spending_by_category,
            "monthly_spending": monthly_spending,
        }

    @staticmethod
    def export_report_csv(store: TableStore) -> Dict[str, str]:
        report = BudgetService.generate_report(store)
        df = pd.DataFrame(
            [
                [
                    as_date(e["date"]).isoformat(),
                    e["name"],
                    e["category"],
                    e["amount"],
                    e.get("status"),
                    e.get("vendor") or "",
                    e.get("notes") or "",
                ]
                for e in report["expenses"]
            ],
            columns=REPORT_COLUMNS,
        )
        buffer = io.StringIO()
        df.to_csv(buffer, index=False)
        return {
            "filename": f"wedding_budget_report_{date.today().isoformat()}.csv",
            "content": buffer.getvalue(),
        }
