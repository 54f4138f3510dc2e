"""
Budget API routes - requires authentication
"""

from fastapi import APIRouter, Depends, UploadFile, File
from fastapi.responses import Response

from wedding_planner.core.config import settings
from wedding_planner.schemas.budget import ExpenseCreate, ExpenseUpdate, CategoryCreate, CategoryUpdate
from wedding_planner.services.budget_service import BudgetService
from wedding_planner.services.repositories import TableStore, get_store
from wedding_planner.services.storage import ObjectStorage, get_object_storage
from wedding_planner.utils.security import verify_admin_token
from wedding_planner.utils.responses import success_response, file_too_large_error

router = APIRouter(dependencies=[Depends(verify_admin_token)])

@router.get("/expenses")
async def list_expenses(store: TableStore = Depends(get_store)):
    expenses = BudgetService.list_expenses(store)
    return success_response(
        message="Expenses retrieved",
        data={"expenses": expenses, "summary": BudgetService.summarize_expenses(expenses)}
    )

@router.post("/expenses")
async def create_expense(expense: ExpenseCreate, store: TableStore = Depends(get_store)):
    created = BudgetService.create_expense(store, expense.model_dump())
    return success_response(message="Expense created successfully", data=created, status_code=201)

@router.patch("/expenses/{expense_id}")
async def update_expense(expense_id: str, expense: ExpenseUpdate, store: TableStore = Depends(get_store)):
    updated = BudgetService.update_expense(store, expense_id, expense.model_dump(exclude_unset=True))
    return success_response(message="Expense updated successfully", data=updated)

@router.delete("/expenses/{expense_id}")
async def delete_expense(expense_id: str, store: TableStore = Depends(get_store)):
    BudgetService.delete_expense(store, expense_id)
    return success_response(message="Expense deleted successfully", data={"id": expense_id})

@router.post("/expenses/{expense_id}/receipt")
async def upload_receipt(
    expense_id: str,
    file: UploadFile = File(...),
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        file_too_large_error(settings.MAX_UPLOAD_SIZE)

    url = BudgetService.upload_receipt(store, storage, expense_id, file.filename, content, file.content_type)
    return success_response(message="Receipt uploaded", data={"receipt_url": url})

@router.get("/categories")
async def list_categories(store: TableStore = Depends(get_store)):
    return success_response(message="Budget categories retrieved", data=BudgetService.list_categories(store))

@router.post("/categories")
async def create_category(category: CategoryCreate, store: TableStore = Depends(get_store)):
    created = BudgetService.create_category(store, category.model_dump())
    return success_response(message="Category created successfully", data=created, status_code=201)

@router.patch("/categories/{category_id}")
async def update_category(category_id: str, category: CategoryUpdate, store: TableStore = Depends(get_store)):
    updated = BudgetService.update_category(store, category_id, category.model_dump(exclude_unset=True))
    return success_response(message="Category updated successfully", data=updated)

@router.delete("/categories/{category_id}")
async def delete_category(category_id: str, store: TableStore = Depends(get_store)):
    BudgetService.delete_category(store, category_id)
    return success_response(message="Category deleted successfully", data={"id": category_id})

@router.get("/report")
async def budget_report(store: TableStore = Depends(get_store)):
    """Totals, per-category usage and monthly spending"""
    return success_response(message="Budget report generated", data=BudgetService.generate_report(store))

@router.get("/report.csv")
async def budget_report_csv(store: TableStore = Depends(get_store)):
    export = BudgetService.export_report_csv(store)
    return Response(
        content=export["content"],
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export['filename']}"}
    )
