"""
Vendor management API routes - requires authentication
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query

from wedding_planner.core.config import settings
from wedding_planner.schemas.vendor import (
    VendorCreate, VendorUpdate, AppointmentCreate, AppointmentUpdate,
    ContractUpdate, PaymentCreate, PaymentUpdate, ReviewModeration,
)
from wedding_planner.services.repositories import TableStore, get_store
from wedding_planner.services.review_service import ReviewService
from wedding_planner.services.storage import ObjectStorage, get_object_storage
from wedding_planner.services.vendor_service import VendorService
from wedding_planner.utils.security import verify_admin_token
from wedding_planner.utils.responses import success_response, file_too_large_error

router = APIRouter(dependencies=[Depends(verify_admin_token)])

async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        file_too_large_error(settings.MAX_UPLOAD_SIZE)
    return content

# -------- vendors --------

@router.get("")
async def list_vendors(category: Optional[str] = Query(None), store: TableStore = Depends(get_store)):
    return success_response(message="Vendors retrieved", data=VendorService.list_vendors(store, category))

@router.post("")
async def create_vendor(vendor: VendorCreate, store: TableStore = Depends(get_store)):
    created = VendorService.create_vendor(store, vendor.model_dump())
    return success_response(message="Vendor created successfully", data=created, status_code=201)

@router.get("/{vendor_id}")
async def get_vendor(vendor_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Vendor retrieved", data=VendorService.get_vendor(store, vendor_id))

@router.patch("/{vendor_id}")
async def update_vendor(vendor_id: str, vendor: VendorUpdate, store: TableStore = Depends(get_store)):
    updated = VendorService.update_vendor(store, vendor_id, vendor.model_dump(exclude_unset=True))
    return success_response(message="Vendor updated successfully", data=updated)

@router.delete("/{vendor_id}")
async def delete_vendor(vendor_id: str, store: TableStore = Depends(get_store)):
    VendorService.delete_vendor(store, vendor_id)
    return success_response(message="Vendor deleted successfully", data={"id": vendor_id})

# -------- appointments --------

@router.get("/{vendor_id}/appointments")
async def list_appointments(vendor_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Appointments retrieved", data=VendorService.list_appointments(store, vendor_id))

@router.post("/{vendor_id}/appointments")
async def create_appointment(vendor_id: str, appointment: AppointmentCreate, store: TableStore = Depends(get_store)):
    created = VendorService.create_appointment(store, vendor_id, appointment.model_dump())
    return success_response(message="Appointment scheduled", data=created, status_code=201)

@router.patch("/appointments/{appointment_id}")
async def update_appointment(appointment_id: str, appointment: AppointmentUpdate, store: TableStore = Depends(get_store)):
    updated = VendorService.update_appointment(store, appointment_id, appointment.model_dump(exclude_unset=True))
    return success_response(message="Appointment updated", data=updated)

@router.delete("/appointments/{appointment_id}")
async def delete_appointment(appointment_id: str, store: TableStore = Depends(get_store)):
    VendorService.delete_appointment(store, appointment_id)
    return success_response(message="Appointment removed", data={"id": appointment_id})

# -------- contracts --------

@router.get("/contracts/expiring")
async def expiring_contracts(days: int = Query(30, ge=1, le=365), store: TableStore = Depends(get_store)):
    """Active contracts expiring within ``days``"""
    return success_response(message="Expiring contracts", data=VendorService.get_expiring_contracts(store, days))

@router.post("/contracts/expire")
async def expire_contracts(store: TableStore = Depends(get_store)):
    expired = VendorService.expire_contracts(store)
    return success_response(message=f"{expired} contracts marked expired", data={"expired": expired})

@router.get("/{vendor_id}/contracts")
async def list_contracts(vendor_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Contracts retrieved", data=VendorService.list_contracts(store, vendor_id))

@router.post("/{vendor_id}/contracts")
async def create_contract(
    vendor_id: str,
    title: str = Form(...),
    signed_date: Optional[date] = Form(None),
    expiration_date: Optional[date] = Form(None),
    file: Optional[UploadFile] = File(None),
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    """Create a contract, optionally with its signed document"""
    data = {"title": title, "signed_date": signed_date, "expiration_date": expiration_date, "status": "active"}
    if file is not None:
        content = await _read_upload(file)
        contract = VendorService.create_contract(
            store, storage, vendor_id, data, file.filename, content, file.content_type
        )
    else:
        contract = VendorService.create_contract(store, storage, vendor_id, data)
    return success_response(message="Contract added", data=contract, status_code=201)

@router.put("/contracts/{contract_id}/file")
async def replace_contract_file(
    contract_id: str,
    file: UploadFile = File(...),
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    content = await _read_upload(file)
    contract = VendorService.replace_contract_file(store, storage, contract_id, file.filename, content, file.content_type)
    return success_response(message="Contract file replaced", data=contract)

@router.patch("/contracts/{contract_id}")
async def update_contract(contract_id: str, contract: ContractUpdate, store: TableStore = Depends(get_store)):
    updated = VendorService.update_contract(store, contract_id, contract.model_dump(exclude_unset=True))
    return success_response(message="Contract updated", data=updated)

@router.delete("/contracts/{contract_id}")
async def delete_contract(
    contract_id: str,
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    VendorService.delete_contract(store, storage, contract_id)
    return success_response(message="Contract removed", data={"id": contract_id})

# -------- payments --------

@router.get("/{vendor_id}/payments")
async def list_payments(vendor_id: str, store: TableStore = Depends(get_store)):
    payments = VendorService.list_payments(store, vendor_id)
    return success_response(
        message="Payments retrieved",
        data={"payments": payments, "summary": VendorService.summarize_payments(payments)}
    )

@router.post("/{vendor_id}/payments")
async def create_payment(vendor_id: str, payment: PaymentCreate, store: TableStore = Depends(get_store)):
    created = VendorService.create_payment(store, vendor_id, payment.model_dump())
    return success_response(message="Payment added", data=created, status_code=201)

@router.patch("/payments/{payment_id}")
async def update_payment(payment_id: str, payment: PaymentUpdate, store: TableStore = Depends(get_store)):
    updated = VendorService.update_payment(store, payment_id, payment.model_dump(exclude_unset=True))
    return success_response(message="Payment updated", data=updated)

@router.post("/payments/{payment_id}/paid")
async def mark_payment_paid(payment_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Payment marked as paid", data=VendorService.mark_payment_paid(store, payment_id))

@router.delete("/payments/{payment_id}")
async def delete_payment(payment_id: str, store: TableStore = Depends(get_store)):
    VendorService.delete_payment(store, payment_id)
    return success_response(message="Payment removed", data={"id": payment_id})

# -------- review moderation --------

@router.get("/reviews/pending")
async def pending_reviews(store: TableStore = Depends(get_store)):
    return success_response(message="Reviews awaiting moderation", data=ReviewService.list_pending_reviews(store))

@router.get("/{vendor_id}/reviews")
async def list_all_reviews(
    vendor_id: str,
    sort_by: str = Query("recent"),
    store: TableStore = Depends(get_store)
):
    reviews = ReviewService.list_by_vendor(store, vendor_id, include_non_approved=True, sort_by=sort_by)
    return success_response(message="Reviews retrieved", data=reviews)

@router.put("/reviews/{review_id}/status")
async def moderate_review(review_id: str, moderation: ReviewModeration, store: TableStore = Depends(get_store)):
    review = ReviewService.moderate_review(store, review_id, moderation.status)
    return success_response(message=f"Review {moderation.status}", data=review)

@router.delete("/reviews/{review_id}")
async def delete_review(review_id: str, store: TableStore = Depends(get_store)):
    ReviewService.delete_review(store, review_id)
    return success_response(message="Review deleted", data={"id": review_id})
