"""
Admin API routes - requires authentication
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Query
from fastapi.responses import Response

from wedding_planner.schemas.guest import (
    GuestCreate, GuestUpdate, RsvpUpdate, ReminderRequest, GroupCreate, RelationshipCreate, RelationshipUpdate,
)
from wedding_planner.schemas.seating import TableCreate, TableUpdate, TablePosition, SeatAssignment, TableGroupAssignment
from wedding_planner.services.email_service import EmailService
from wedding_planner.services.excel_service import ExcelService
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.relationship_service import RelationshipService
from wedding_planner.services.repositories import TableStore, get_store
from wedding_planner.services.seating_service import SeatingService
from wedding_planner.core.config import settings
from wedding_planner.utils.security import verify_admin_token
from wedding_planner.utils.responses import success_response, error_response, file_too_large_error

router = APIRouter(dependencies=[Depends(verify_admin_token)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# -------- guests --------

@router.get("/guests")
async def list_guests(
    rsvp_status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    store: TableStore = Depends(get_store)
):
    """List guests, newest first"""
    guests = GuestService.list_guests(store, rsvp_status=rsvp_status, category=category)
    if search:
        term = search.lower()
        guests = [g for g in guests if term in (g.get("name") or "").lower() or term in (g.get("email") or "").lower()]

    return success_response(
        message="Guests retrieved successfully",
        data={"guests": guests, "total": len(guests)}
    )

@router.post("/guests")
async def create_guest(guest_data: GuestCreate, store: TableStore = Depends(get_store)):
    existing = GuestService.find_by_email(store, guest_data.email)
    if existing:
        return error_response(
            message=f"A guest with email {guest_data.email} already exists",
            error_code="DUPLICATE_EMAIL",
            status_code=409
        )

    guest = GuestService.create_guest(store, guest_data.model_dump())
    return success_response(message="Guest created successfully", data=guest, status_code=201)

@router.get("/guests/{guest_id}")
async def get_guest(guest_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Guest retrieved", data=GuestService.get_guest(store, guest_id))

@router.patch("/guests/{guest_id}")
async def update_guest(guest_id: str, guest_update: GuestUpdate, store: TableStore = Depends(get_store)):
    """Update guest information"""
    guest = GuestService.update_guest(store, guest_id, guest_update.model_dump(exclude_unset=True))
    return success_response(message="Guest updated successfully", data=guest)

@router.delete("/guests/{guest_id}")
async def delete_guest(guest_id: str, store: TableStore = Depends(get_store)):
    GuestService.delete_guest(store, guest_id)
    return success_response(message="Guest deleted successfully", data={"id": guest_id})

@router.patch("/guests/{guest_id}/rsvp")
async def update_guest_rsvp(guest_id: str, rsvp: RsvpUpdate, store: TableStore = Depends(get_store)):
    extra = rsvp.model_dump(exclude_unset=True, exclude={"rsvp_status"})
    if extra:
        GuestService.update_guest(store, guest_id, extra)
    guest = GuestService.update_rsvp_status(store, guest_id, rsvp.rsvp_status)
    return success_response(message="RSVP updated successfully", data=guest)

@router.get("/rsvp/summary")
async def rsvp_summary(store: TableStore = Depends(get_store)):
    guests = GuestService.list_guests(store)
    return success_response(message="RSVP summary", data=GuestService.summarize_rsvp(guests))

@router.get("/rsvp/pending")
async def pending_rsvps(store: TableStore = Depends(get_store)):
    """Pending guests whose RSVP deadline has passed (or who have none)"""
    guests = GuestService.get_pending_rsvps(store, datetime.utcnow())
    return success_response(message="Pending RSVPs", data={"guests": guests, "total": len(guests)})

@router.post("/rsvp/reminders")
async def send_rsvp_reminders(request: ReminderRequest, store: TableStore = Depends(get_store)):
    """Send RSVP reminder emails to the given guests"""
    result = EmailService.send_rsvp_reminders(store, request.guest_ids, request.rsvp_deadline)
    message = f"Sent {result['sent']} reminders"
    if result["failed"]:
        message += f", {result['failed']} failed"
    return success_response(message=message, data=result)

@router.get("/email-logs")
async def email_logs(email: Optional[str] = Query(None), store: TableStore = Depends(get_store)):
    return success_response(message="Email logs", data=EmailService.get_email_logs(store, email))

# -------- import / export --------

@router.post("/guests/import")
async def import_guests(file: UploadFile = File(...), store: TableStore = Depends(get_store)):
    """Import a guest list from Excel or CSV; guests are matched by email"""
    if not file.filename.lower().endswith((".xlsx", ".xls", ".csv")):
        return error_response(
            message="Invalid file format. Please upload an Excel (.xlsx, .xls) or CSV file",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        file_too_large_error(settings.MAX_UPLOAD_SIZE)

    success, errors, imported = ExcelService.process_upload(file_content, store, file.filename)

    if not success:
        return error_response(
            message="Guest list validation failed",
            details=errors,
            status_code=422
        )

    return success_response(
        message=f"Guest list processed successfully. {imported} guests imported.",
        data={"imported": imported, "errors": errors, "filename": file.filename}
    )

@router.get("/guests/export/guests.xlsx")
async def export_guests_excel(store: TableStore = Depends(get_store)):
    return Response(
        content=ExcelService.export_guests(store),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=guest_list_{datetime.utcnow():%Y-%m-%d}.xlsx"}
    )

@router.get("/guests/export/guests.csv")
async def export_guests_csv(store: TableStore = Depends(get_store)):
    return Response(
        content=ExcelService.export_guests(store, file_format="csv"),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=guest_list_{datetime.utcnow():%Y-%m-%d}.csv"}
    )

# -------- seating --------

@router.get("/tables")
async def list_tables(store: TableStore = Depends(get_store)):
    """All tables with their seats"""
    return success_response(message="Tables retrieved", data=SeatingService.get_all_tables(store))

@router.post("/tables")
async def create_table(table_data: TableCreate, store: TableStore = Depends(get_store)):
    result = SeatingService.create_table(store, table_data.model_dump())
    return success_response(message="Table created successfully", data=result, status_code=201)

@router.patch("/tables/{table_id}")
async def update_table(table_id: str, table_update: TableUpdate, store: TableStore = Depends(get_store)):
    table = SeatingService.update_table(store, table_id, table_update.model_dump(exclude_unset=True))
    return success_response(message="Table updated successfully", data=table)

@router.put("/tables/{table_id}/position")
async def move_table(table_id: str, position: TablePosition, store: TableStore = Depends(get_store)):
    table = SeatingService.update_table_position(
        store, table_id, position.position.model_dump(), position.rotation
    )
    return success_response(message="Table moved", data=table)

@router.delete("/tables/{table_id}")
async def delete_table(table_id: str, store: TableStore = Depends(get_store)):
    SeatingService.delete_table(store, table_id)
    return success_response(message="Table deleted successfully", data={"id": table_id})

@router.put("/tables/{table_id}/group")
async def assign_table_group(table_id: str, assignment: TableGroupAssignment, store: TableStore = Depends(get_store)):
    table = SeatingService.assign_table_to_group(store, table_id, assignment.group_id)
    return success_response(message="Table group updated", data=table)

@router.put("/seats/{seat_id}/guest")
async def assign_seat(seat_id: str, assignment: SeatAssignment, store: TableStore = Depends(get_store)):
    """Seat a guest; any seat the guest held before is freed in the same write"""
    seat = SeatingService.assign_guest_to_seat(store, seat_id, assignment.guest_id)
    return success_response(message="Guest seated", data=seat)

@router.delete("/seats/{seat_id}/guest")
async def clear_seat(seat_id: str, store: TableStore = Depends(get_store)):
    seat = SeatingService.remove_guest_from_seat(store, seat_id)
    return success_response(message="Seat cleared", data=seat)

@router.get("/seating/summary")
async def seating_summary(store: TableStore = Depends(get_store)):
    return success_response(message="Seating summary", data=SeatingService.get_seating_summary(store))

# -------- guest groups --------

@router.get("/groups")
async def list_groups(store: TableStore = Depends(get_store)):
    return success_response(message="Groups retrieved", data=SeatingService.list_groups(store))

@router.post("/groups")
async def create_group(group_data: GroupCreate, store: TableStore = Depends(get_store)):
    group = SeatingService.create_group(store, group_data.model_dump())
    return success_response(message="Group created successfully", data=group, status_code=201)

@router.delete("/groups/{group_id}")
async def delete_group(group_id: str, store: TableStore = Depends(get_store)):
    SeatingService.delete_group(store, group_id)
    return success_response(message="Group deleted successfully", data={"id": group_id})

# -------- guest relationships --------

@router.get("/relationships")
async def list_relationships(guest_id: Optional[str] = Query(None), store: TableStore = Depends(get_store)):
    """All relationships, or those involving ``guest_id`` on either side"""
    if guest_id:
        relationships = RelationshipService.list_for_guest(store, guest_id)
    else:
        relationships = RelationshipService.list_relationships(store)
    return success_response(message="Relationships retrieved", data=relationships)

@router.post("/relationships")
async def create_relationship(relationship: RelationshipCreate, store: TableStore = Depends(get_store)):
    created = RelationshipService.create_relationship(store, **relationship.model_dump())
    return success_response(message="Relationship saved", data=created, status_code=201)

@router.patch("/relationships/{relationship_id}")
async def update_relationship(relationship_id: str, relationship: RelationshipUpdate, store: TableStore = Depends(get_store)):
    updated = RelationshipService.update_relationship(store, relationship_id, relationship.model_dump(exclude_unset=True))
    return success_response(message="Relationship updated", data=updated)

@router.delete("/relationships/{relationship_id}")
async def delete_relationship(relationship_id: str, store: TableStore = Depends(get_store)):
    RelationshipService.delete_relationship(store, relationship_id)
    return success_response(message="Relationship deleted", data={"id": relationship_id})
