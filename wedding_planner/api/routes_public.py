"""
Public API routes - no authentication required
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from wedding_planner.core.config import settings
from wedding_planner.services.excel_service import ExcelService
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.moodboard_service import MoodBoardService
from wedding_planner.services.qr_service import QRService
from wedding_planner.services.repositories import TableStore, get_store, use_firestore
from wedding_planner.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "backend": "firestore" if use_firestore() else "sql"}

@router.get("/template/guest_list_template.xlsx")
async def download_template():
    """Download Excel template for guest list imports"""
    template_bytes = ExcelService.create_template()

    return Response(
        content=template_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.get("/qr.png")
async def get_qr_code(email: Optional[str] = Query(None)):
    """QR code image linking to the guest area"""
    qr_bytes = QRService.generate_portal_qr(email)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": "inline; filename=guest_area_qr.png"}
    )

@router.get("/rsvp/stats")
async def rsvp_stats(store: TableStore = Depends(get_store)):
    """Aggregate RSVP counts (no guest details)"""
    stats = GuestService.summarize_rsvp(GuestService.list_guests(store))
    return success_response(
        message="RSVP statistics",
        data={"event_name": settings.EVENT_NAME, **stats}
    )

@router.get("/mood-board/{board_id}")
async def public_mood_board(board_id: str, store: TableStore = Depends(get_store)):
    """A mood board opened through its shareable link"""
    return success_response(message="Mood board retrieved", data=MoodBoardService.get_public_board(store, board_id))
