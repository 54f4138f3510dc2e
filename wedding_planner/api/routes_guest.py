"""
Guest-facing API routes (the guest area)
"""

from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query

from wedding_planner.core.config import settings
from wedding_planner.schemas.guest import LookupRequest, RsvpUpdate
from wedding_planner.schemas.media import CommentCreate, SongCreate, SongUpdate
from wedding_planner.schemas.vendor import ReviewCreate, ReviewVoteRequest
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.media_service import MediaService
from wedding_planner.services.repositories import TableStore, get_store
from wedding_planner.services.review_service import ReviewService
from wedding_planner.services.storage import ObjectStorage, get_object_storage
from wedding_planner.utils.security import enforce_rate_limit
from wedding_planner.utils.responses import success_response, error_response, file_too_large_error

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

ALLOWED_PHOTO_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp", "image/heic")

@router.post("/lookup")
async def lookup_guest(lookup_data: LookupRequest, store: TableStore = Depends(get_store)):
    """Find the invitation for an email address"""
    guest = GuestService.find_by_email(store, lookup_data.email)
    if not guest:
        return error_response(
            message="Guest not found. Please check your email address or contact the couple.",
            status_code=404
        )

    return success_response(message="Guest information found", data=guest)

@router.put("/{guest_id}/rsvp")
async def respond_rsvp(guest_id: str, rsvp: RsvpUpdate, store: TableStore = Depends(get_store)):
    GuestService.get_guest(store, guest_id)
    extra = rsvp.model_dump(exclude_unset=True, exclude={"rsvp_status"})
    if extra:
        GuestService.update_guest(store, guest_id, extra)
    guest = GuestService.update_rsvp_status(store, guest_id, rsvp.rsvp_status)
    return success_response(message="Thank you for your RSVP!", data=guest)

# -------- photos --------

@router.get("/photos")
async def list_photos(guest_id: Optional[str] = Query(None), store: TableStore = Depends(get_store)):
    return success_response(message="Photos retrieved", data=MediaService.list_photos(store, guest_id))

@router.post("/{guest_id}/photos")
async def upload_photo(
    guest_id: str,
    file: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    if file.content_type not in ALLOWED_PHOTO_TYPES:
        return error_response(message="Only image uploads are allowed", status_code=400)

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        file_too_large_error(settings.MAX_UPLOAD_SIZE)

    photo = MediaService.upload_photo(store, storage, guest_id, file.filename, content, file.content_type, caption)
    return success_response(message="Photo uploaded", data=photo, status_code=201)

@router.delete("/{guest_id}/photos/{photo_id}")
async def delete_photo(
    guest_id: str,
    photo_id: str,
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    photo = store.get("photos", photo_id)
    if photo is None or photo.get("guest_id") != guest_id:
        return error_response(message="Photo not found", status_code=404)

    MediaService.delete_photo(store, storage, photo_id)
    return success_response(message="Photo removed", data={"id": photo_id})

@router.get("/photos/{photo_id}/comments")
async def list_comments(photo_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Comments retrieved", data=MediaService.list_comments(store, photo_id))

@router.post("/photos/{photo_id}/comments")
async def add_comment(photo_id: str, comment: CommentCreate, store: TableStore = Depends(get_store)):
    created = MediaService.add_comment(store, photo_id, comment.guest_id, comment.content)
    return success_response(message="Comment added", data=created, status_code=201)

@router.delete("/comments/{comment_id}")
async def delete_comment(comment_id: str, store: TableStore = Depends(get_store)):
    MediaService.delete_comment(store, comment_id)
    return success_response(message="Comment removed", data={"id": comment_id})

# -------- music wishlist --------

@router.get("/songs")
async def list_songs(guest_id: Optional[str] = Query(None), store: TableStore = Depends(get_store)):
    return success_response(message="Song requests retrieved", data=MediaService.list_songs(store, guest_id))

@router.post("/{guest_id}/songs")
async def add_song(guest_id: str, song: SongCreate, store: TableStore = Depends(get_store)):
    GuestService.get_guest(store, guest_id)
    created = MediaService.add_song(store, guest_id, song.model_dump())
    return success_response(message="Song added to the wishlist", data=created, status_code=201)

@router.patch("/songs/{song_id}")
async def update_song(song_id: str, song: SongUpdate, store: TableStore = Depends(get_store)):
    updated = MediaService.update_song(store, song_id, song.model_dump(exclude_unset=True))
    return success_response(message="Song request updated", data=updated)

@router.delete("/songs/{song_id}")
async def delete_song(song_id: str, store: TableStore = Depends(get_store)):
    MediaService.delete_song(store, song_id)
    return success_response(message="Song removed from the wishlist", data={"id": song_id})

# -------- vendor reviews --------

@router.get("/vendors/{vendor_id}/reviews")
async def list_reviews(
    vendor_id: str,
    sort_by: str = Query("recent"),
    store: TableStore = Depends(get_store)
):
    """Approved reviews only"""
    return success_response(message="Reviews retrieved", data=ReviewService.list_by_vendor(store, vendor_id, sort_by=sort_by))

@router.post("/vendors/{vendor_id}/reviews")
async def create_review(vendor_id: str, review: ReviewCreate, store: TableStore = Depends(get_store)):
    created = ReviewService.create_review(store, vendor_id, review.model_dump())
    return success_response(message="Review submitted for moderation", data=created, status_code=201)

@router.post("/reviews/{review_id}/vote")
async def vote_on_review(review_id: str, vote: ReviewVoteRequest, store: TableStore = Depends(get_store)):
    ReviewService.vote_on_review(store, review_id, vote.user_id, vote.is_helpful)
    return success_response(message="Vote recorded", data=ReviewService.get_vote_counts(store, review_id))

@router.delete("/reviews/{review_id}/vote")
async def remove_vote(review_id: str, user_id: str = Query(...), store: TableStore = Depends(get_store)):
    removed = ReviewService.remove_vote(store, review_id, user_id)
    return success_response(
        message="Vote removed" if removed else "No vote to remove",
        data=ReviewService.get_vote_counts(store, review_id)
    )

@router.get("/reviews/{review_id}/vote")
async def get_user_vote(review_id: str, user_id: str = Query(...), store: TableStore = Depends(get_store)):
    vote = ReviewService.get_user_vote(store, review_id, user_id)
    return success_response(
        message="Vote retrieved",
        data={"vote": vote, "counts": ReviewService.get_vote_counts(store, review_id)}
    )
