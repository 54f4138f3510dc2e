"""
Guest contributions: photo sharing, photo comments and the music wishlist
"""

import logging
from typing import Any, Dict, List, Optional

from wedding_planner.core.config import settings
from wedding_planner.realtime.mirror import UNKNOWN_GUEST
from wedding_planner.services.repositories import RecordNotFound, StoreError, TableStore
from wedding_planner.services.storage import ObjectStorage, build_object_path

logger = logging.getLogger(__name__)

SONG_STATUSES = ("pending", "approved", "played", "rejected")

def _with_guest_names(store: TableStore, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Attach ``guest_name`` to each row, one lookup per distinct guest"""
    names: Dict[str, str] = {}
    for guest_id in {row.get("guest_id") for row in rows if row.get("guest_id")}:
        guest = store.get("guests", guest_id)
        names[guest_id] = guest.get("name") if guest and guest.get("name") else UNKNOWN_GUEST
    return [{**row, "guest_name": names.get(row.get("guest_id"), UNKNOWN_GUEST)} for row in rows]

class MediaService:
    """Photos, comments and song requests submitted from the guest area"""

    # -------- photos --------

    @staticmethod
    def list_photos(store: TableStore, guest_id: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"guest_id": guest_id} if guest_id else None
        return store.select("photos", filters, order_by="created_at", descending=True)

    @staticmethod
    def upload_photo(
        store: TableStore,
        storage: ObjectStorage,
        guest_id: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Dict[str, Any]:
        if store.get("guests", guest_id) is None:
            raise RecordNotFound("guests", guest_id)

        path = build_object_path(settings.PHOTO_BUCKET, guest_id, filename)
        url = storage.upload(path, content, content_type)
        return store.insert("photos", {
            "guest_id": guest_id,
            "url": url,
            "file_path": path,
            "caption": caption or None,
        })

    @staticmethod
    def delete_photo(store: TableStore, storage: ObjectStorage, photo_id: str) -> None:
        photo = store.get("photos", photo_id)
        if photo is None:
            raise RecordNotFound("photos", photo_id)

        if photo.get("file_path"):
            try:
                storage.remove(photo["file_path"])
            except Exception as e:
                # Row is removed even when the file is already gone
                logger.warning(f"Could not remove photo file {photo['file_path']}: {e}")

        store.delete_where("photo_comments", {"photo_id": photo_id})
        store.delete("photos", photo_id)

    # -------- comments --------

    @staticmethod
    def list_comments(store: TableStore, photo_id: str) -> List[Dict[str, Any]]:
        comments = store.select("photo_comments", {"photo_id": photo_id}, order_by="created_at")
        return _with_guest_names(store, comments)

    @staticmethod
    def add_comment(store: TableStore, photo_id: str, guest_id: str, content: str) -> Dict[str, Any]:
        if not content or not content.strip():
            raise ValueError("Comment cannot be empty")
        if store.get("photos", photo_id) is None:
            raise RecordNotFound("photos", photo_id)
        comment = store.insert("photo_comments", {
            "photo_id": photo_id,
            "guest_id": guest_id,
            "content": content.strip(),
        })
        return _with_guest_names(store, [comment])[0]

    @staticmethod
    def delete_comment(store: TableStore, comment_id: str) -> None:
        store.delete("photo_comments", comment_id)

    # -------- music wishlist --------

    @staticmethod
    def list_songs(store: TableStore, guest_id: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"guest_id": guest_id} if guest_id else None
        songs = store.select("music_wishlist", filters, order_by="created_at", descending=True)
        return _with_guest_names(store, songs)

    @staticmethod
    def add_song(store: TableStore, guest_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        song = store.insert("music_wishlist", {
            "guest_id": guest_id,
            "title": data["title"],
            "artist": data.get("artist"),
            "notes": data.get("notes") or None,
        })
        return _with_guest_names(store, [song])[0]

    @staticmethod
    def update_song(store: TableStore, song_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {key: data[key] for key in ("title", "artist", "notes") if key in data}
        if not allowed:
            raise StoreError("No song fields to update")
        return _with_guest_names(store, [store.update("music_wishlist", song_id, allowed)])[0]

    @staticmethod
    def update_song_status(store: TableStore, song_id: str, status: str) -> Dict[str, Any]:
        if status not in SONG_STATUSES:
            raise ValueError(f"Invalid song status '{status}'")
        return _with_guest_names(store, [store.update("music_wishlist", song_id, {"status": status})])[0]

    @staticmethod
    def delete_song(store: TableStore, song_id: str) -> None:
        store.delete("music_wishlist", song_id)
