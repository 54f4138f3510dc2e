"""
Mood boards: boards, their items and comments, sharing and image uploads
"""

import logging
from typing import Any, Dict, List, Optional

from wedding_planner.core.config import settings
from wedding_planner.services.repositories import RecordNotFound, StoreError, TableStore
from wedding_planner.services.storage import ObjectStorage, build_object_path

logger = logging.getLogger(__name__)

ITEM_TYPES = ("image", "color", "note", "link")
SHARE_PERMISSIONS = ("view", "edit", "admin")
UNKNOWN_USER = "Unknown User"

class MoodBoardService:
    """Boards are owned by ``user_id`` and can be shared with other users"""

    # -------- boards --------

    @staticmethod
    def list_boards(store: TableStore, user_id: str) -> List[Dict[str, Any]]:
        """Boards the user owns (newest first) followed by boards shared with them"""
        boards = store.select("mood_boards", {"user_id": user_id}, order_by="created_at", descending=True)
        for share in store.select("mood_board_shares", {"shared_with_id": user_id}, order_by="created_at"):
            board = store.get("mood_boards", share["board_id"])
            if board is None:
                continue
            boards.append({**board, "shared": True, "permission": share["permission"]})
        return boards

    @staticmethod
    def get_board(store: TableStore, board_id: str) -> Dict[str, Any]:
        board = store.get("mood_boards", board_id)
        if board is None:
            raise RecordNotFound("mood_boards", board_id)
        return board

    @staticmethod
    def get_public_board(store: TableStore, board_id: str) -> Dict[str, Any]:
        """A board opened through its shareable link, with items and comments"""
        board = store.get("mood_boards", board_id)
        if board is None or not board.get("is_public"):
            raise RecordNotFound("mood_boards", board_id)
        return {
            **board,
            "items": MoodBoardService.list_items(store, board_id),
            "comments": MoodBoardService.list_comments(store, board_id),
        }

    @staticmethod
    def create_board(store: TableStore, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return store.insert("mood_boards", {
            "user_id": user_id,
            "title": data["title"],
            "description": data.get("description"),
            "is_public": bool(data.get("is_public", False)),
        })

    @staticmethod
    def update_board(store: TableStore, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {key: data[key] for key in ("title", "description", "is_public") if key in data}
        if not allowed:
            raise StoreError("No mood board fields to update")
        return store.update("mood_boards", board_id, allowed)

    @staticmethod
    def delete_board(store: TableStore, storage: ObjectStorage, board_id: str) -> None:
        MoodBoardService.get_board(store, board_id)
        for item in store.select("mood_board_items", {"board_id": board_id}):
            MoodBoardService._remove_file(storage, item)
        store.delete_where("mood_board_items", {"board_id": board_id})
        store.delete_where("mood_board_comments", {"board_id": board_id})
        store.delete_where("mood_board_shares", {"board_id": board_id})
        store.delete("mood_boards", board_id)

    @staticmethod
    def shareable_link(store: TableStore, board_id: str) -> str:
        """Make the board public and return the link anyone can open"""
        MoodBoardService.get_board(store, board_id)
        store.update("mood_boards", board_id, {"is_public": True})
        return f"{settings.BASE_URL.rstrip('/')}/mood-board/{board_id}"

    # -------- items --------

    @staticmethod
    def list_items(store: TableStore, board_id: str) -> List[Dict[str, Any]]:
        return store.select("mood_board_items", {"board_id": board_id}, order_by="created_at")

    @staticmethod
    def add_item(store: TableStore, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        item_type = data.get("item_type") or "image"
        if item_type not in ITEM_TYPES:
            raise ValueError(f"Invalid mood board item type '{item_type}'")
        MoodBoardService.get_board(store, board_id)
        return store.insert("mood_board_items", {
            "board_id": board_id,
            "item_type": item_type,
            "content": data.get("content"),
            "image_url": data.get("image_url"),
            "position": data.get("position"),
        })

    @staticmethod
    def upload_image(
        store: TableStore,
        storage: ObjectStorage,
        board_id: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Store the image and add it to the board as an image item"""
        MoodBoardService.get_board(store, board_id)
        path = build_object_path(settings.MOODBOARD_BUCKET, board_id, filename)
        url = storage.upload(path, content, content_type)
        return store.insert("mood_board_items", {
            "board_id": board_id,
            "item_type": "image",
            "content": caption or None,
            "image_url": url,
            "file_path": path,
        })

    @staticmethod
    def update_item(store: TableStore, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {key: data[key] for key in ("content", "image_url", "position") if key in data}
        if not allowed:
            raise StoreError("No mood board item fields to update")
        return store.update("mood_board_items", item_id, allowed)

    @staticmethod
    def delete_item(store: TableStore, storage: ObjectStorage, item_id: str) -> None:
        item = store.get("mood_board_items", item_id)
        if item is None:
            raise RecordNotFound("mood_board_items", item_id)
        MoodBoardService._remove_file(storage, item)
        store.delete("mood_board_items", item_id)

    @staticmethod
    def _remove_file(storage: ObjectStorage, item: Dict[str, Any]) -> None:
        if not item.get("file_path"):
            return
        try:
            storage.remove(item["file_path"])
        except Exception as e:
            logger.warning(f"Could not remove mood board file {item['file_path']}: {e}")

    # -------- comments --------

    @staticmethod
    def list_comments(store: TableStore, board_id: str) -> List[Dict[str, Any]]:
        comments = store.select("mood_board_comments", {"board_id": board_id}, order_by="created_at")
        return [{**comment, "user_name": comment.get("user_name") or UNKNOWN_USER} for comment in comments]

    @staticmethod
    def add_comment(
        store: TableStore,
        board_id: str,
        user_id: str,
        content: str,
        user_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not content or not content.strip():
            raise ValueError("Comment cannot be empty")
        MoodBoardService.get_board(store, board_id)
        return store.insert("mood_board_comments", {
            "board_id": board_id,
            "user_id": user_id,
            "user_name": user_name or None,
            "content": content.strip(),
        })

    @staticmethod
    def delete_comment(store: TableStore, comment_id: str) -> None:
        store.delete("mood_board_comments", comment_id)

    # -------- sharing --------

    @staticmethod
    def list_shares(store: TableStore, board_id: str) -> List[Dict[str, Any]]:
        return store.select("mood_board_shares", {"board_id": board_id}, order_by="created_at")

    @staticmethod
    def share_board(store: TableStore, board_id: str, shared_with_id: str, permission: str = "view") -> Dict[str, Any]:
        """Share with ``shared_with_id``; sharing again only changes the permission"""
        if permission not in SHARE_PERMISSIONS:
            raise ValueError(f"Invalid share permission '{permission}'")
        board = MoodBoardService.get_board(store, board_id)
        if shared_with_id == board["user_id"]:
            raise ValueError("A mood board cannot be shared with its owner")

        existing = store.select("mood_board_shares", {"board_id": board_id, "shared_with_id": shared_with_id}, limit=1)
        if existing:
            return store.update("mood_board_shares", existing[0]["id"], {"permission": permission})
        return store.insert("mood_board_shares", {
            "board_id": board_id,
            "user_id": board["user_id"],
            "shared_with_id": shared_with_id,
            "permission": permission,
        })

    @staticmethod
    def update_share(store: TableStore, share_id: str, permission: str) -> Dict[str, Any]:
        if permission not in SHARE_PERMISSIONS:
            raise ValueError(f"Invalid share permission '{permission}'")
        return store.update("mood_board_shares", share_id, {"permission": permission})

    @staticmethod
    def remove_share(store: TableStore, share_id: str) -> None:
        store.delete("mood_board_shares", share_id)
