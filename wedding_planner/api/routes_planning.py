"""
Planning API routes (mood boards and the planning timeline) - requires authentication
"""

from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query

from wedding_planner.core.config import settings
from wedding_planner.schemas.planning import (
    MoodBoardCreate, MoodBoardUpdate, MoodBoardItemCreate, MoodBoardItemUpdate,
    MoodBoardCommentCreate, MoodBoardShareCreate, MoodBoardShareUpdate,
    TimelineRequest, TimelineSave, TimelineTaskCreate, TimelineTaskUpdate,
)
from wedding_planner.services.moodboard_service import MoodBoardService
from wedding_planner.services.repositories import TableStore, get_store
from wedding_planner.services.storage import ObjectStorage, get_object_storage
from wedding_planner.services.timeline_service import TimelineService
from wedding_planner.utils.security import verify_admin_token
from wedding_planner.utils.responses import success_response, error_response, file_too_large_error

router = APIRouter(dependencies=[Depends(verify_admin_token)])

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

# -------- mood boards --------

@router.get("/mood-boards")
async def list_mood_boards(user_id: str = Query(...), store: TableStore = Depends(get_store)):
    """Boards owned by ``user_id`` followed by boards shared with them"""
    return success_response(message="Mood boards retrieved", data=MoodBoardService.list_boards(store, user_id))

@router.post("/mood-boards")
async def create_mood_board(board: MoodBoardCreate, user_id: str = Query(...), store: TableStore = Depends(get_store)):
    created = MoodBoardService.create_board(store, user_id, board.model_dump())
    return success_response(message="Mood board created", data=created, status_code=201)

@router.get("/mood-boards/{board_id}")
async def get_mood_board(board_id: str, store: TableStore = Depends(get_store)):
    board = MoodBoardService.get_board(store, board_id)
    board["items"] = MoodBoardService.list_items(store, board_id)
    board["comments"] = MoodBoardService.list_comments(store, board_id)
    return success_response(message="Mood board retrieved", data=board)

@router.patch("/mood-boards/{board_id}")
async def update_mood_board(board_id: str, board: MoodBoardUpdate, store: TableStore = Depends(get_store)):
    updated = MoodBoardService.update_board(store, board_id, board.model_dump(exclude_unset=True))
    return success_response(message="Mood board updated", data=updated)

@router.delete("/mood-boards/{board_id}")
async def delete_mood_board(
    board_id: str,
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    MoodBoardService.delete_board(store, storage, board_id)
    return success_response(message="Mood board deleted", data={"id": board_id})

@router.post("/mood-boards/{board_id}/link")
async def create_shareable_link(board_id: str, store: TableStore = Depends(get_store)):
    link = MoodBoardService.shareable_link(store, board_id)
    return success_response(message="Shareable link created", data={"id": board_id, "link": link})

@router.post("/mood-boards/{board_id}/items")
async def add_mood_board_item(board_id: str, item: MoodBoardItemCreate, store: TableStore = Depends(get_store)):
    created = MoodBoardService.add_item(store, board_id, item.model_dump())
    return success_response(message="Item added", data=created, status_code=201)

@router.post("/mood-boards/{board_id}/images")
async def upload_mood_board_image(
    board_id: str,
    file: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        return error_response(message="Only image uploads are allowed", status_code=400)

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        file_too_large_error(settings.MAX_UPLOAD_SIZE)

    item = MoodBoardService.upload_image(store, storage, board_id, file.filename, content, file.content_type, caption)
    return success_response(message="Image uploaded", data=item, status_code=201)

@router.patch("/mood-board-items/{item_id}")
async def update_mood_board_item(item_id: str, item: MoodBoardItemUpdate, store: TableStore = Depends(get_store)):
    updated = MoodBoardService.update_item(store, item_id, item.model_dump(exclude_unset=True))
    return success_response(message="Item updated", data=updated)

@router.delete("/mood-board-items/{item_id}")
async def delete_mood_board_item(
    item_id: str,
    store: TableStore = Depends(get_store),
    storage: ObjectStorage = Depends(get_object_storage)
):
    MoodBoardService.delete_item(store, storage, item_id)
    return success_response(message="Item removed", data={"id": item_id})

@router.post("/mood-boards/{board_id}/comments")
async def add_mood_board_comment(board_id: str, comment: MoodBoardCommentCreate, store: TableStore = Depends(get_store)):
    created = MoodBoardService.add_comment(store, board_id, comment.user_id, comment.content, comment.user_name)
    return success_response(message="Comment added", data=created, status_code=201)

@router.delete("/mood-board-comments/{comment_id}")
async def delete_mood_board_comment(comment_id: str, store: TableStore = Depends(get_store)):
    MoodBoardService.delete_comment(store, comment_id)
    return success_response(message="Comment deleted", data={"id": comment_id})

@router.get("/mood-boards/{board_id}/shares")
async def list_mood_board_shares(board_id: str, store: TableStore = Depends(get_store)):
    return success_response(message="Shares retrieved", data=MoodBoardService.list_shares(store, board_id))

@router.post("/mood-boards/{board_id}/shares")
async def share_mood_board(board_id: str, share: MoodBoardShareCreate, store: TableStore = Depends(get_store)):
    created = MoodBoardService.share_board(store, board_id, share.shared_with_id, share.permission)
    return success_response(message="Mood board shared", data=created, status_code=201)

@router.patch("/mood-board-shares/{share_id}")
async def update_mood_board_share(share_id: str, share: MoodBoardShareUpdate, store: TableStore = Depends(get_store)):
    updated = MoodBoardService.update_share(store, share_id, share.permission)
    return success_response(message="Share updated", data=updated)

@router.delete("/mood-board-shares/{share_id}")
async def remove_mood_board_share(share_id: str, store: TableStore = Depends(get_store)):
    MoodBoardService.remove_share(store, share_id)
    return success_response(message="Share removed", data={"id": share_id})

# -------- timeline --------

@router.get("/timeline")
async def get_timeline(user_id: str = Query(...), store: TableStore = Depends(get_store)):
    return success_response(message="Timeline retrieved", data=TimelineService.load_timeline(store, user_id))

@router.post("/timeline/generate")
async def generate_timeline(request: TimelineRequest, user_id: str = Query(...), store: TableStore = Depends(get_store)):
    """Rebuild the timeline for the wedding date, keeping completed tasks"""
    timeline = TimelineService.regenerate(store, user_id, request.wedding_date)
    return success_response(message="Timeline generated", data=timeline)

@router.put("/timeline")
async def save_timeline(timeline: TimelineSave, user_id: str = Query(...), store: TableStore = Depends(get_store)):
    milestones = [milestone.model_dump() for milestone in timeline.milestones]
    saved = TimelineService.save_timeline(store, user_id, timeline.wedding_date, milestones)
    return success_response(message="Timeline saved", data=saved)

@router.post("/timeline/milestones/{milestone_id}/tasks")
async def add_timeline_task(milestone_id: str, task: TimelineTaskCreate, store: TableStore = Depends(get_store)):
    created = TimelineService.add_custom_task(store, milestone_id, task.name)
    return success_response(message="Task added", data=created, status_code=201)

@router.patch("/timeline/tasks/{task_id}")
async def update_timeline_task(task_id: str, task: TimelineTaskUpdate, store: TableStore = Depends(get_store)):
    updated = TimelineService.update_task(store, task_id, task.model_dump(exclude_unset=True))
    return success_response(message="Task updated", data=updated)

@router.delete("/timeline/tasks/{task_id}")
async def delete_timeline_task(task_id: str, store: TableStore = Depends(get_store)):
    TimelineService.delete_task(store, task_id)
    return success_response(message="Task deleted", data={"id": task_id})
