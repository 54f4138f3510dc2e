"""
Mood board and planning timeline Pydantic schemas
"""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

SharePermission = Literal["view", "edit", "admin"]

class MoodBoardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_public: bool = False

class MoodBoardUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_public: Optional[bool] = None

class MoodBoardItemCreate(BaseModel):
    """Non-upload item; images are added through the upload endpoint"""
    item_type: Literal["image", "color", "note", "link"] = "note"
    content: Optional[str] = None
    image_url: Optional[str] = None
    position: Optional[Dict[str, Any]] = None

class MoodBoardItemUpdate(BaseModel):
    content: Optional[str] = None
    image_url: Optional[str] = None
    position: Optional[Dict[str, Any]] = None

class MoodBoardCommentCreate(BaseModel):
    user_id: str
    user_name: Optional[str] = None
    content: str = Field(..., min_length=1, max_length=2000)

class MoodBoardShareCreate(BaseModel):
    shared_with_id: str
    permission: SharePermission = "view"

class MoodBoardShareUpdate(BaseModel):
    permission: SharePermission

class TimelineRequest(BaseModel):
    """Generate (and store) a timeline for the wedding date"""
    wedding_date: date

class TimelineTaskSave(BaseModel):
    key: Optional[str] = None
    name: str
    completed: bool = False
    skipped: bool = False
    is_custom: bool = False

class TimelineMilestoneSave(BaseModel):
    key: Optional[str] = None
    title: str
    due_date: datetime
    tasks: List[TimelineTaskSave] = []

class TimelineSave(BaseModel):
    """A (possibly edited) timeline to store as the user's current one"""
    wedding_date: date
    milestones: List[TimelineMilestoneSave]

class TimelineTaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

class TimelineTaskUpdate(BaseModel):
    name: Optional[str] = None
    completed: Optional[bool] = None
    skipped: Optional[bool] = None
