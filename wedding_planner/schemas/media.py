"""
Photo and music wishlist Pydantic schemas
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

class CommentCreate(BaseModel):
    guest_id: str
    content: str = Field(..., min_length=1, max_length=2000)

class SongCreate(BaseModel):
    """Song request for the music wishlist"""
    title: str
    artist: Optional[str] = None
    notes: Optional[str] = None

class SongUpdate(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    notes: Optional[str] = None

class SongStatusUpdate(BaseModel):
    status: Literal["pending", "approved", "played", "rejected"]
