"""
Guest, RSVP and guest group Pydantic schemas
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field

RsvpStatus = Literal["confirmed", "pending", "declined"]
GuestCategory = Literal["family", "friend", "colleague", "other"]

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    name: str
    email: EmailStr
    phone: Optional[str] = None
    category: GuestCategory = "other"
    rsvp_status: RsvpStatus = "pending"
    rsvp_deadline: Optional[datetime] = None
    plus_one: bool = False
    plus_one_name: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None

class GuestUpdate(BaseModel):
    """Schema for updating a guest"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    category: Optional[GuestCategory] = None
    rsvp_deadline: Optional[datetime] = None
    plus_one: Optional[bool] = None
    plus_one_name: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None

class RsvpUpdate(BaseModel):
    """RSVP response from a guest"""
    rsvp_status: RsvpStatus
    plus_one: Optional[bool] = None
    plus_one_name: Optional[str] = None
    dietary_restrictions: Optional[str] = None

class LookupRequest(BaseModel):
    """Guest lookup request"""
    email: EmailStr

class ReminderRequest(BaseModel):
    """Bulk RSVP reminder request"""
    guest_ids: List[str]
    rsvp_deadline: str

class GroupCreate(BaseModel):
    name: str
    color: Optional[str] = None
    type: Optional[str] = None

RelationshipType = Literal["family", "partner", "friend", "colleague", "avoid"]

class RelationshipCreate(BaseModel):
    """Link between two guests; re-linking a pair updates it"""
    guest_id: str
    related_guest_id: str
    relationship_type: RelationshipType
    strength: int = Field(5, ge=1, le=10)

class RelationshipUpdate(BaseModel):
    relationship_type: Optional[RelationshipType] = None
    strength: Optional[int] = Field(None, ge=1, le=10)
