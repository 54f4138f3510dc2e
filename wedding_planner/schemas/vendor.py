"""
Vendor, contract, payment and review Pydantic schemas
"""

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

class VendorCreate(BaseModel):
    """Schema for creating a vendor"""
    name: str
    category: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    status: str = "considering"
    notes: Optional[str] = None

class VendorUpdate(BaseModel):
    """Schema for updating a vendor"""
    name: Optional[str] = None
    category: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

class AppointmentCreate(BaseModel):
    title: str
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: str = "scheduled"

class AppointmentUpdate(BaseModel):
    title: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None

class ContractUpdate(BaseModel):
    title: Optional[str] = None
    signed_date: Optional[date] = None
    expiration_date: Optional[date] = None
    status: Optional[Literal["active", "expired", "cancelled"]] = None

class PaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    due_date: date
    description: Optional[str] = None
    status: Literal["paid", "pending", "cancelled"] = "pending"
    paid_date: Optional[date] = None

class PaymentUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[date] = None
    description: Optional[str] = None
    status: Optional[Literal["paid", "pending", "cancelled"]] = None
    paid_date: Optional[date] = None

class ReviewCreate(BaseModel):
    """Guest-submitted vendor review; starts out pending moderation"""
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = None
    content: Optional[str] = None

class ReviewModeration(BaseModel):
    status: Literal["pending", "approved", "rejected"]

class ReviewVoteRequest(BaseModel):
    user_id: str
    is_helpful: bool
