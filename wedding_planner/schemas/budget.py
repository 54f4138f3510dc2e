"""
Budget Pydantic schemas
"""

import datetime as dt
from typing import Literal, Optional
from pydantic import BaseModel, Field

ExpenseStatus = Literal["paid", "pending", "cancelled"]

class ExpenseCreate(BaseModel):
    """Schema for creating an expense"""
    name: str
    category: str
    amount: float = Field(..., ge=0)
    date: dt.date
    status: ExpenseStatus = "pending"
    vendor: Optional[str] = None
    notes: Optional[str] = None

class ExpenseUpdate(BaseModel):
    """Schema for updating an expense"""
    name: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    date: Optional[dt.date] = None
    status: Optional[ExpenseStatus] = None
    vendor: Optional[str] = None
    notes: Optional[str] = None

class CategoryCreate(BaseModel):
    """Schema for creating a budget category"""
    name: str
    amount: float = Field(0, ge=0)
    percentage: float = 0
    recommended: float = 0
    color: Optional[str] = None

class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    percentage: Optional[float] = None
    recommended: Optional[float] = None
    color: Optional[str] = None
