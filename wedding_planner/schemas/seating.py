"""
Seating chart Pydantic schemas
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

TableShape = Literal["round", "rectangle", "custom"]

class Point(BaseModel):
    x: float
    y: float

class Dimensions(BaseModel):
    width: float
    height: float

class TableCreate(BaseModel):
    """Schema for creating a table"""
    name: str
    shape: TableShape = "round"
    capacity: int = Field(8, ge=1, le=50)
    location: Optional[str] = None
    notes: Optional[str] = None

class TableUpdate(BaseModel):
    """Schema for updating a table; a new capacity resizes its seats"""
    name: Optional[str] = None
    shape: Optional[TableShape] = None
    capacity: Optional[int] = Field(None, ge=1, le=50)
    dimensions: Optional[Dimensions] = None
    location: Optional[str] = None
    notes: Optional[str] = None

class TablePosition(BaseModel):
    """Drag/rotate update from the floor plan"""
    position: Point
    rotation: float = 0

class SeatAssignment(BaseModel):
    guest_id: str

class TableGroupAssignment(BaseModel):
    group_id: Optional[str] = None
