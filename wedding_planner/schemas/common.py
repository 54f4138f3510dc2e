"""
API envelope schemas
"""

from typing import Any, Optional
from pydantic import BaseModel

class StandardResponse(BaseModel):
    """Envelope returned by every REST endpoint"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(StandardResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Any] = None
