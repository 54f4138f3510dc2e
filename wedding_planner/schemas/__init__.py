"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .seating import *
from .budget import *
from .vendor import *
from .media import *
from .planning import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "GuestCreate",
    "GuestUpdate",
    "RsvpUpdate",
    "LookupRequest",
    "ReminderRequest",
    "GroupCreate",
    "TableCreate",
    "TableUpdate",
    "TablePosition",
    "SeatAssignment",
    "TableGroupAssignment",
    "ExpenseCreate",
    "ExpenseUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    "VendorCreate",
    "VendorUpdate",
    "AppointmentCreate",
    "AppointmentUpdate",
    "ContractUpdate",
    "PaymentCreate",
    "PaymentUpdate",
    "ReviewCreate",
    "ReviewModeration",
    "ReviewVoteRequest",
    "CommentCreate",
    "SongCreate",
    "SongUpdate",
    "SongStatusUpdate",
    "RelationshipCreate",
    "RelationshipUpdate",
    "MoodBoardCreate",
    "MoodBoardUpdate",
    "MoodBoardItemCreate",
    "MoodBoardItemUpdate",
    "MoodBoardCommentCreate",
    "MoodBoardShareCreate",
    "MoodBoardShareUpdate",
    "TimelineRequest",
    "TimelineSave",
    "TimelineTaskCreate",
    "TimelineTaskUpdate",
]
