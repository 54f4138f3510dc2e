"""
Database models package
"""

from .guest import Guest, GuestGroup, GuestRelationship
from .table import Table, Seat
from .budget import BudgetCategory, Expense
from .vendor import Vendor, VendorAppointment, VendorContract, VendorPayment
from .review import VendorReview, ReviewVote
from .media import Photo, PhotoComment, SongRequest
from .moodboard import MoodBoard, MoodBoardItem, MoodBoardComment, MoodBoardShare
from .timeline import TimelineMilestone, TimelineTask, UserPreference
from .email_log import EmailLog

# Table name -> model, used by the SQL table store
MODELS = {
    model.__tablename__: model
    for model in (
        Guest, GuestGroup, GuestRelationship, Table, Seat, BudgetCategory, Expense,
        Vendor, VendorAppointment, VendorContract, VendorPayment,
        VendorReview, ReviewVote, Photo, PhotoComment, SongRequest,
        MoodBoard, MoodBoardItem, MoodBoardComment, MoodBoardShare,
        TimelineMilestone, TimelineTask, UserPreference, EmailLog,
    )
}

__all__ = [
    "Guest", "GuestGroup", "GuestRelationship", "Table", "Seat", "BudgetCategory", "Expense",
    "Vendor", "VendorAppointment", "VendorContract", "VendorPayment",
    "VendorReview", "ReviewVote", "Photo", "PhotoComment", "SongRequest",
    "MoodBoard", "MoodBoardItem", "MoodBoardComment", "MoodBoardShare",
    "TimelineMilestone", "TimelineTask", "UserPreference", "EmailLog", "MODELS",
]
