"""
Guest and guest group models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text

from wedding_planner.core.db import Base, generate_id

class Guest(Base):
    __tablename__ = "guests"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50))
    category = Column(String(50), default="other")  # family, friend, colleague, other
    rsvp_status = Column(String(20), default="pending")  # confirmed, pending, declined
    rsvp_deadline = Column(DateTime)
    rsvp_response_date = Column(DateTime)
    plus_one = Column(Boolean, default=False)
    plus_one_name = Column(String(255))
    dietary_restrictions = Column(String(255))
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class GuestGroup(Base):
    __tablename__ = "guest_groups"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    color = Column(String(20))
    type = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class GuestRelationship(Base):
    """Undirected link between two guests; one row per pair"""
    __tablename__ = "guest_relationships"

    id = Column(String(36), primary_key=True, default=generate_id)
    guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False, index=True)
    related_guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False, index=True)
    relationship_type = Column(String(50), nullable=False)  # family, partner, friend, colleague, avoid
    strength = Column(Integer, default=5)  # 1-10
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
