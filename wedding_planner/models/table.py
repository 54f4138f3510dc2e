"""
Table and seat models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, JSON, Text

from wedding_planner.core.db import Base, generate_id

class Table(Base):
    __tablename__ = "tables"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    shape = Column(String(20), default="round")  # round, rectangle, custom
    capacity = Column(Integer, nullable=False, default=8)
    position = Column(JSON)  # {"x": .., "y": ..}
    dimensions = Column(JSON)  # {"width": .., "height": ..}
    rotation = Column(Float, default=0)
    location = Column(String(255))
    notes = Column(Text)
    group_id = Column(String(36), ForeignKey("guest_groups.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Seat(Base):
    __tablename__ = "seats"

    id = Column(String(36), primary_key=True, default=generate_id)
    table_id = Column(String(36), ForeignKey("tables.id"), nullable=False, index=True)
    # At most one seat per guest; enforced by TableStore.assign_exclusive
    guest_id = Column(String(36), ForeignKey("guests.id"), index=True)
    position = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
