"""
Planning timeline: milestones, their tasks and the couple's wedding date
"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey

from wedding_planner.core.db import Base, generate_id

class TimelineMilestone(Base):
    __tablename__ = "timeline_milestones"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), nullable=False, index=True)
    key = Column(String(50))  # template key, e.g. "initial-planning"
    title = Column(String(255), nullable=False)
    due_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class TimelineTask(Base):
    __tablename__ = "timeline_tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    milestone_id = Column(String(36), ForeignKey("timeline_milestones.id"), nullable=False, index=True)
    key = Column(String(50))
    name = Column(String(255), nullable=False)
    completed = Column(Boolean, default=False)
    skipped = Column(Boolean, default=False)
    is_custom = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class UserPreference(Base):
    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), nullable=False, unique=True)
    wedding_date = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
