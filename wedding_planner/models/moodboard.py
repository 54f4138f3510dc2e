"""
Mood boards: inspiration boards with items, comments and shares
"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Text

from wedding_planner.core.db import Base, generate_id

class MoodBoard(Base):
    __tablename__ = "mood_boards"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    is_public = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class MoodBoardItem(Base):
    __tablename__ = "mood_board_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    board_id = Column(String(36), ForeignKey("mood_boards.id"), nullable=False, index=True)
    item_type = Column(String(20), default="image")  # image, color, note, link
    content = Column(Text)
    image_url = Column(String(1024))
    file_path = Column(String(1024))
    position = Column(JSON)  # {"x": .., "y": ..}
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class MoodBoardComment(Base):
    __tablename__ = "mood_board_comments"

    id = Column(String(36), primary_key=True, default=generate_id)
    board_id = Column(String(36), ForeignKey("mood_boards.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    user_name = Column(String(255))
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class MoodBoardShare(Base):
    __tablename__ = "mood_board_shares"

    id = Column(String(36), primary_key=True, default=generate_id)
    board_id = Column(String(36), ForeignKey("mood_boards.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    shared_with_id = Column(String(255), nullable=False, index=True)
    permission = Column(String(20), default="view")  # view, edit, admin
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
