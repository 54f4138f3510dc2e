"""
Guest-submitted content: photos, photo comments and song requests
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text

from wedding_planner.core.db import Base, generate_id

class Photo(Base):
    __tablename__ = "photos"

    id = Column(String(36), primary_key=True, default=generate_id)
    guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False, index=True)
    url = Column(String(1024), nullable=False)
    file_path = Column(String(1024))
    caption = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class PhotoComment(Base):
    __tablename__ = "photo_comments"

    id = Column(String(36), primary_key=True, default=generate_id)
    photo_id = Column(String(36), ForeignKey("photos.id"), nullable=False, index=True)
    guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class SongRequest(Base):
    __tablename__ = "music_wishlist"

    id = Column(String(36), primary_key=True, default=generate_id)
    guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    artist = Column(String(255))
    notes = Column(Text)
    status = Column(String(20), default="pending")  # pending, approved, played, rejected
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
