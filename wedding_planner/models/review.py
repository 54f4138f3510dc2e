"""
Vendor review and review vote models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text

from wedding_planner.core.db import Base, generate_id

class VendorReview(Base):
    __tablename__ = "vendor_reviews"

    id = Column(String(36), primary_key=True, default=generate_id)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    title = Column(String(255))
    content = Column(Text)
    status = Column(String(20), default="pending")  # pending, approved, rejected
    # Denormalized from vendor_review_votes by ReviewService.recount_votes
    helpful_votes = Column(Integer, default=0)
    unhelpful_votes = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class ReviewVote(Base):
    __tablename__ = "vendor_review_votes"

    id = Column(String(36), primary_key=True, default=generate_id)
    review_id = Column(String(36), ForeignKey("vendor_reviews.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    is_helpful = Column(Boolean, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
