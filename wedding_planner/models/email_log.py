"""
Email delivery log model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from wedding_planner.core.db import Base, generate_id

class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(String(36), primary_key=True, default=generate_id)
    recipient_email = Column(String(255), nullable=False)
    email_type = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False)  # sent, failed
    error_message = Column(Text)
    sent_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
