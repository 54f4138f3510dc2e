"""
Budget category and expense models
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Float, Text

from wedding_planner.core.db import Base, generate_id

class BudgetCategory(Base):
    __tablename__ = "budget_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    percentage = Column(Float, default=0)
    amount = Column(Float, default=0)
    recommended = Column(Float, default=0)
    color = Column(String(20))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(20), default="pending")  # paid, pending, cancelled
    vendor = Column(String(255))
    notes = Column(Text)
    receipt_url = Column(String(1024))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
