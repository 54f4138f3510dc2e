"""
Vendor models: vendors and their appointments, contracts and payments
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Float, ForeignKey, Text

from wedding_planner.core.db import Base, generate_id

class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100))
    contact_name = Column(String(255))
    email = Column(String(255))
    phone = Column(String(50))
    website = Column(String(512))
    status = Column(String(50), default="considering")
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class VendorAppointment(Base):
    __tablename__ = "vendor_appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime)
    location = Column(String(255))
    notes = Column(Text)
    status = Column(String(50), default="scheduled")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class VendorContract(Base):
    __tablename__ = "vendor_contracts"

    id = Column(String(36), primary_key=True, default=generate_id)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    file_url = Column(String(1024))
    file_path = Column(String(1024))
    signed_date = Column(Date)
    expiration_date = Column(Date)
    status = Column(String(20), default="active")  # active, expired, cancelled
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class VendorPayment(Base):
    __tablename__ = "vendor_payments"

    id = Column(String(36), primary_key=True, default=generate_id)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date)
    status = Column(String(20), default="pending")  # paid, pending, cancelled
    description = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
