"""
Appointment Models for Home Visits
"""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base, generate_id


class Appointment(Base):
    """A scheduled home visit or meeting, optionally generated from a recurring pattern"""

    __tablename__ = "appointments"

    appointment_id = Column(String(36), primary_key=True, default=generate_id)

    # Appointment details
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    appointment_type = Column(String(50), default="home_visit", nullable=False)

    # Scheduling (naive local wall-clock)
    start_datetime = Column(DateTime, nullable=False, index=True)
    end_datetime = Column(DateTime, nullable=False)

    # Status workflow: scheduled → in_progress → completed, or cancelled
    status = Column(String(50), default="scheduled", nullable=False, index=True)

    # Location
    home_xref = Column(Integer, nullable=True, index=True)  # Foster home cross-reference
    location_address = Column(Text, nullable=True)
    location_notes = Column(Text, nullable=True)

    # Assignment (null when unassigned)
    assigned_to_user_id = Column(String(255), nullable=True, index=True)
    assigned_to_name = Column(String(255), nullable=True)
    assigned_to_role = Column(String(100), nullable=True)

    priority = Column(String(20), default="normal", nullable=False)
    preparation_notes = Column(Text, nullable=True)

    # Recurrence
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_pattern = Column(String(50), nullable=True)  # e.g. first_monday

    # Audit trail
    created_by_user_id = Column(String(255), nullable=True)
    created_by_name = Column(String(255), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_appointments_window", "start_datetime", "end_datetime"),)
