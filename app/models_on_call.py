"""
On-Call Schedule Models
Staff coverage assignments for after-hours foster home support
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.sql import func

from .database import Base, generate_id


class OnCallAssignment(Base):
    """One on-call shift for a staff member"""

    __tablename__ = "on_call_schedule"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Assignee (user_id is null for people without an app account)
    user_id = Column(String(255), nullable=True, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=True)
    user_phone = Column(String(50), nullable=True)

    # Coverage type, e.g. "Case Manager" or "Licensing"
    on_call_type = Column(String(100), nullable=True, index=True)

    start_datetime = Column(DateTime, nullable=False, index=True)
    end_datetime = Column(DateTime, nullable=False, index=True)

    notes = Column(Text, nullable=True)
    priority_level = Column(String(20), default="normal", nullable=False)  # normal, high

    is_active = Column(Boolean, default=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Audit trail
    created_by_name = Column(String(255), nullable=True)
    updated_by_name = Column(String(255), nullable=True)
    deleted_by_name = Column(String(255), nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_on_call_window", "start_datetime", "end_datetime"),)

    @property
    def duration_hours(self) -> float:
        return (self.end_datetime - self.start_datetime).total_seconds() / 3600

    def is_active_at(self, moment: datetime) -> bool:
        return self.start_datetime <= moment <= self.end_datetime
