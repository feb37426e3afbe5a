"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...config import DEFAULT_APPOINTMENT_DURATION_MINUTES, DEFAULT_APPOINTMENT_TIME
from ...shared.validators import to_wall_clock, validate_time_of_day
from ..scheduling.recurrence import MAX_DURATION_MINUTES

AppointmentStatus = Literal["scheduled", "in_progress", "completed", "cancelled"]
Priority = Literal["normal", "high"]


class AppointmentFields(BaseModel):
    """Metadata shared by single and bulk appointment creation"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    appointmentType: str = "home_visit"
    homeXref: Optional[int] = None
    locationAddress: Optional[str] = None
    locationNotes: Optional[str] = None
    assignedToUserId: Optional[str] = None
    assignedToName: Optional[str] = None
    assignedToRole: Optional[str] = None
    priority: Priority = "normal"
    preparationNotes: Optional[str] = None
    createdByName: Optional[str] = None


class AppointmentCreate(AppointmentFields):
    """Schema for creating a single appointment"""

    startDatetime: datetime
    endDatetime: datetime

    @field_validator("startDatetime", "endDatetime")
    @classmethod
    def strip_offset(cls, v):
        return to_wall_clock(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.endDatetime <= self.startDatetime:
            raise ValueError("End datetime must be after start datetime")
        return self


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment; only supplied fields change"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    appointmentType: Optional[str] = None
    startDatetime: Optional[datetime] = None
    endDatetime: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    homeXref: Optional[int] = None
    locationAddress: Optional[str] = None
    locationNotes: Optional[str] = None
    assignedToUserId: Optional[str] = None
    assignedToName: Optional[str] = None
    assignedToRole: Optional[str] = None
    priority: Optional[Priority] = None
    preparationNotes: Optional[str] = None

    @field_validator("startDatetime", "endDatetime")
    @classmethod
    def strip_offset(cls, v):
        return to_wall_clock(v)


class BulkRecurringCreate(AppointmentFields):
    """Schema for creating a series like "first Monday of every month at 4pm" """

    recurringPattern: str = Field(..., examples=["first_monday", "last_friday"])
    startYear: int = Field(..., ge=1900, le=2999)
    endYear: Optional[int] = Field(None, ge=1900, le=2999)
    time: str = DEFAULT_APPOINTMENT_TIME
    durationMinutes: int = Field(DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=0, le=MAX_DURATION_MINUTES)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    appointment_id: str
    title: str
    description: Optional[str] = None
    appointment_type: str
    start_datetime: datetime
    end_datetime: datetime
    status: str
    home_xref: Optional[int] = None
    location_address: Optional[str] = None
    location_notes: Optional[str] = None
    assigned_to_user_id: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_to_role: Optional[str] = None
    priority: str
    preparation_notes: Optional[str] = None
    is_recurring: bool
    recurring_pattern: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkRecurringResponse(BaseModel):
    success: bool = True
    created: int
    total: int
    appointmentIds: list[str]
    recurringPattern: str
    message: str
