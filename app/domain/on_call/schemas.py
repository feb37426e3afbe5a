"""On-call domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import to_wall_clock, validate_email, validate_us_phone

PriorityLevel = Literal["normal", "high"]


class OnCallCreate(BaseModel):
    """Schema for creating an on-call assignment"""

    userId: Optional[str] = None
    userName: str = Field(..., min_length=1, max_length=255)
    userEmail: Optional[str] = None
    userPhone: Optional[str] = None
    onCallType: Optional[str] = None
    startDatetime: datetime
    endDatetime: datetime
    notes: Optional[str] = None
    priorityLevel: PriorityLevel = "normal"
    createdByName: Optional[str] = None

    @field_validator("userPhone")
    @classmethod
    def validate_phone(cls, v):
        return validate_us_phone(v)

    @field_validator("userEmail")
    @classmethod
    def validate_user_email(cls, v):
        return validate_email(v)

    @field_validator("startDatetime", "endDatetime")
    @classmethod
    def strip_offset(cls, v):
        return to_wall_clock(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.endDatetime <= self.startDatetime:
            raise ValueError("End datetime must be after start datetime")
        return self


class OnCallUpdate(BaseModel):
    """Schema for updating an on-call assignment"""

    userId: Optional[str] = None
    userName: Optional[str] = Field(None, min_length=1, max_length=255)
    userEmail: Optional[str] = None
    userPhone: Optional[str] = None
    onCallType: Optional[str] = None
    startDatetime: Optional[datetime] = None
    endDatetime: Optional[datetime] = None
    notes: Optional[str] = None
    priorityLevel: Optional[PriorityLevel] = None
    isActive: Optional[bool] = None
    updatedByName: Optional[str] = None

    @field_validator("userPhone")
    @classmethod
    def validate_phone(cls, v):
        return validate_us_phone(v)

    @field_validator("userEmail")
    @classmethod
    def validate_user_email(cls, v):
        return validate_email(v)

    @field_validator("startDatetime", "endDatetime")
    @classmethod
    def strip_offset(cls, v):
        return to_wall_clock(v)


class OnCallResponse(BaseModel):
    """Schema for on-call assignment response"""

    id: str
    user_id: Optional[str] = None
    user_name: str
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    on_call_type: Optional[str] = None
    start_datetime: datetime
    end_datetime: datetime
    duration_hours: float
    notes: Optional[str] = None
    priority_level: str
    is_active: bool
    is_currently_active: bool = False
    created_by_name: Optional[str] = None
    updated_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OnCallListResponse(BaseModel):
    success: bool = True
    schedules: list[OnCallResponse]
    count: int


class CoverageGapResponse(BaseModel):
    gap_start: datetime
    gap_end: datetime
    gap_hours: float
    severity: str
    message: str
    previous_user: Optional[str] = None
    next_user: Optional[str] = None


class ShiftOverlapResponse(BaseModel):
    overlap_start: datetime
    overlap_end: datetime
    overlap_hours: float
    users: list[str]
    message: str


class CoverageWarning(BaseModel):
    type: Literal["gap", "overlap"]
    severity: str
    message: str
    start: datetime
    end: datetime
    hours: float


class CoverageSummary(BaseModel):
    status: Literal["full", "partial", "critical"]
    covered_percentage: float
    totalHours: float
    coveredHours: float
    gapHours: float
    startDate: datetime
    endDate: datetime
    gaps: list[CoverageGapResponse]
    overlaps: list[ShiftOverlapResponse]


class CurrentOnCall(BaseModel):
    user_name: str
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    start_datetime: datetime
    end_datetime: datetime

    class Config:
        from_attributes = True


class CoverageResponse(BaseModel):
    success: bool = True
    coverage: CoverageSummary
    currentOnCall: Optional[CurrentOnCall] = None
    shifts: list[OnCallResponse]
    warnings: list[CoverageWarning]


class AssigneeShift(BaseModel):
    id: str
    start_datetime: datetime
    end_datetime: datetime
    duration_hours: float
    on_call_type: Optional[str] = None
    notes: Optional[str] = None


class AssigneeSchedule(BaseModel):
    user_id: Optional[str] = None
    user_name: str
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    total_hours: float
    shifts: list[AssigneeShift]


class IndividualReportResponse(BaseModel):
    success: bool = True
    startDate: datetime
    endDate: datetime
    assignees: list[AssigneeSchedule]
