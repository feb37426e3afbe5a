"""Appointment router - FastAPI endpoints for appointment operations"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import to_wall_clock
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    BulkRecurringCreate,
    BulkRecurringResponse,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    service: AppointmentService = Depends(get_appointment_service),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    assigned_to_user_id: Optional[str] = Query(None, alias="assignedToUserId"),
    home_xref: Optional[int] = Query(None, alias="homeXref"),
    status: Optional[str] = Query(None),
):
    """Get appointments, optionally limited to a date window, assignee, home or status"""
    return service.get_appointments(
        to_wall_clock(start_date), to_wall_clock(end_date), assigned_to_user_id, home_xref, status
    )


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create a single appointment"""
    return service.create_appointment(data)


@router.post("/bulk-recurring", response_model=BulkRecurringResponse, status_code=201)
async def create_bulk_recurring(
    data: BulkRecurringCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Create appointments from a recurring pattern.

    Example: "first_monday" at 16:00 for all of 2026 creates twelve appointments.
    """
    appointments, rule = service.create_bulk_recurring(data)
    return BulkRecurringResponse(
        created=len(appointments),
        total=len(appointments),
        appointmentIds=[a.appointment_id for a in appointments],
        recurringPattern=rule.pattern,
        message=f"Created {len(appointments)} recurring appointments",
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment(appointment_id)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Update an appointment"""
    return service.update_appointment(appointment_id, data)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Soft-delete an appointment"""
    return service.delete_appointment(appointment_id)
