"""Appointment service - Business logic for appointment operations"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_appointment import Appointment
from ..scheduling import InvalidRuleError, RecurrenceRule, expand
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate, BulkRecurringCreate

logger = logging.getLogger(__name__)

# Request field -> column for partial updates
UPDATE_FIELDS = {
    "title": "title",
    "description": "description",
    "appointmentType": "appointment_type",
    "startDatetime": "start_datetime",
    "endDatetime": "end_datetime",
    "status": "status",
    "homeXref": "home_xref",
    "locationAddress": "location_address",
    "locationNotes": "location_notes",
    "assignedToUserId": "assigned_to_user_id",
    "assignedToName": "assigned_to_name",
    "assignedToRole": "assigned_to_role",
    "priority": "priority",
    "preparationNotes": "preparation_notes",
}

# Columns that cannot be cleared with an explicit null
REQUIRED_FIELDS = ("title", "appointmentType", "startDatetime", "endDatetime", "status", "priority")


def _metadata_columns(data) -> dict:
    return {
        "title": data.title,
        "description": data.description,
        "appointment_type": data.appointmentType,
        "home_xref": data.homeXref,
        "location_address": data.locationAddress,
        "location_notes": data.locationNotes,
        "assigned_to_user_id": data.assignedToUserId,
        "assigned_to_name": data.assignedToName,
        "assigned_to_role": data.assignedToRole,
        "priority": data.priority,
        "preparation_notes": data.preparationNotes,
        "created_by_name": data.createdByName or "System User",
        "status": "scheduled",
    }


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointments(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        assigned_to_user_id: Optional[str] = None,
        home_xref: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Appointment]:
        appointments = self.repo.get_appointments(
            self.db, start, end, assigned_to_user_id, home_xref, status
        )
        logger.info(f"✅ Retrieved {len(appointments)} appointments")
        return appointments

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def create_appointment(self, data: AppointmentCreate) -> Appointment:
        logger.info(f"📅 Creating appointment: {data.title}")
        return self.repo.create_appointment(
            self.db,
            start_datetime=data.startDatetime,
            end_datetime=data.endDatetime,
            is_recurring=False,
            **_metadata_columns(data),
        )

    def update_appointment(self, appointment_id: str, data: AppointmentUpdate) -> Appointment:
        appointment = self.get_appointment(appointment_id)

        supplied = data.model_dump(exclude_unset=True)
        cleared = [field for field in REQUIRED_FIELDS if field in supplied and supplied[field] is None]
        if cleared:
            raise HTTPException(status_code=400, detail=f"Cannot clear required fields: {', '.join(cleared)}")
        updates = {UPDATE_FIELDS[field]: value for field, value in supplied.items()}

        start = updates.get("start_datetime", appointment.start_datetime)
        end = updates.get("end_datetime", appointment.end_datetime)
        if end <= start:
            raise HTTPException(status_code=400, detail="End datetime must be after start datetime")

        return self.repo.update_appointment(self.db, appointment, **updates)

    def delete_appointment(self, appointment_id: str) -> dict:
        appointment = self.get_appointment(appointment_id)
        self.repo.soft_delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Deleted appointment {appointment_id}")
        return {"success": True, "message": "Appointment deleted"}

    def create_bulk_recurring(self, data: BulkRecurringCreate) -> tuple[list[Appointment], RecurrenceRule]:
        """
        Expand a recurring pattern and insert one appointment per occurrence.

        Raises:
            HTTPException: 400 if the pattern is invalid or yields no dates
        """
        try:
            rule = RecurrenceRule.from_pattern(
                data.recurringPattern,
                start_year=data.startYear,
                end_year=data.endYear,
                time_of_day=data.time,
                duration_minutes=data.durationMinutes,
            )
            occurrences = expand(rule)
        except InvalidRuleError as e:
            logger.warning(f"⚠️ Rejected recurring pattern {data.recurringPattern}: {e}")
            raise HTTPException(status_code=400, detail=str(e)) from e

        if not occurrences:
            raise HTTPException(status_code=400, detail="No dates generated for the given pattern")

        logger.info(
            f"📅 Creating {len(occurrences)} recurring appointments for pattern: {rule.pattern}"
        )

        metadata = _metadata_columns(data)
        rows = [
            {
                **metadata,
                "start_datetime": occurrence.start,
                "end_datetime": occurrence.end,
                "is_recurring": True,
                "recurring_pattern": rule.pattern,
            }
            for occurrence in occurrences
        ]
        appointments = self.repo.create_appointments(self.db, rows)

        logger.info(f"✅ Created {len(appointments)} of {len(occurrences)} appointments")
        return appointments, rule
