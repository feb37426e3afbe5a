"""Appointment repository - Database access layer"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models_appointment import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointments(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        assigned_to_user_id: Optional[str] = None,
        home_xref: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.is_deleted.is_(False))

        if start:
            query = query.filter(Appointment.end_datetime >= start)
        if end:
            query = query.filter(Appointment.start_datetime <= end)
        if assigned_to_user_id:
            query = query.filter(Appointment.assigned_to_user_id == assigned_to_user_id)
        if home_xref is not None:
            query = query.filter(Appointment.home_xref == home_xref)
        if status:
            query = query.filter(Appointment.status == status)

        return query.order_by(Appointment.start_datetime.asc()).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.appointment_id == appointment_id,
                Appointment.is_deleted.is_(False),
            )
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, **kwargs) -> Appointment:
        appointment = Appointment(**kwargs)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def create_appointments(db: Session, rows: list[dict]) -> list[Appointment]:
        """Insert a batch of appointments in one transaction"""
        appointments = [Appointment(**row) for row in rows]
        db.add_all(appointments)
        db.commit()
        return appointments

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **kwargs) -> Appointment:
        for key, value in kwargs.items():
            setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def soft_delete_appointment(db: Session, appointment: Appointment) -> None:
        appointment.is_deleted = True
        db.commit()
