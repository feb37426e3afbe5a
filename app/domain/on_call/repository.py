"""On-call repository - Database access layer"""

from datetime import datetime
from typing import Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from ...models_on_call import OnCallAssignment


class OnCallRepository:
    """Repository for on-call schedule database operations"""

    @staticmethod
    def _active(db: Session, include_deleted: bool = False):
        query = db.query(OnCallAssignment).filter(OnCallAssignment.is_active.is_(True))
        if not include_deleted:
            query = query.filter(OnCallAssignment.is_deleted.is_(False))
        return query

    @staticmethod
    def get_schedules(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
        on_call_type: Optional[str] = None,
        include_deleted: bool = False,
    ) -> list[OnCallAssignment]:
        query = OnCallRepository._active(db, include_deleted)

        if start:
            query = query.filter(OnCallAssignment.end_datetime >= start)
        if end:
            query = query.filter(OnCallAssignment.start_datetime <= end)
        if user_id:
            query = query.filter(OnCallAssignment.user_id == user_id)
        if on_call_type:
            query = query.filter(OnCallAssignment.on_call_type == on_call_type)

        return query.order_by(OnCallAssignment.start_datetime.asc()).all()

    @staticmethod
    def get_schedule_by_id(db: Session, schedule_id: str) -> Optional[OnCallAssignment]:
        return (
            db.query(OnCallAssignment)
            .filter(OnCallAssignment.id == schedule_id, OnCallAssignment.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def count_user_overlaps(
        db: Session,
        user_id: str,
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> int:
        """Count the user's live assignments that overlap [start, end). Back-to-back shifts do not."""
        query = OnCallRepository._active(db).filter(
            OnCallAssignment.user_id == user_id,
            OnCallAssignment.start_datetime < end,
            OnCallAssignment.end_datetime > start,
        )
        if exclude_id:
            query = query.filter(OnCallAssignment.id != exclude_id)
        return query.count()

    @staticmethod
    def get_current(db: Session, moment: datetime) -> Optional[OnCallAssignment]:
        """Assignment covering ``moment``, high priority first"""
        return (
            OnCallRepository._active(db)
            .filter(
                OnCallAssignment.start_datetime <= moment,
                OnCallAssignment.end_datetime >= moment,
            )
            .order_by(
                case((OnCallAssignment.priority_level == "high", 0), else_=1),
                OnCallAssignment.start_datetime.asc(),
            )
            .first()
        )

    @staticmethod
    def create_schedule(db: Session, **kwargs) -> OnCallAssignment:
        schedule = OnCallAssignment(**kwargs)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update_schedule(db: Session, schedule: OnCallAssignment, **kwargs) -> OnCallAssignment:
        for key, value in kwargs.items():
            setattr(schedule, key, value)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def soft_delete_schedule(
        db: Session, schedule: OnCallAssignment, deleted_by: Optional[str] = None
    ) -> None:
        schedule.is_deleted = True
        schedule.deleted_at = datetime.now()
        schedule.deleted_by_name = deleted_by
        db.commit()
