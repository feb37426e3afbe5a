"""On-call service - Business logic for on-call coverage"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import COVERAGE_WINDOW_DAYS
from ...models_on_call import OnCallAssignment
from ..scheduling import (
    AssignmentInterval,
    CoverageGap,
    CoverageWindow,
    InvalidIntervalError,
    find_gaps,
    find_overlaps,
)
from .repository import OnCallRepository
from .schemas import (
    AssigneeSchedule,
    AssigneeShift,
    CoverageGapResponse,
    CoverageResponse,
    CoverageSummary,
    CoverageWarning,
    CurrentOnCall,
    IndividualReportResponse,
    OnCallCreate,
    OnCallResponse,
    OnCallUpdate,
    ShiftOverlapResponse,
)

logger = logging.getLogger(__name__)

UPDATE_FIELDS = {
    "userId": "user_id",
    "userName": "user_name",
    "userEmail": "user_email",
    "userPhone": "user_phone",
    "onCallType": "on_call_type",
    "startDatetime": "start_datetime",
    "endDatetime": "end_datetime",
    "notes": "notes",
    "priorityLevel": "priority_level",
    "isActive": "is_active",
    "updatedByName": "updated_by_name",
}

# Columns that cannot be cleared with an explicit null
REQUIRED_FIELDS = ("userName", "startDatetime", "endDatetime", "priorityLevel", "isActive")

OVERLAP_CONFLICT = {
    "error": "This user already has an overlapping on-call assignment",
    "code": "OVERLAP_CONFLICT",
}


def to_interval(schedule: OnCallAssignment) -> AssignmentInterval:
    return AssignmentInterval(
        start=schedule.start_datetime,
        end=schedule.end_datetime,
        assignee_id=schedule.user_id,
        assignee_name=schedule.user_name,
        assignee_phone=schedule.user_phone,
        assignee_email=schedule.user_email,
        priority=schedule.priority_level,
    )


def to_response(schedule: OnCallAssignment, now: datetime) -> OnCallResponse:
    response = OnCallResponse.model_validate(schedule)
    response.is_currently_active = schedule.is_active_at(now)
    return response


def describe_gap(
    gap: CoverageGap, window: CoverageWindow, intervals: list[AssignmentInterval]
) -> CoverageGapResponse:
    """Attach a message and the neighbouring assignees to a gap"""
    previous_user = next(
        (i.assignee_name for i in reversed(intervals) if i.end == gap.start), None
    )
    next_user = next((i.assignee_name for i in intervals if i.start == gap.end), None)

    if gap.start == window.start and gap.end == window.end:
        message = "No on-call coverage scheduled"
    elif gap.start == window.start:
        message = "Coverage gap at start of period"
    elif gap.end == window.end:
        message = "Coverage gap at end of period"
    else:
        message = f"Coverage gap between {previous_user} and {next_user}"

    return CoverageGapResponse(
        gap_start=gap.start,
        gap_end=gap.end,
        gap_hours=gap.hours,
        severity=gap.severity,
        message=message,
        previous_user=previous_user,
        next_user=next_user,
    )


class OnCallService:
    """Service layer for on-call schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OnCallRepository()

    def get_schedules(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
        on_call_type: Optional[str] = None,
        include_deleted: bool = False,
        now: Optional[datetime] = None,
    ) -> list[OnCallResponse]:
        now = now or datetime.now()
        schedules = self.repo.get_schedules(
            self.db, start, end, user_id, on_call_type, include_deleted
        )
        logger.info(f"✅ Retrieved {len(schedules)} on-call schedules")
        return [to_response(s, now) for s in schedules]

    def get_schedule(self, schedule_id: str) -> OnCallAssignment:
        schedule = self.repo.get_schedule_by_id(self.db, schedule_id)
        if not schedule:
            raise HTTPException(status_code=404, detail="On-call schedule not found")
        return schedule

    def _check_user_overlap(
        self, user_id: Optional[str], start: datetime, end: datetime, exclude_id: Optional[str] = None
    ) -> None:
        if not user_id:
            return
        if self.repo.count_user_overlaps(self.db, user_id, start, end, exclude_id) > 0:
            logger.warning(f"⚠️ Overlapping on-call assignment rejected for user {user_id}")
            raise HTTPException(status_code=409, detail=OVERLAP_CONFLICT)

    def create_schedule(self, data: OnCallCreate) -> OnCallAssignment:
        logger.info(f"📅 Creating on-call schedule for {data.userName}")

        self._check_user_overlap(data.userId, data.startDatetime, data.endDatetime)

        schedule = self.repo.create_schedule(
            self.db,
            user_id=data.userId,
            user_name=data.userName,
            user_email=data.userEmail,
            user_phone=data.userPhone,
            on_call_type=data.onCallType,
            start_datetime=data.startDatetime,
            end_datetime=data.endDatetime,
            notes=data.notes,
            priority_level=data.priorityLevel,
            is_active=True,
            created_by_name=data.createdByName or "Unknown",
        )
        logger.info(f"✅ Created on-call schedule: {schedule.id}")
        return schedule

    def update_schedule(self, schedule_id: str, data: OnCallUpdate) -> OnCallAssignment:
        schedule = self.get_schedule(schedule_id)

        supplied = data.model_dump(exclude_unset=True)
        cleared = [field for field in REQUIRED_FIELDS if field in supplied and supplied[field] is None]
        if cleared:
            raise HTTPException(status_code=400, detail=f"Cannot clear required fields: {', '.join(cleared)}")
        updates = {UPDATE_FIELDS[field]: value for field, value in supplied.items()}

        start = updates.get("start_datetime", schedule.start_datetime)
        end = updates.get("end_datetime", schedule.end_datetime)
        if end <= start:
            raise HTTPException(status_code=400, detail="End datetime must be after start datetime")

        self._check_user_overlap(
            updates.get("user_id", schedule.user_id), start, end, exclude_id=schedule.id
        )

        schedule = self.repo.update_schedule(self.db, schedule, **updates)
        logger.info(f"✅ Updated on-call schedule: {schedule.id}")
        return schedule

    def delete_schedule(self, schedule_id: str, deleted_by: Optional[str] = None) -> dict:
        schedule = self.get_schedule(schedule_id)
        self.repo.soft_delete_schedule(self.db, schedule, deleted_by)
        logger.info(f"🗑️ Deleted on-call schedule: {schedule_id}")
        return {"success": True, "message": "On-call schedule deleted successfully"}

    def resolve_window(
        self, start: Optional[datetime], end: Optional[datetime], now: datetime
    ) -> CoverageWindow:
        """Default to the next COVERAGE_WINDOW_DAYS days"""
        start = start or now
        end = end or start + timedelta(days=COVERAGE_WINDOW_DAYS)
        if end <= start:
            raise HTTPException(status_code=400, detail="endDate must be after startDate")
        return CoverageWindow(start=start, end=end)

    def check_coverage(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        on_call_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CoverageResponse:
        """Find gaps and overlapping shifts in on-call coverage over a window"""
        now = now or datetime.now()
        window = self.resolve_window(start, end, now)
        logger.info(
            f"📅 Checking coverage from {window.start.isoformat()} to {window.end.isoformat()}"
            + (f" for type: {on_call_type}" if on_call_type else " (all types)")
        )

        schedules = self.repo.get_schedules(
            self.db, window.start, window.end, on_call_type=on_call_type
        )
        intervals = [to_interval(s) for s in schedules]

        try:
            report = find_gaps(window, intervals)
            overlaps = find_overlaps(window, intervals)
        except InvalidIntervalError as e:
            logger.error(f"❌ Stored on-call schedule is malformed: {e}")
            raise HTTPException(status_code=500, detail=f"Stored on-call schedule is malformed: {e}") from e

        gaps = [describe_gap(gap, window, intervals) for gap in report.gaps]
        overlap_responses = [
            ShiftOverlapResponse(
                overlap_start=o.start,
                overlap_end=o.end,
                overlap_hours=o.hours,
                users=[o.first.assignee_name, o.second.assignee_name],
                message=f"{o.first.assignee_name} and {o.second.assignee_name} have overlapping shifts",
            )
            for o in overlaps
        ]

        warnings = [
            CoverageWarning(
                type="gap",
                severity=g.severity,
                message=g.message,
                start=g.gap_start,
                end=g.gap_end,
                hours=g.gap_hours,
            )
            for g in gaps
        ] + [
            CoverageWarning(
                type="overlap",
                severity="warning",
                message=o.message,
                start=o.overlap_start,
                end=o.overlap_end,
                hours=o.overlap_hours,
            )
            for o in overlap_responses
        ]

        current = self.repo.get_current(self.db, now)

        logger.info(
            f"✅ Coverage analysis complete: {len(gaps)} gaps found, "
            f"{report.covered_percentage:.1f}% coverage"
        )

        return CoverageResponse(
            coverage=CoverageSummary(
                status=report.status,
                covered_percentage=round(report.covered_percentage, 1),
                totalHours=report.total_hours,
                coveredHours=report.covered_hours,
                gapHours=report.gap_hours,
                startDate=window.start,
                endDate=window.end,
                gaps=gaps,
                overlaps=overlap_responses,
            ),
            currentOnCall=CurrentOnCall.model_validate(current) if current else None,
            shifts=[to_response(s, now) for s in schedules],
            warnings=warnings,
        )

    def individual_report(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        on_call_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> IndividualReportResponse:
        """Group the window's assignments by assignee"""
        window = self.resolve_window(start, end, now or datetime.now())
        schedules = self.repo.get_schedules(
            self.db, window.start, window.end, on_call_type=on_call_type
        )

        grouped: dict[str, AssigneeSchedule] = {}
        for s in schedules:
            key = s.user_id or s.user_name
            if key not in grouped:
                grouped[key] = AssigneeSchedule(
                    user_id=s.user_id,
                    user_name=s.user_name,
                    user_email=s.user_email,
                    user_phone=s.user_phone,
                    total_hours=0,
                    shifts=[],
                )
            assignee = grouped[key]
            assignee.shifts.append(
                AssigneeShift(
                    id=s.id,
                    start_datetime=s.start_datetime,
                    end_datetime=s.end_datetime,
                    duration_hours=s.duration_hours,
                    on_call_type=s.on_call_type,
                    notes=s.notes,
                )
            )
            assignee.total_hours += s.duration_hours

        logger.info(f"📧 Grouped {len(schedules)} shifts into {len(grouped)} assignees")
        return IndividualReportResponse(
            startDate=window.start, endDate=window.end, assignees=list(grouped.values())
        )
