"""On-call router - FastAPI endpoints for on-call scheduling and coverage"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import to_wall_clock
from .schemas import (
    CoverageResponse,
    IndividualReportResponse,
    OnCallCreate,
    OnCallListResponse,
    OnCallResponse,
    OnCallUpdate,
)
from .service import OnCallService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/on-call", tags=["On-Call"])


def get_on_call_service(db: Session = Depends(get_db)) -> OnCallService:
    """Dependency injection for OnCallService"""
    return OnCallService(db)


@router.get("", response_model=OnCallListResponse)
async def get_schedules(
    service: OnCallService = Depends(get_on_call_service),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_id: Optional[str] = Query(None, alias="userId"),
    on_call_type: Optional[str] = Query(None, alias="type"),
    include_deleted: bool = Query(False, alias="includeDeleted"),
):
    """Fetch on-call schedules"""
    schedules = service.get_schedules(
        to_wall_clock(start_date), to_wall_clock(end_date), user_id, on_call_type, include_deleted
    )
    return OnCallListResponse(schedules=schedules, count=len(schedules))


@router.post("", response_model=OnCallResponse, status_code=201)
async def create_schedule(
    data: OnCallCreate,
    service: OnCallService = Depends(get_on_call_service),
):
    """Create an on-call assignment; 409 if the user already has an overlapping one"""
    schedule = service.create_schedule(data)
    return to_response(schedule, datetime.now())


# Fixed paths must be registered before /{schedule_id}
@router.get("/coverage", response_model=CoverageResponse)
async def check_coverage(
    service: OnCallService = Depends(get_on_call_service),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    on_call_type: Optional[str] = Query(None, alias="type"),
):
    """Check 24/7 on-call coverage and identify gaps (defaults to the next 30 days)"""
    return service.check_coverage(to_wall_clock(start_date), to_wall_clock(end_date), on_call_type)


@router.get("/reports/individual", response_model=IndividualReportResponse)
async def individual_report(
    service: OnCallService = Depends(get_on_call_service),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    on_call_type: Optional[str] = Query(None, alias="type"),
):
    """Per-assignee schedule summaries for the window"""
    return service.individual_report(to_wall_clock(start_date), to_wall_clock(end_date), on_call_type)


@router.get("/{schedule_id}", response_model=OnCallResponse)
async def get_schedule(
    schedule_id: str,
    service: OnCallService = Depends(get_on_call_service),
):
    return to_response(service.get_schedule(schedule_id), datetime.now())


@router.patch("/{schedule_id}", response_model=OnCallResponse)
async def update_schedule(
    schedule_id: str,
    data: OnCallUpdate,
    service: OnCallService = Depends(get_on_call_service),
):
    """Update an on-call assignment"""
    schedule = service.update_schedule(schedule_id, data)
    return to_response(schedule, datetime.now())


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: str,
    service: OnCallService = Depends(get_on_call_service),
    deleted_by: Optional[str] = Query(None, alias="deletedBy"),
):
    """Soft-delete an on-call assignment"""
    return service.delete_schedule(schedule_id, deleted_by)
