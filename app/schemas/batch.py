"""Batch 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime
from app.utils.status_machine import BatchStatus


class BatchCreate(BaseModel):
    name: str
    course_id: int
    start_date: date
    capacity: int
    instructor_id: Optional[int] = None


class BatchUpdate(BaseModel):
    name: Optional[str] = None
    course_id: Optional[int] = None
    start_date: Optional[date] = None
    capacity: Optional[int] = None
    status: Optional[BatchStatus] = None
    instructor_id: Optional[int] = None


class BatchCapacityUpdate(BaseModel):
    capacity: int


class BatchStatusUpdate(BaseModel):
    status: BatchStatus


class BatchOut(BaseModel):
    batch_id: int
    name: str
    course_id: int
    start_date: date
    end_date: Optional[date] = None
    capacity: int
    current_enrollment: int
    available_slots: int
    status: BatchStatus
    instructor_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BatchAvailabilityOut(BaseModel):
    batch_id: int
    name: str
    status: BatchStatus
    capacity: int
    current_enrollment: int
    available_slots: int
    has_available_slots: bool
    utilization_percentage: float

    model_config = {"from_attributes": True}
