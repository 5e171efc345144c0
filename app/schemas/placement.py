"""Placement 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from decimal import Decimal
from pydantic import BaseModel
from typing import Optional
from datetime import date
from app.utils.status_machine import PlacementStatus


class PlacementCreate(BaseModel):
    student_id: int
    company_id: int
    position: str
    placement_date: date
    salary: Optional[Decimal] = None
    job_type: Optional[str] = None
    employment_type: Optional[str] = None
    work_location: Optional[str] = None
    probation_period_months: Optional[int] = None
    joining_date: Optional[date] = None
    notes: Optional[str] = None


class PlacementUpdate(BaseModel):
    position: Optional[str] = None
    salary: Optional[Decimal] = None
    job_type: Optional[str] = None
    employment_type: Optional[str] = None
    work_location: Optional[str] = None
    probation_period_months: Optional[int] = None
    joining_date: Optional[date] = None
    notes: Optional[str] = None
    status: Optional[PlacementStatus] = None
    end_date: Optional[date] = None


class PlacementStatusUpdate(BaseModel):
    status: PlacementStatus
    end_date: Optional[date] = None


class PlacementOut(PlacementCreate):
    placement_id: int
    status: PlacementStatus
    end_date: Optional[date] = None
    is_active: bool
    is_in_probation: bool

    model_config = {"from_attributes": True}
