"""Course 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from decimal import Decimal
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CourseCreate(BaseModel):
    name: str
    description: Optional[str] = None
    duration_months: int
    fees: Decimal


class CourseOut(CourseCreate):
    course_id: int
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
