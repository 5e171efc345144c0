"""Employee 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import date


class EmployeeCreate(BaseModel):
    employee_code: str
    first_name: str
    last_name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None


class EmployeeOut(EmployeeCreate):
    employee_id: int
    status: str
    full_name: str

    model_config = {"from_attributes": True}
