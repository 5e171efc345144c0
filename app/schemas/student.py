"""Student 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from app.utils.status_machine import StudentStatus


class StudentCreate(BaseModel):
    first_name: str
    last_name: str
    phone: str
    enrollment_date: date
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    batch_id: Optional[int] = None


class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    batch_id: Optional[int] = None
    status: Optional[StudentStatus] = None


class StudentBatchAssign(BaseModel):
    batch_id: int


class StudentStatusUpdate(BaseModel):
    status: StudentStatus
    notes: Optional[str] = None


class StudentGraduate(BaseModel):
    final_grade: str


class StatusHistoryOut(BaseModel):
    status: StudentStatus
    changed_at: datetime
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class StudentOut(BaseModel):
    student_id: int
    enrollment_number: str
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    phone: str
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    batch_id: Optional[int] = None
    lead_id: Optional[int] = None
    status: StudentStatus
    enrollment_date: date
    graduation_date: Optional[date] = None
    final_grade: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StudentDetailOut(StudentOut):
    status_history: List[StatusHistoryOut] = []
