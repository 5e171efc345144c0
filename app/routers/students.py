"""Students 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.student import (
    StatusHistoryOut,
    StudentBatchAssign,
    StudentCreate,
    StudentDetailOut,
    StudentGraduate,
    StudentOut,
    StudentStatusUpdate,
    StudentUpdate,
)
from app.services import student_service
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.utils.permissions import ADMIN_ONLY, STUDENT_READ, STUDENT_WRITE
from app.utils.status_machine import StudentStatus

router = APIRouter(prefix="/api/students", tags=["students"])


@router.get("", response_model=List[StudentOut])
def list_students(
    status: Optional[StudentStatus] = None,
    batch_id: Optional[int] = None,
    without_batch: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_READ)),
):
    return student_service.get_students(db, status=status, batch_id=batch_id, without_batch=without_batch)


@router.post("", response_model=StudentOut)
def create_student(
    data: StudentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.create_student(db, data)


@router.get("/{student_id}", response_model=StudentDetailOut)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_READ)),
):
    return student_service.get_student(db, student_id)


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: int,
    data: StudentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.update_student(db, student_id, data)


@router.put("/{student_id}/batch", response_model=StudentOut)
def assign_to_batch(
    student_id: int,
    data: StudentBatchAssign,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.assign_to_batch(db, student_id, data.batch_id)


@router.delete("/{student_id}/batch", response_model=StudentOut)
def remove_from_batch(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.remove_from_batch(db, student_id)


@router.put("/{student_id}/status", response_model=StudentOut)
def update_status(
    student_id: int,
    data: StudentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.update_student_status(db, student_id, data.status, data.notes)


@router.post("/{student_id}/graduate", response_model=StudentOut)
def graduate_student(
    student_id: int,
    data: StudentGraduate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_WRITE)),
):
    return student_service.graduate_student(db, student_id, data.final_grade)


@router.get("/{student_id}/status-history", response_model=List[StatusHistoryOut])
def get_status_history(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*STUDENT_READ)),
):
    return student_service.get_status_history(db, student_id)


@router.delete("/{student_id}")
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ONLY)),
):
    student_service.delete_student(db, student_id)
    return {"message": "삭제되었습니다."}
