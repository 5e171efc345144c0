"""Batches 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.batch import (
    BatchAvailabilityOut,
    BatchCapacityUpdate,
    BatchCreate,
    BatchOut,
    BatchStatusUpdate,
    BatchUpdate,
)
from app.services import batch_service
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.utils.permissions import ADMIN_ONLY, BATCH_AVAILABILITY, BATCH_READ, BATCH_WRITE
from app.utils.status_machine import BatchStatus

router = APIRouter(prefix="/api/batches", tags=["batches"])


@router.get("", response_model=List[BatchOut])
def list_batches(
    status: Optional[BatchStatus] = None,
    course_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_READ)),
):
    return batch_service.get_batches(db, status=status, course_id=course_id)


@router.post("", response_model=BatchOut)
def create_batch(
    data: BatchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.create_batch(db, data)


@router.get("/{batch_id}", response_model=BatchOut)
def get_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_READ)),
):
    return batch_service.get_batch(db, batch_id)


@router.put("/{batch_id}", response_model=BatchOut)
def update_batch(
    batch_id: int,
    data: BatchUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.update_batch(db, batch_id, data)


@router.put("/{batch_id}/capacity", response_model=BatchOut)
def update_capacity(
    batch_id: int,
    data: BatchCapacityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.update_capacity(db, batch_id, data.capacity)


@router.put("/{batch_id}/status", response_model=BatchOut)
def update_status(
    batch_id: int,
    data: BatchStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.update_batch_status(db, batch_id, data.status)


@router.post("/{batch_id}/enrollment/increment", response_model=BatchOut)
def increment_enrollment(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.increment_enrollment(db, batch_id)


@router.post("/{batch_id}/enrollment/decrement", response_model=BatchOut)
def decrement_enrollment(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_WRITE)),
):
    return batch_service.decrement_enrollment(db, batch_id)


@router.get("/{batch_id}/availability", response_model=BatchAvailabilityOut)
def get_availability(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_AVAILABILITY)),
):
    return batch_service.get_availability(db, batch_id)


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ONLY)),
):
    batch_service.delete_batch(db, batch_id)
    return {"message": "삭제되었습니다."}
