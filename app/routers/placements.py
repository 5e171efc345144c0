"""Placements 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.placement import PlacementCreate, PlacementOut, PlacementStatusUpdate, PlacementUpdate
from app.services import placement_service
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.utils.permissions import ADMIN_ONLY, PLACEMENT_ACCESS
from app.utils.status_machine import PlacementStatus

router = APIRouter(prefix="/api/placements", tags=["placements"])


@router.get("", response_model=List[PlacementOut])
def list_placements(
    student_id: Optional[int] = None,
    status: Optional[PlacementStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return placement_service.get_placements(db, student_id=student_id, status=status)


@router.post("", response_model=PlacementOut)
def create_placement(
    data: PlacementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return placement_service.create_placement(db, data)


@router.get("/{placement_id}", response_model=PlacementOut)
def get_placement(
    placement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return placement_service.get_placement(db, placement_id)


@router.put("/{placement_id}", response_model=PlacementOut)
def update_placement(
    placement_id: int,
    data: PlacementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return placement_service.update_placement(db, placement_id, data)


@router.put("/{placement_id}/status", response_model=PlacementOut)
def update_status(
    placement_id: int,
    data: PlacementStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return placement_service.update_placement_status(db, placement_id, data.status, data.end_date)


@router.delete("/{placement_id}")
def delete_placement(
    placement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ADMIN_ONLY)),
):
    placement_service.delete_placement(db, placement_id)
    return {"message": "삭제되었습니다."}
