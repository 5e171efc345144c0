"""Placement Service 도메인 서비스 레이어입니다. 취업 기록 생성/수정과 종료 상태 전이를 담당합니다."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session
from app.database import transaction
from app.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.models.placement import Placement
from app.schemas.placement import PlacementCreate, PlacementUpdate
from app.services import company_service, student_service
from app.utils.status_machine import PlacementStatus, coerce, ensure_transition

logger = logging.getLogger(__name__)

MAX_PROBATION_MONTHS = 24


def get_placement(db: Session, placement_id: int) -> Placement:
    placement = db.query(Placement).filter(Placement.placement_id == placement_id).first()
    if not placement:
        raise ResourceNotFoundError("Placement", placement_id)
    return placement


def get_placements(
    db: Session,
    student_id: Optional[int] = None,
    status: Optional[PlacementStatus] = None,
) -> List[Placement]:
    query = db.query(Placement)
    if student_id is not None:
        query = query.filter(Placement.student_id == student_id)
    if status is not None:
        query = query.filter(Placement.status == coerce(PlacementStatus, status).value)
    return query.order_by(Placement.placement_date.desc(), Placement.placement_id.desc()).all()


def _validate_terms(position, salary, probation_period_months) -> None:
    if not (position or "").strip():
        raise ValidationError("직무는 필수입니다.", field="position")
    if salary is not None and salary <= 0:
        raise ValidationError("급여는 0보다 커야 합니다.", field="salary")
    if probation_period_months is not None and not 0 <= probation_period_months <= MAX_PROBATION_MONTHS:
        raise ValidationError(
            f"수습 기간은 0~{MAX_PROBATION_MONTHS}개월이어야 합니다.",
            field="probation_period_months",
        )


def create_placement(db: Session, data: PlacementCreate) -> Placement:
    student = student_service.get_student(db, data.student_id)
    company = company_service.get_company(db, data.company_id)
    if company.status == "BLACKLISTED":
        raise ValidationError("블랙리스트 회사에는 취업 기록을 등록할 수 없습니다.", field="company_id")
    _validate_terms(data.position, data.salary, data.probation_period_months)

    payload = data.model_dump()
    payload["position"] = payload["position"].strip()
    placement = Placement(**payload, status=PlacementStatus.PLACED.value)
    with transaction(db):
        db.add(placement)
    db.refresh(placement)
    logger.info(
        "[placement] created placement_id=%s student=%s company=%s",
        placement.placement_id, student.enrollment_number, company.name,
    )
    return placement


def update_placement(db: Session, placement_id: int, data: PlacementUpdate) -> Placement:
    """PLACED 상태의 취업 기록 조건을 수정한다. 상태 변경이 함께 오면 수정 후 상태 전이를 적용한다."""
    placement = get_placement(db, placement_id)
    if placement.status != PlacementStatus.PLACED.value:
        raise ConflictError(
            f"{placement.status} 상태로 종료된 취업 기록은 수정할 수 없습니다.",
            details={"placement_id": placement_id, "status": placement.status},
        )

    payload = data.model_dump(exclude_unset=True)
    status = payload.pop("status", None)
    end_date = payload.pop("end_date", None)
    if "position" in payload:
        payload["position"] = (payload["position"] or "").strip()
    _validate_terms(
        payload.get("position", placement.position),
        payload.get("salary", placement.salary),
        payload.get("probation_period_months", placement.probation_period_months),
    )

    with transaction(db):
        for field, value in payload.items():
            setattr(placement, field, value)
    db.refresh(placement)

    if status is not None:
        return update_placement_status(db, placement_id, status, end_date)
    return placement


def update_placement_status(
    db: Session,
    placement_id: int,
    status: PlacementStatus,
    end_date: Optional[date] = None,
) -> Placement:
    """PLACED에서 종료 상태로 전이하며 종료일을 기록한다. 종료일이 없으면 오늘 날짜를 쓴다."""
    placement = get_placement(db, placement_id)
    target = coerce(PlacementStatus, status)
    if target.value == placement.status:
        return placement

    with transaction(db):
        placement.status = ensure_transition(PlacementStatus, placement.status, target, "취업").value
        placement.end_date = end_date or date.today()
    db.refresh(placement)
    logger.info("[placement] placement_id=%s -> %s", placement_id, placement.status)
    return placement


def delete_placement(db: Session, placement_id: int) -> None:
    placement = get_placement(db, placement_id)
    with transaction(db):
        db.delete(placement)
