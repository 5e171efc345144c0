"""Lead Service 도메인 서비스 레이어입니다. 리드 상태 관리, 팔로업 기록, 수강생 전환 흐름을 담당합니다."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session
from app.database import transaction
from app.exceptions import ConflictError, DuplicateResourceError, ResourceNotFoundError, StateError, ValidationError
from app.models.lead import Lead, LeadFollowUp
from app.models.student import Student
from app.schemas.lead import LeadConversionRequest, LeadCreate, LeadFollowUpCreate, LeadUpdate
from app.services import batch_service, employee_service, student_service
from app.utils.helpers import normalize_optional_text, utcnow
from app.utils.permissions import COUNSELLOR_EMPLOYEE_ROLES
from app.utils.status_machine import LeadStatus, coerce, ensure_transition, is_terminal

logger = logging.getLogger(__name__)


def get_lead(db: Session, lead_id: int) -> Lead:
    lead = db.query(Lead).filter(Lead.lead_id == lead_id).first()
    if not lead:
        raise ResourceNotFoundError("Lead", lead_id)
    return lead


def get_leads(
    db: Session,
    status: Optional[LeadStatus] = None,
    counsellor_id: Optional[int] = None,
) -> List[Lead]:
    query = db.query(Lead)
    if status is not None:
        query = query.filter(Lead.status == coerce(LeadStatus, status).value)
    if counsellor_id is not None:
        query = query.filter(Lead.assigned_counsellor_id == counsellor_id)
    return query.order_by(Lead.created_at.desc(), Lead.lead_id.desc()).all()


OPEN_LEAD_STATUSES = tuple(s.value for s in LeadStatus if not is_terminal(s))


def get_leads_requiring_follow_up(db: Session, now: Optional[datetime] = None) -> List[Lead]:
    """예정된 팔로업 시각이 지난 진행 중 리드. 가장 오래 밀린 리드부터 반환한다."""
    query = db.query(Lead).filter(
        Lead.status.in_(OPEN_LEAD_STATUSES),
        Lead.next_follow_up_date.isnot(None),
        Lead.next_follow_up_date <= (now or utcnow()),
    )
    return query.order_by(Lead.next_follow_up_date, Lead.lead_id).all()


def get_leads_without_follow_up(db: Session) -> List[Lead]:
    """다음 팔로업 일정이 잡혀 있지 않은 진행 중 리드."""
    return (
        db.query(Lead)
        .filter(Lead.status.in_(OPEN_LEAD_STATUSES), Lead.next_follow_up_date.is_(None))
        .order_by(Lead.created_at, Lead.lead_id)
        .all()
    )


def _ensure_not_converted(lead: Lead, action: str) -> None:
    if lead.is_converted:
        raise ConflictError(
            f"수강생으로 전환된 리드는 {action}할 수 없습니다.",
            details={"lead_id": lead.lead_id, "status": lead.status},
        )


def _ensure_unique_contact(
    db: Session,
    email: Optional[str],
    phone: Optional[str],
    exclude_lead_id: Optional[int] = None,
) -> None:
    if email:
        query = db.query(Lead.lead_id).filter(Lead.email == email)
        if exclude_lead_id is not None:
            query = query.filter(Lead.lead_id != exclude_lead_id)
        if query.first():
            raise DuplicateResourceError("Lead", "email", email)
    if phone:
        query = db.query(Lead.lead_id).filter(Lead.phone == phone)
        if exclude_lead_id is not None:
            query = query.filter(Lead.lead_id != exclude_lead_id)
        if query.first():
            raise DuplicateResourceError("Lead", "phone", phone)


def _resolve_counsellor(db: Session, employee_id: Optional[int]) -> Optional[int]:
    if employee_id is None:
        return None
    employee = employee_service.get_employee(db, employee_id)
    if employee.role not in COUNSELLOR_EMPLOYEE_ROLES:
        raise ValidationError("리드 담당자는 COUNSELLOR 또는 ADMIN 직원이어야 합니다.", field="assigned_counsellor_id")
    return employee.employee_id


def create_lead(db: Session, data: LeadCreate) -> Lead:
    payload = data.model_dump()
    payload["email"] = normalize_optional_text(payload.get("email"))
    for field in ("first_name", "last_name", "phone"):
        payload[field] = (payload[field] or "").strip()
        if not payload[field]:
            raise ValidationError(f"{field}은(는) 필수입니다.", field=field)
    _ensure_unique_contact(db, payload["email"], payload["phone"])
    payload["assigned_counsellor_id"] = _resolve_counsellor(db, payload.get("assigned_counsellor_id"))

    lead = Lead(**payload, status=LeadStatus.NEW.value)
    with transaction(db):
        db.add(lead)
    db.refresh(lead)
    return lead


def update_lead(db: Session, lead_id: int, data: LeadUpdate) -> Lead:
    lead = get_lead(db, lead_id)
    _ensure_not_converted(lead, "수정")
    payload = data.model_dump(exclude_unset=True)
    if "email" in payload:
        payload["email"] = normalize_optional_text(payload["email"])

    with transaction(db):
        _ensure_unique_contact(db, payload.get("email"), payload.get("phone"), exclude_lead_id=lead.lead_id)

        status = payload.pop("status", None)
        if status is not None:
            target = coerce(LeadStatus, status)
            if target is LeadStatus.CONVERTED:
                raise StateError(
                    "리드는 수강생 전환 요청으로만 CONVERTED 상태가 될 수 있습니다.",
                    current_state=lead.status,
                    requested_state=target,
                )
            if target.value != lead.status:
                lead.status = ensure_transition(LeadStatus, lead.status, target, "리드").value

        if "assigned_counsellor_id" in payload:
            lead.assigned_counsellor_id = _resolve_counsellor(db, payload.pop("assigned_counsellor_id"))

        for field in ("first_name", "last_name", "phone"):
            if field in payload:
                value = (payload.pop(field) or "").strip()
                if not value:
                    raise ValidationError(f"{field}은(는) 비워둘 수 없습니다.", field=field)
                setattr(lead, field, value)
        for field, value in payload.items():
            setattr(lead, field, value)

    db.refresh(lead)
    return lead


def add_follow_up(db: Session, lead_id: int, data: LeadFollowUpCreate) -> Lead:
    lead = get_lead(db, lead_id)
    _ensure_not_converted(lead, "팔로업 기록")
    notes = (data.notes or "").strip()
    if not notes:
        raise ValidationError("팔로업 내용은 필수입니다.", field="notes")

    next_action = normalize_optional_text(data.next_action)
    if next_action is None:
        next_action = (
            f"Follow up on {data.next_follow_up_date.isoformat()}"
            if data.next_follow_up_date
            else "No further action"
        )

    with transaction(db):
        lead.follow_ups.append(
            LeadFollowUp(follow_up_date=utcnow(), notes=notes, next_action=next_action)
        )
        if data.next_follow_up_date is not None:
            lead.next_follow_up_date = data.next_follow_up_date
        # 첫 팔로업은 NEW 리드를 CONTACTED로 옮긴다. 종료 상태 리드는 기록만 남긴다.
        if lead.status == LeadStatus.NEW.value:
            lead.status = LeadStatus.CONTACTED.value

    db.refresh(lead)
    return lead


def convert_lead_to_student(db: Session, lead_id: int, data: LeadConversionRequest) -> Student:
    """리드를 수강생으로 전환한다.

    수강생 생성, 배치 좌석 확보, 리드 CONVERTED 처리는 하나의 트랜잭션이다.
    배치 정원 초과 등 어느 단계에서든 실패하면 전부 롤백되어 리드 상태와 배치 등록 인원이 그대로 남는다.
    """
    lead = get_lead(db, lead_id)
    _ensure_not_converted(lead, "다시 전환")
    ensure_transition(LeadStatus, lead.status, LeadStatus.CONVERTED, "리드")

    with transaction(db):
        # 동시 전환 요청 중 하나만 통과하도록 수강생을 만들기 전에 조건부 UPDATE로 리드를 먼저 잡는다.
        converted = (
            db.query(Lead)
            .filter(Lead.lead_id == lead_id, Lead.status == lead.status)
            .update(
                {Lead.status: LeadStatus.CONVERTED.value, Lead.converted_date: utcnow()},
                synchronize_session=False,
            )
        )
        if not converted:
            raise ConflictError("다른 요청이 이미 이 리드의 상태를 변경했습니다.", details={"lead_id": lead_id})

        student = student_service.build_student(
            db,
            first_name=lead.first_name,
            last_name=lead.last_name,
            phone=lead.phone,
            email=lead.email,
            enrollment_date=data.enrollment_date,
            date_of_birth=data.date_of_birth,
            address=data.address,
        )
        student.lead = lead
        if data.batch_id is not None:
            student.batch = batch_service.reserve_slot(db, data.batch_id)
        db.add(student)

    db.refresh(student)
    logger.info(
        "[lead] converted lead_id=%s -> student %s batch_id=%s",
        lead_id, student.enrollment_number, student.batch_id,
    )
    return student


def delete_lead(db: Session, lead_id: int) -> None:
    lead = get_lead(db, lead_id)
    _ensure_not_converted(lead, "삭제")
    with transaction(db):
        db.delete(lead)
