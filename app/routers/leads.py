"""Leads 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.lead import LeadConversionRequest, LeadCreate, LeadFollowUpCreate, LeadOut, LeadUpdate
from app.schemas.student import StudentOut
from app.services import lead_service
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.utils.permissions import LEAD_ACCESS
from app.utils.status_machine import LeadStatus

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.get("", response_model=List[LeadOut])
def list_leads(
    status: Optional[LeadStatus] = None,
    counsellor_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.get_leads(db, status=status, counsellor_id=counsellor_id)


@router.post("", response_model=LeadOut)
def create_lead(
    data: LeadCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.create_lead(db, data)


@router.get("/follow-ups/due", response_model=List[LeadOut])
def list_leads_requiring_follow_up(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.get_leads_requiring_follow_up(db)


@router.get("/follow-ups/unscheduled", response_model=List[LeadOut])
def list_leads_without_follow_up(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.get_leads_without_follow_up(db)


@router.get("/{lead_id}", response_model=LeadOut)
def get_lead(
    lead_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.get_lead(db, lead_id)


@router.put("/{lead_id}", response_model=LeadOut)
def update_lead(
    lead_id: int,
    data: LeadUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.update_lead(db, lead_id, data)


@router.post("/{lead_id}/follow-ups", response_model=LeadOut)
def add_follow_up(
    lead_id: int,
    data: LeadFollowUpCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.add_follow_up(db, lead_id, data)


@router.post("/{lead_id}/convert", response_model=StudentOut)
def convert_lead(
    lead_id: int,
    data: LeadConversionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    return lead_service.convert_lead_to_student(db, lead_id, data)


@router.delete("/{lead_id}")
def delete_lead(
    lead_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*LEAD_ACCESS)),
):
    lead_service.delete_lead(db, lead_id)
    return {"message": "삭제되었습니다."}
