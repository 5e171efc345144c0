"""Companies 기능 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.company import CompanyCreate, CompanyOut
from app.services import company_service
from app.middleware.auth_middleware import get_current_user, require_roles
from app.models.user import User
from app.utils.permissions import PLACEMENT_ACCESS

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("", response_model=List[CompanyOut])
def list_companies(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return company_service.get_companies(db)


@router.post("", response_model=CompanyOut)
def create_company(
    data: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*PLACEMENT_ACCESS)),
):
    return company_service.create_company(db, data)


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return company_service.get_company(db, company_id)
