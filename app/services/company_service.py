"""Company Service 도메인 서비스 레이어입니다."""

from typing import List
from sqlalchemy.orm import Session
from app.database import transaction
from app.exceptions import DuplicateResourceError, ResourceNotFoundError, ValidationError
from app.models.company import Company
from app.schemas.company import CompanyCreate

COMPANY_STATUSES = {"ACTIVE", "INACTIVE", "BLACKLISTED"}


def get_company(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.company_id == company_id).first()
    if not company:
        raise ResourceNotFoundError("Company", company_id)
    return company


def get_companies(db: Session) -> List[Company]:
    return db.query(Company).order_by(Company.name).all()


def create_company(db: Session, data: CompanyCreate) -> Company:
    payload = data.model_dump()
    payload["status"] = str(payload["status"]).strip().upper()
    if payload["status"] not in COMPANY_STATUSES:
        raise ValidationError(f"알 수 없는 회사 상태입니다: {data.status}", field="status")
    if db.query(Company).filter(Company.name == data.name).first():
        raise DuplicateResourceError("Company", "name", data.name)

    company = Company(**payload)
    with transaction(db):
        db.add(company)
    db.refresh(company)
    return company
