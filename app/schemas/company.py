"""Company 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import date


class CompanyCreate(BaseModel):
    name: str
    industry: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    partnership_date: Optional[date] = None
    status: str = "ACTIVE"


class CompanyOut(CompanyCreate):
    company_id: int

    model_config = {"from_attributes": True}
