"""Lead 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from app.utils.status_machine import LeadStatus


class LeadCreate(BaseModel):
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None
    course_interest: Optional[str] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    next_follow_up_date: Optional[datetime] = None
    assigned_counsellor_id: Optional[int] = None


class LeadUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    course_interest: Optional[str] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[LeadStatus] = None
    next_follow_up_date: Optional[datetime] = None
    assigned_counsellor_id: Optional[int] = None


class LeadFollowUpCreate(BaseModel):
    notes: str
    next_follow_up_date: Optional[datetime] = None
    next_action: Optional[str] = None


class LeadConversionRequest(BaseModel):
    enrollment_date: date
    batch_id: Optional[int] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None


class FollowUpOut(BaseModel):
    follow_up_date: datetime
    notes: str
    next_action: Optional[str] = None

    model_config = {"from_attributes": True}


class LeadOut(BaseModel):
    lead_id: int
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    phone: str
    course_interest: Optional[str] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    status: LeadStatus
    assigned_counsellor_id: Optional[int] = None
    next_follow_up_date: Optional[datetime] = None
    converted_date: Optional[datetime] = None
    follow_ups: List[FollowUpOut] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
