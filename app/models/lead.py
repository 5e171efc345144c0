"""Lead 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.utils.status_machine import LeadStatus


class Lead(Base):
    __tablename__ = "leads"

    lead_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True)
    phone = Column(String(15), unique=True, nullable=False)
    course_interest = Column(String(100))
    source = Column(String(50))
    status = Column(String(20), nullable=False, default=LeadStatus.NEW.value)
    assigned_counsellor_id = Column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    converted_date = Column(DateTime)
    notes = Column(Text)
    next_follow_up_date = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assigned_counsellor = relationship("Employee", back_populates="assigned_leads")
    converted_students = relationship("Student", back_populates="lead")
    follow_ups = relationship(
        "LeadFollowUp",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="LeadFollowUp.follow_up_id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_converted(self) -> bool:
        return self.status == LeadStatus.CONVERTED.value


class LeadFollowUp(Base):
    __tablename__ = "lead_follow_ups"

    follow_up_id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.lead_id"), nullable=False)
    follow_up_date = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=False)
    next_action = Column(String(200))

    lead = relationship("Lead", back_populates="follow_ups")
