"""Placement 도메인의 SQLAlchemy 모델 정의입니다."""

from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.utils.helpers import add_months
from app.utils.status_machine import PlacementStatus


class Placement(Base):
    __tablename__ = "placements"

    placement_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.company_id"), nullable=False)
    position = Column(String(100), nullable=False)
    salary = Column(Numeric(10, 2))
    placement_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=PlacementStatus.PLACED.value)
    job_type = Column(String(20))  # FULL_TIME/PART_TIME/CONTRACT/INTERNSHIP/FREELANCE
    employment_type = Column(String(20))  # PERMANENT/TEMPORARY/PROBATION/CONSULTANT
    work_location = Column(String(100))
    probation_period_months = Column(Integer)
    joining_date = Column(Date)
    end_date = Column(Date)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    student = relationship("Student", back_populates="placements")
    company = relationship("Company", back_populates="placements")

    def active_on(self, today: date) -> bool:
        if self.status != PlacementStatus.PLACED.value:
            return False
        return self.end_date is None or self.end_date > today

    def in_probation_on(self, today: date) -> bool:
        if self.joining_date is None or self.probation_period_months is None:
            return False
        return self.joining_date <= today <= self.probation_end_date

    @property
    def probation_end_date(self) -> Optional[date]:
        if self.joining_date is None or self.probation_period_months is None:
            return None
        return add_months(self.joining_date, self.probation_period_months)

    @property
    def is_active(self) -> bool:
        return self.active_on(date.today())

    @property
    def is_in_probation(self) -> bool:
        return self.in_probation_on(date.today())
