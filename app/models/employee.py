"""Employee 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Integer, primary_key=True, autoincrement=True)
    employee_code = Column(String(20), unique=True, nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100))
    phone = Column(String(15))
    department = Column(String(100))
    role = Column(String(20), nullable=False)  # ADMIN/COUNSELLOR/FACULTY/PLACEMENT_OFFICER/OPERATIONS
    hire_date = Column(Date)
    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE/INACTIVE/TERMINATED
    created_at = Column(DateTime, server_default=func.now())

    instructed_batches = relationship("Batch", back_populates="instructor")
    assigned_leads = relationship("Lead", back_populates="assigned_counsellor")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
