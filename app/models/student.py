"""Student 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.utils.status_machine import StudentStatus


class Student(Base):
    __tablename__ = "students"

    student_id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_number = Column(String(20), unique=True, nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True)
    phone = Column(String(15), unique=True, nullable=False)
    date_of_birth = Column(Date)
    address = Column(Text)
    batch_id = Column(Integer, ForeignKey("batches.batch_id"), nullable=True)
    status = Column(String(20), nullable=False, default=StudentStatus.ACTIVE.value)
    enrollment_date = Column(Date, nullable=False)
    lead_id = Column(Integer, ForeignKey("leads.lead_id"), nullable=True)
    graduation_date = Column(Date)
    final_grade = Column(String(5))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    batch = relationship("Batch", back_populates="students")
    lead = relationship("Lead", back_populates="converted_students")
    placements = relationship("Placement", back_populates="student", cascade="all, delete-orphan")
    status_history = relationship(
        "StudentStatusHistory",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="StudentStatusHistory.history_id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StudentStatusHistory(Base):
    __tablename__ = "student_status_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False)
    status = Column(String(20), nullable=False)
    changed_at = Column(DateTime, nullable=False)
    notes = Column(Text)

    student = relationship("Student", back_populates="status_history")


class EnrollmentSequence(Base):
    """수강 번호 접두어(ENR<연도>)별 마지막 순번. 조건부 UPDATE로만 증가시킨다."""

    __tablename__ = "enrollment_sequences"

    prefix = Column(String(20), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
