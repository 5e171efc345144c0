from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.utils.status_machine import BatchStatus

ENROLLABLE_STATUSES = (BatchStatus.PLANNED.value, BatchStatus.ACTIVE.value)


class Batch(Base):
    __tablename__ = "batches"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_batches_capacity_min"),
        CheckConstraint("current_enrollment >= 0", name="ck_batches_enrollment_min"),
        CheckConstraint("current_enrollment <= capacity", name="ck_batches_enrollment_capacity"),
    )

    batch_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.course_id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    capacity = Column(Integer, nullable=False)
    current_enrollment = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=BatchStatus.PLANNED.value)  # PLANNED/ACTIVE/COMPLETED/CANCELLED
    instructor_id = Column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    course = relationship("Course", back_populates="batches")
    instructor = relationship("Employee", back_populates="instructed_batches")
    students = relationship("Student", back_populates="batch")

    @property
    def available_slots(self) -> int:
        return self.capacity - self.current_enrollment

    @property
    def has_available_slots(self) -> bool:
        return self.current_enrollment < self.capacity

    @property
    def utilization_percentage(self) -> float:
        return round(self.current_enrollment / self.capacity * 100, 2)

    @property
    def accepts_enrollment(self) -> bool:
        return self.status in ENROLLABLE_STATUSES
