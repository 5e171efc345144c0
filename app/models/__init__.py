"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.employee import Employee
from app.models.course import Course
from app.models.company import Company
from app.models.batch import Batch
from app.models.lead import Lead, LeadFollowUp
from app.models.student import EnrollmentSequence, Student, StudentStatusHistory
from app.models.placement import Placement

__all__ = [
    "User",
    "Employee",
    "Course",
    "Company",
    "Batch",
    "Lead", "LeadFollowUp",
    "Student", "StudentStatusHistory",
    "Placement",
]
