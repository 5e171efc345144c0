"""Course Service 도메인 서비스 레이어입니다. 배치가 참조하는 과정 기준 정보를 관리합니다."""

from typing import List
from sqlalchemy.orm import Session
from app.database import transaction
from app.exceptions import DuplicateResourceError, ResourceNotFoundError, ValidationError
from app.models.course import Course
from app.schemas.course import CourseCreate

MIN_DURATION_MONTHS = 1
MAX_DURATION_MONTHS = 60


def get_course(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.course_id == course_id).first()
    if not course:
        raise ResourceNotFoundError("Course", course_id)
    return course


def get_courses(db: Session) -> List[Course]:
    return db.query(Course).order_by(Course.name).all()


def create_course(db: Session, data: CourseCreate) -> Course:
    if not MIN_DURATION_MONTHS <= data.duration_months <= MAX_DURATION_MONTHS:
        raise ValidationError(
            f"과정 기간은 {MIN_DURATION_MONTHS}~{MAX_DURATION_MONTHS}개월이어야 합니다.",
            field="duration_months",
        )
    if data.fees <= 0:
        raise ValidationError("수강료는 0보다 커야 합니다.", field="fees")
    if db.query(Course).filter(Course.name == data.name).first():
        raise DuplicateResourceError("Course", "name", data.name)

    course = Course(**data.model_dump())
    with transaction(db):
        db.add(course)
    db.refresh(course)
    return course
