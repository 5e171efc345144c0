"""Student Service 도메인 서비스 레이어입니다. 수강생 등록, 배치 배정/이동, 상태 전이를 담당합니다."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session
from app.config import settings
from app.database import transaction
from app.exceptions import DuplicateResourceError, ResourceNotFoundError, ValidationError
from app.models.student import EnrollmentSequence, Student, StudentStatusHistory
from app.schemas.student import StudentCreate, StudentUpdate
from app.services import batch_service
from app.utils.helpers import normalize_optional_text, utcnow
from app.utils.status_machine import StudentStatus, coerce, ensure_transition

logger = logging.getLogger(__name__)


def get_student(db: Session, student_id: int) -> Student:
    student = db.query(Student).filter(Student.student_id == student_id).first()
    if not student:
        raise ResourceNotFoundError("Student", student_id)
    return student


def get_students(
    db: Session,
    status: Optional[StudentStatus] = None,
    batch_id: Optional[int] = None,
    without_batch: bool = False,
) -> List[Student]:
    query = db.query(Student)
    if status is not None:
        query = query.filter(Student.status == coerce(StudentStatus, status).value)
    if batch_id is not None:
        query = query.filter(Student.batch_id == batch_id)
    elif without_batch:
        query = query.filter(Student.batch_id.is_(None))
    return query.order_by(Student.enrollment_number).all()


def _max_existing_sequence(db: Session, prefix: str) -> int:
    rows = (
        db.query(Student.enrollment_number)
        .filter(Student.enrollment_number.like(f"{prefix}%"))
        .all()
    )
    max_sequence = 0
    for (number,) in rows:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            max_sequence = max(max_sequence, int(suffix))
    return max_sequence


def generate_enrollment_number(db: Session, today: Optional[date] = None) -> str:
    """ENR<연도><4자리 순번>. 연도별 카운터 행을 조건부 UPDATE로 올려 동시 요청에도 번호가 겹치지 않는다.

    커밋하지 않으므로 수강생 INSERT와 같은 트랜잭션 안에서 호출한다.
    """
    prefix = f"{settings.ENROLLMENT_NUMBER_PREFIX}{(today or date.today()).year}"
    updated = (
        db.query(EnrollmentSequence)
        .filter(EnrollmentSequence.prefix == prefix)
        .update({EnrollmentSequence.last_value: EnrollmentSequence.last_value + 1}, synchronize_session=False)
    )
    if not updated:
        # 해당 연도 첫 번호. 카운터 도입 전 데이터가 있으면 그 다음 번호부터 시작한다.
        db.add(EnrollmentSequence(prefix=prefix, last_value=_max_existing_sequence(db, prefix) + 1))
        db.flush()
    sequence = (
        db.query(EnrollmentSequence.last_value)
        .filter(EnrollmentSequence.prefix == prefix)
        .scalar()
    )
    return f"{prefix}{sequence:04d}"


def _ensure_unique_contact(
    db: Session,
    email: Optional[str],
    phone: Optional[str],
    exclude_student_id: Optional[int] = None,
) -> None:
    if email:
        query = db.query(Student.student_id).filter(Student.email == email)
        if exclude_student_id is not None:
            query = query.filter(Student.student_id != exclude_student_id)
        if query.first():
            raise DuplicateResourceError("Student", "email", email)
    if phone:
        query = db.query(Student.student_id).filter(Student.phone == phone)
        if exclude_student_id is not None:
            query = query.filter(Student.student_id != exclude_student_id)
        if query.first():
            raise DuplicateResourceError("Student", "phone", phone)


def _append_history(student: Student, status: str, notes: str) -> None:
    student.status_history.append(
        StudentStatusHistory(status=status, changed_at=utcnow(), notes=notes)
    )


def build_student(
    db: Session,
    *,
    first_name: str,
    last_name: str,
    phone: str,
    enrollment_date: date,
    email: Optional[str] = None,
    date_of_birth: Optional[date] = None,
    address: Optional[str] = None,
) -> Student:
    """검증을 마친 ACTIVE 수강생 객체를 만든다. 세션에 추가하거나 커밋하지 않는다."""
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    phone = (phone or "").strip()
    email = normalize_optional_text(email)
    if not first_name or not last_name:
        raise ValidationError("수강생 이름은 필수입니다.", field="first_name" if not first_name else "last_name")
    if not phone:
        raise ValidationError("연락처는 필수입니다.", field="phone")
    if enrollment_date is None:
        raise ValidationError("등록일은 필수입니다.", field="enrollment_date")
    if date_of_birth is not None and date_of_birth >= date.today():
        raise ValidationError("생년월일은 과거 날짜여야 합니다.", field="date_of_birth")
    _ensure_unique_contact(db, email, phone)

    student = Student(
        enrollment_number=generate_enrollment_number(db),
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        date_of_birth=date_of_birth,
        address=address,
        enrollment_date=enrollment_date,
        status=StudentStatus.ACTIVE.value,
    )
    _append_history(student, StudentStatus.ACTIVE.value, "Student enrolled")
    return student


def create_student(db: Session, data: StudentCreate) -> Student:
    with transaction(db):
        student = build_student(
            db,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            enrollment_date=data.enrollment_date,
            email=data.email,
            date_of_birth=data.date_of_birth,
            address=data.address,
        )
        if data.batch_id is not None:
            student.batch = batch_service.reserve_slot(db, data.batch_id)
        db.add(student)
    db.refresh(student)
    logger.info("[student] created %s batch_id=%s", student.enrollment_number, student.batch_id)
    return student


def _move_to_batch(db: Session, student: Student, batch_id: Optional[int]) -> None:
    """이전 배치 좌석을 반납하고 새 배치 좌석을 확보한다. 같은 배치면 아무것도 하지 않는다."""
    if student.batch_id == batch_id:
        return
    _release_current_slot(db, student)
    if batch_id is not None:
        student.batch = batch_service.reserve_slot(db, batch_id)
    else:
        student.batch = None
        student.batch_id = None


def _release_current_slot(db: Session, student: Student) -> None:
    # 배치 행이 이미 사라졌다면 반납할 좌석도 없다.
    if student.batch_id is not None and student.batch is not None:
        batch_service.release_slot(db, student.batch_id)


def _change_status(student: Student, status: StudentStatus, notes: Optional[str] = None) -> bool:
    target = coerce(StudentStatus, status)
    if target.value == student.status:
        return False
    if target is StudentStatus.GRADUATED:
        raise ValidationError(
            "졸업 처리는 최종 성적과 함께 graduate 요청으로만 가능합니다.",
            field="status",
        )
    previous = student.status
    student.status = ensure_transition(StudentStatus, student.status, target, "수강생").value
    _append_history(student, student.status, notes or f"Status changed from {previous} to {student.status}")
    return True


def update_student(db: Session, student_id: int, data: StudentUpdate) -> Student:
    student = get_student(db, student_id)
    payload = data.model_dump(exclude_unset=True)

    with transaction(db):
        if "email" in payload:
            payload["email"] = normalize_optional_text(payload["email"])
        _ensure_unique_contact(
            db,
            payload.get("email"),
            payload.get("phone"),
            exclude_student_id=student.student_id,
        )
        for field in ("first_name", "last_name", "phone"):
            if field in payload:
                value = (payload[field] or "").strip()
                if not value:
                    raise ValidationError(f"{field}은(는) 비워둘 수 없습니다.", field=field)
                setattr(student, field, value)
        for field in ("email", "date_of_birth", "address"):
            if field in payload:
                setattr(student, field, payload[field])

        if payload.get("status") is not None:
            _change_status(student, payload["status"])

        if payload.get("batch_id") is not None:
            _move_to_batch(db, student, payload["batch_id"])

    db.refresh(student)
    return student


def assign_to_batch(db: Session, student_id: int, batch_id: int) -> Student:
    student = get_student(db, student_id)
    previous = student.batch_id
    with transaction(db):
        _move_to_batch(db, student, batch_id)
    db.refresh(student)
    logger.info("[student] %s batch %s -> %s", student.enrollment_number, previous, student.batch_id)
    return student


def remove_from_batch(db: Session, student_id: int) -> Student:
    student = get_student(db, student_id)
    if student.batch_id is None:
        return student
    previous = student.batch_id
    with transaction(db):
        _move_to_batch(db, student, None)
    db.refresh(student)
    logger.info("[student] %s removed from batch %s", student.enrollment_number, previous)
    return student


def update_student_status(
    db: Session,
    student_id: int,
    status: StudentStatus,
    notes: Optional[str] = None,
) -> Student:
    student = get_student(db, student_id)
    with transaction(db):
        changed = _change_status(student, status, notes)
    db.refresh(student)
    if changed:
        logger.info("[student] %s status -> %s", student.enrollment_number, student.status)
    return student


def graduate_student(
    db: Session,
    student_id: int,
    final_grade: str,
    graduation_date: Optional[date] = None,
) -> Student:
    student = get_student(db, student_id)
    grade = (final_grade or "").strip()
    if not grade:
        raise ValidationError("졸업 시 최종 성적은 필수입니다.", field="final_grade")
    if len(grade) > 5:
        raise ValidationError("최종 성적은 5자를 넘을 수 없습니다.", field="final_grade")

    with transaction(db):
        student.status = ensure_transition(
            StudentStatus, student.status, StudentStatus.GRADUATED, "수강생"
        ).value
        student.graduation_date = graduation_date or date.today()
        student.final_grade = grade
        _append_history(student, student.status, f"Student graduated with grade: {grade}")
    db.refresh(student)
    logger.info("[student] %s graduated grade=%s", student.enrollment_number, grade)
    return student


def get_status_history(db: Session, student_id: int) -> List[StudentStatusHistory]:
    return list(get_student(db, student_id).status_history)


def delete_student(db: Session, student_id: int) -> None:
    student = get_student(db, student_id)
    with transaction(db):
        _release_current_slot(db, student)
        db.delete(student)
    logger.info("[student] deleted student_id=%s", student_id)
