"""Batch Service 도메인 서비스 레이어입니다. 배치 정원 원장(정원 대비 등록 인원)과 배치 상태 전이를 담당합니다.

등록 인원 증감과 정원 변경은 모두 단일 조건부 UPDATE 문으로 처리한다.
조회 후 검사하고 다시 쓰는 방식은 동시 요청에서 정원을 초과할 수 있으므로 사용하지 않는다.
reserve_slot/release_slot은 커밋하지 않으므로 수강생 생성, 리드 전환 같은 상위 트랜잭션 안에서 호출한다.
"""

import logging
from typing import List, Optional

from sqlalchemy import exists
from sqlalchemy.orm import Session
from app.config import settings
from app.database import transaction
from app.exceptions import (
    CapacityExceededError,
    ConflictError,
    DuplicateResourceError,
    ResourceNotFoundError,
    StateError,
    ValidationError,
)
from app.models.batch import Batch, ENROLLABLE_STATUSES
from app.models.student import Student
from app.schemas.batch import BatchCreate, BatchUpdate
from app.services import course_service, employee_service
from app.utils.helpers import add_months
from app.utils.status_machine import BatchStatus, coerce, ensure_transition

logger = logging.getLogger(__name__)


def get_batch(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.batch_id == batch_id).first()
    if not batch:
        raise ResourceNotFoundError("Batch", batch_id)
    return batch


def get_batches(db: Session, status: Optional[BatchStatus] = None, course_id: Optional[int] = None) -> List[Batch]:
    query = db.query(Batch)
    if status is not None:
        query = query.filter(Batch.status == coerce(BatchStatus, status).value)
    if course_id is not None:
        query = query.filter(Batch.course_id == course_id)
    return query.order_by(Batch.start_date.desc(), Batch.batch_id.desc()).all()


def _validate_capacity(capacity: int) -> None:
    if capacity is None or capacity < 1:
        raise ValidationError("정원은 1명 이상이어야 합니다.", field="capacity")
    if capacity > settings.BATCH_MAX_CAPACITY:
        raise ValidationError(
            f"정원은 {settings.BATCH_MAX_CAPACITY}명을 초과할 수 없습니다.",
            field="capacity",
        )


def _ensure_unique_name(db: Session, name: str, exclude_batch_id: Optional[int] = None) -> None:
    query = db.query(Batch.batch_id).filter(Batch.name == name)
    if exclude_batch_id is not None:
        query = query.filter(Batch.batch_id != exclude_batch_id)
    if query.first():
        raise DuplicateResourceError("Batch", "name", name)


def create_batch(db: Session, data: BatchCreate) -> Batch:
    name = (data.name or "").strip()
    if not name:
        raise ValidationError("배치 이름은 필수입니다.", field="name")
    _validate_capacity(data.capacity)
    _ensure_unique_name(db, name)
    course = course_service.get_course(db, data.course_id)
    if data.instructor_id is not None:
        employee_service.get_employee(db, data.instructor_id)

    batch = Batch(
        name=name,
        course_id=course.course_id,
        start_date=data.start_date,
        end_date=add_months(data.start_date, course.duration_months),
        capacity=data.capacity,
        current_enrollment=0,
        status=BatchStatus.PLANNED.value,
        instructor_id=data.instructor_id,
    )
    with transaction(db):
        db.add(batch)
    db.refresh(batch)
    logger.info("[batch] created batch_id=%s name=%s capacity=%s", batch.batch_id, batch.name, batch.capacity)
    return batch


def _apply_capacity(db: Session, batch: Batch, new_capacity: int) -> Batch:
    _validate_capacity(new_capacity)
    if new_capacity == batch.capacity:
        return batch
    updated = (
        db.query(Batch)
        .filter(Batch.batch_id == batch.batch_id, Batch.current_enrollment <= new_capacity)
        .update({Batch.capacity: new_capacity}, synchronize_session=False)
    )
    db.refresh(batch)
    if not updated:
        raise CapacityExceededError(
            f"정원을 현재 등록 인원({batch.current_enrollment}명)보다 작게 줄일 수 없습니다.",
            batch_id=batch.batch_id,
            capacity=batch.capacity,
            current_enrollment=batch.current_enrollment,
        )
    return batch


def update_capacity(db: Session, batch_id: int, new_capacity: int) -> Batch:
    batch = get_batch(db, batch_id)
    if new_capacity == batch.capacity:
        return batch
    previous = batch.capacity
    with transaction(db):
        _apply_capacity(db, batch, new_capacity)
    db.refresh(batch)
    logger.info("[batch] capacity batch_id=%s %s -> %s", batch_id, previous, batch.capacity)
    return batch


def _apply_status(batch: Batch, status: BatchStatus) -> None:
    target = coerce(BatchStatus, status)
    if target.value == batch.status:
        return
    batch.status = ensure_transition(BatchStatus, batch.status, target, "배치").value


def update_batch_status(db: Session, batch_id: int, status: BatchStatus) -> Batch:
    batch = get_batch(db, batch_id)
    previous = batch.status
    with transaction(db):
        _apply_status(batch, status)
    db.refresh(batch)
    if previous != batch.status:
        logger.info("[batch] status batch_id=%s %s -> %s", batch_id, previous, batch.status)
    return batch


def update_batch(db: Session, batch_id: int, data: BatchUpdate) -> Batch:
    batch = get_batch(db, batch_id)
    payload = data.model_dump(exclude_unset=True)

    with transaction(db):
        # refresh가 대기 중인 속성 변경을 덮어쓰지 않도록 정원 변경을 먼저 적용한다.
        if payload.get("capacity") is not None:
            _apply_capacity(db, batch, payload["capacity"])

        if payload.get("name") is not None:
            name = payload["name"].strip()
            if not name:
                raise ValidationError("배치 이름은 필수입니다.", field="name")
            _ensure_unique_name(db, name, exclude_batch_id=batch.batch_id)
            batch.name = name

        if "instructor_id" in payload:
            if payload["instructor_id"] is not None:
                employee_service.get_employee(db, payload["instructor_id"])
            batch.instructor_id = payload["instructor_id"]

        course_id = payload.get("course_id") or batch.course_id
        start_date = payload.get("start_date") or batch.start_date
        if course_id != batch.course_id or start_date != batch.start_date:
            course = course_service.get_course(db, course_id)
            batch.course_id = course.course_id
            batch.start_date = start_date
            batch.end_date = add_months(start_date, course.duration_months)

        if payload.get("status") is not None:
            _apply_status(batch, payload["status"])

    db.refresh(batch)
    return batch


def reserve_slot(db: Session, batch_id: int) -> Batch:
    """배치 등록 인원을 1 증가시킨다. 커밋은 호출자가 담당한다."""
    updated = (
        db.query(Batch)
        .filter(
            Batch.batch_id == batch_id,
            Batch.current_enrollment < Batch.capacity,
            Batch.status.in_(ENROLLABLE_STATUSES),
        )
        .update({Batch.current_enrollment: Batch.current_enrollment + 1}, synchronize_session=False)
    )
    batch = get_batch(db, batch_id)
    db.refresh(batch)
    if updated:
        return batch

    if not batch.accepts_enrollment:
        raise StateError(
            f"{batch.status} 상태의 배치에는 수강생을 등록할 수 없습니다.",
            current_state=batch.status,
        )
    logger.warning(
        "[batch] capacity exceeded batch_id=%s capacity=%s enrollment=%s",
        batch_id, batch.capacity, batch.current_enrollment,
    )
    raise CapacityExceededError(
        f"배치 '{batch.name}'의 정원({batch.capacity}명)이 모두 찼습니다.",
        batch_id=batch_id,
        capacity=batch.capacity,
        current_enrollment=batch.current_enrollment,
    )


def release_slot(db: Session, batch_id: int) -> Batch:
    """배치 등록 인원을 1 감소시킨다. 커밋은 호출자가 담당한다."""
    updated = (
        db.query(Batch)
        .filter(Batch.batch_id == batch_id, Batch.current_enrollment > 0)
        .update({Batch.current_enrollment: Batch.current_enrollment - 1}, synchronize_session=False)
    )
    batch = get_batch(db, batch_id)
    db.refresh(batch)
    if not updated:
        raise StateError(
            f"배치 '{batch.name}'의 등록 인원이 이미 0명입니다.",
            current_state=batch.current_enrollment,
        )
    return batch


def increment_enrollment(db: Session, batch_id: int) -> Batch:
    with transaction(db):
        batch = reserve_slot(db, batch_id)
    db.refresh(batch)
    logger.info("[batch] enrollment +1 batch_id=%s now=%s/%s", batch_id, batch.current_enrollment, batch.capacity)
    return batch


def decrement_enrollment(db: Session, batch_id: int) -> Batch:
    with transaction(db):
        batch = release_slot(db, batch_id)
    db.refresh(batch)
    logger.info("[batch] enrollment -1 batch_id=%s now=%s/%s", batch_id, batch.current_enrollment, batch.capacity)
    return batch


def available_slots(db: Session, batch_id: int) -> int:
    return get_batch(db, batch_id).available_slots


def get_availability(db: Session, batch_id: int) -> Batch:
    return get_batch(db, batch_id)


def delete_batch(db: Session, batch_id: int) -> None:
    batch = get_batch(db, batch_id)
    with transaction(db):
        # 카운터가 0이어도 배치를 참조하는 수강생이 남아 있으면 삭제하지 않는다.
        deleted = (
            db.query(Batch)
            .filter(
                Batch.batch_id == batch_id,
                Batch.current_enrollment == 0,
                ~exists().where(Student.batch_id == batch_id),
            )
            .delete(synchronize_session=False)
        )
        if not deleted:
            db.refresh(batch)
            assigned = db.query(Student.student_id).filter(Student.batch_id == batch_id).count()
            raise ConflictError(
                f"등록 인원이나 배정된 수강생이 있는 배치는 삭제할 수 없습니다. "
                f"(등록 {batch.current_enrollment}명, 배정 {assigned}명)",
                details={
                    "batch_id": batch_id,
                    "current_enrollment": batch.current_enrollment,
                    "assigned_students": assigned,
                },
            )
    db.expunge(batch)
    logger.info("[batch] deleted batch_id=%s", batch_id)
