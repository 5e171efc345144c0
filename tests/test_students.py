"""Test Students 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

import threading
from datetime import date

import pytest

from app.exceptions import CapacityExceededError, DuplicateResourceError, StateError, ValidationError
from app.models.batch import Batch
from app.models.student import Student
from app.schemas.student import StudentCreate, StudentUpdate
from app.services import student_service
from tests.conftest import auth_headers


def _student_payload(**overrides):
    payload = {
        "first_name": "Karan",
        "last_name": "Mehta",
        "phone": "9000000001",
        "email": "karan@example.com",
        "enrollment_date": date(2026, 1, 5),
    }
    payload.update(overrides)
    return StudentCreate(**payload)


def test_create_student_reserves_batch_slot(db, seed_batch):
    student = student_service.create_student(db, _student_payload(batch_id=seed_batch.batch_id))

    assert student.status == "ACTIVE"
    assert student.batch_id == seed_batch.batch_id
    assert student.enrollment_number == f"ENR{date.today().year}0001"
    db.refresh(seed_batch)
    assert seed_batch.current_enrollment == 1
    assert [h.notes for h in student.status_history] == ["Student enrolled"]


def test_enrollment_numbers_are_sequential(db):
    first = student_service.create_student(db, _student_payload())
    second = student_service.create_student(db, _student_payload(phone="9000000002", email=None))
    prefix = f"ENR{date.today().year}"
    assert first.enrollment_number == f"{prefix}0001"
    assert second.enrollment_number == f"{prefix}0002"


def test_create_student_into_full_batch_leaves_nothing_behind(db, make_batch):
    batch = make_batch(capacity=1, current_enrollment=1)

    with pytest.raises(CapacityExceededError):
        student_service.create_student(db, _student_payload(batch_id=batch.batch_id))

    assert db.query(Student).count() == 0
    db.refresh(batch)
    assert batch.current_enrollment == 1


def test_create_student_duplicate_contact(db):
    student_service.create_student(db, _student_payload())
    with pytest.raises(DuplicateResourceError):
        student_service.create_student(db, _student_payload(email="other@example.com"))
    with pytest.raises(DuplicateResourceError):
        student_service.create_student(db, _student_payload(phone="9000000099"))


def test_create_student_requires_past_birth_date(db):
    with pytest.raises(ValidationError):
        student_service.create_student(db, _student_payload(date_of_birth=date(2999, 1, 1)))


def test_move_between_batches_keeps_ledgers_consistent(db, make_batch):
    source = make_batch(name="FSD-A", capacity=3)
    target = make_batch(name="FSD-B", capacity=3)
    student = student_service.create_student(db, _student_payload(batch_id=source.batch_id))

    moved = student_service.assign_to_batch(db, student.student_id, target.batch_id)

    assert moved.batch_id == target.batch_id
    db.refresh(source)
    db.refresh(target)
    assert source.current_enrollment == 0
    assert target.current_enrollment == 1


def test_move_into_full_batch_keeps_original_slot(db, make_batch):
    source = make_batch(name="FSD-A", capacity=3)
    full = make_batch(name="FSD-FULL", capacity=1, current_enrollment=1)
    student = student_service.create_student(db, _student_payload(batch_id=source.batch_id))

    with pytest.raises(CapacityExceededError):
        student_service.assign_to_batch(db, student.student_id, full.batch_id)

    db.refresh(student)
    db.refresh(source)
    db.refresh(full)
    assert student.batch_id == source.batch_id
    assert source.current_enrollment == 1
    assert full.current_enrollment == 1


def test_update_student_moves_batch(db, make_batch):
    source = make_batch(name="FSD-A", capacity=3)
    target = make_batch(name="FSD-B", capacity=3)
    student = student_service.create_student(db, _student_payload(batch_id=source.batch_id))

    updated = student_service.update_student(
        db, student.student_id, StudentUpdate(batch_id=target.batch_id, address="Pune")
    )
    assert updated.batch_id == target.batch_id
    assert updated.address == "Pune"
    db.refresh(source)
    assert source.current_enrollment == 0


def test_remove_from_batch_releases_slot(db, seed_batch):
    student = student_service.create_student(db, _student_payload(batch_id=seed_batch.batch_id))
    removed = student_service.remove_from_batch(db, student.student_id)

    assert removed.batch_id is None
    db.refresh(seed_batch)
    assert seed_batch.current_enrollment == 0
    # 배치가 없으면 no-op
    assert student_service.remove_from_batch(db, student.student_id).batch_id is None


def test_status_changes_are_recorded(db):
    student = student_service.create_student(db, _student_payload())

    student_service.update_student_status(db, student.student_id, "SUSPENDED", "Fee pending")
    student_service.update_student_status(db, student.student_id, "ACTIVE")
    # 같은 상태는 이력을 남기지 않는다.
    student_service.update_student_status(db, student.student_id, "ACTIVE")

    history = student_service.get_status_history(db, student.student_id)
    assert [h.status for h in history] == ["ACTIVE", "SUSPENDED", "ACTIVE"]
    assert history[1].notes == "Fee pending"
    assert history[2].notes == "Status changed from SUSPENDED to ACTIVE"


def test_graduated_status_requires_graduate_operation(db):
    student = student_service.create_student(db, _student_payload())
    with pytest.raises(ValidationError):
        student_service.update_student_status(db, student.student_id, "GRADUATED")


def test_graduate_student_is_terminal(db):
    student = student_service.create_student(db, _student_payload())

    with pytest.raises(ValidationError):
        student_service.graduate_student(db, student.student_id, "  ")
    with pytest.raises(ValidationError):
        student_service.graduate_student(db, student.student_id, "A-PLUS")

    graduated = student_service.graduate_student(db, student.student_id, "A+", graduation_date=date(2026, 7, 5))
    assert graduated.status == "GRADUATED"
    assert graduated.final_grade == "A+"
    assert graduated.graduation_date == date(2026, 7, 5)
    assert graduated.status_history[-1].notes == "Student graduated with grade: A+"

    with pytest.raises(StateError):
        student_service.update_student_status(db, student.student_id, "ACTIVE")
    with pytest.raises(StateError):
        student_service.graduate_student(db, student.student_id, "B")


def test_suspended_student_cannot_graduate(db):
    student = student_service.create_student(db, _student_payload())
    student_service.update_student_status(db, student.student_id, "SUSPENDED")
    with pytest.raises(StateError):
        student_service.graduate_student(db, student.student_id, "A")


def test_delete_student_releases_slot(db, seed_batch):
    student = student_service.create_student(db, _student_payload(batch_id=seed_batch.batch_id))
    student_service.delete_student(db, student.student_id)

    assert db.query(Student).count() == 0
    db.refresh(seed_batch)
    assert seed_batch.current_enrollment == 0


def test_student_api_flow(client, seed_users, seed_batch):
    headers = auth_headers(client, "coun001")

    resp = client.post(
        "/api/students",
        json={
            "first_name": "Sneha",
            "last_name": "Pillai",
            "phone": "9000000002",
            "enrollment_date": "2026-01-05",
            "batch_id": seed_batch.batch_id,
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    student_id = resp.json()["student_id"]
    assert resp.json()["full_name"] == "Sneha Pillai"

    resp = client.put(f"/api/students/{student_id}/status", json={"status": "INACTIVE"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "INACTIVE"

    resp = client.post(f"/api/students/{student_id}/graduate", json={"final_grade": "A"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["code"] == "INVALID_STATE"

    resp = client.get(f"/api/students/{student_id}", headers=auth_headers(client, "fac001"))
    assert resp.status_code == 200
    assert [h["status"] for h in resp.json()["status_history"]] == ["ACTIVE", "INACTIVE"]

    resp = client.get(
        f"/api/batches/{seed_batch.batch_id}/availability", headers=auth_headers(client, "ops001")
    )
    assert resp.json()["current_enrollment"] == 1


def test_concurrent_creates_get_distinct_enrollment_numbers(db, session_factory):
    barrier = threading.Barrier(4)
    numbers = []
    lock = threading.Lock()

    def worker(index):
        session = session_factory()
        try:
            barrier.wait()
            student = student_service.create_student(
                session, _student_payload(phone=f"900000010{index}", email=None)
            )
            with lock:
                numbers.append(student.enrollment_number)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    prefix = f"ENR{date.today().year}"
    assert sorted(numbers) == [f"{prefix}{seq:04d}" for seq in range(1, 5)]
    assert db.query(Student).count() == 4


def test_student_survives_missing_batch_row(db, seed_batch):
    first = student_service.create_student(db, _student_payload(batch_id=seed_batch.batch_id))
    second = student_service.create_student(
        db, _student_payload(phone="9000000002", email=None, batch_id=seed_batch.batch_id)
    )
    first_id, second_id = first.student_id, second.student_id

    # 배치 행만 직접 지워 수강생 쪽 참조가 남은 상태를 만든다.
    db.query(Batch).filter(Batch.batch_id == seed_batch.batch_id).delete(synchronize_session=False)
    db.commit()
    db.expunge_all()

    removed = student_service.remove_from_batch(db, first_id)
    assert removed.batch_id is None

    student_service.delete_student(db, second_id)
    assert db.query(Student).filter(Student.student_id == second_id).first() is None
