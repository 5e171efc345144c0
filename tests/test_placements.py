"""Test Placements 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

from datetime import date
from decimal import Decimal

import pytest

from app.exceptions import ConflictError, StateError, ValidationError
from app.models.placement import Placement
from app.schemas.placement import PlacementCreate, PlacementUpdate
from app.schemas.student import StudentCreate
from app.services import placement_service, student_service
from tests.conftest import auth_headers


@pytest.fixture
def seed_student(db):
    return student_service.create_student(
        db,
        StudentCreate(first_name="Karan", last_name="Mehta", phone="9000000001", enrollment_date=date(2026, 1, 5)),
    )


def _placement_payload(student, company, **overrides):
    payload = {
        "student_id": student.student_id,
        "company_id": company.company_id,
        "position": "Junior Developer",
        "placement_date": date(2026, 7, 1),
        "salary": Decimal("600000.00"),
        "joining_date": date(2026, 7, 15),
        "probation_period_months": 3,
    }
    payload.update(overrides)
    return PlacementCreate(**payload)


def test_create_placement_starts_placed(db, seed_student, seed_company):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))
    assert placement.status == "PLACED"
    assert placement.end_date is None
    assert placement.probation_end_date == date(2026, 10, 15)


def test_create_placement_validations(db, seed_student, seed_company):
    with pytest.raises(ValidationError):
        placement_service.create_placement(db, _placement_payload(seed_student, seed_company, salary=Decimal("0")))
    with pytest.raises(ValidationError):
        placement_service.create_placement(
            db, _placement_payload(seed_student, seed_company, probation_period_months=25)
        )

    seed_company.status = "BLACKLISTED"
    db.commit()
    with pytest.raises(ValidationError):
        placement_service.create_placement(db, _placement_payload(seed_student, seed_company))
    assert db.query(Placement).count() == 0


def test_placement_exit_is_terminal(db, seed_student, seed_company):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))

    resigned = placement_service.update_placement_status(
        db, placement.placement_id, "RESIGNED", end_date=date(2026, 12, 31)
    )
    assert resigned.status == "RESIGNED"
    assert resigned.end_date == date(2026, 12, 31)

    with pytest.raises(StateError):
        placement_service.update_placement_status(db, placement.placement_id, "PLACED")
    with pytest.raises(StateError):
        placement_service.update_placement_status(db, placement.placement_id, "COMPLETED")


def test_placement_end_date_defaults_to_today(db, seed_student, seed_company):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))
    terminated = placement_service.update_placement_status(db, placement.placement_id, "TERMINATED")
    assert terminated.end_date == date.today()


def test_placement_activity_and_probation_windows():
    placement = Placement(
        status="PLACED",
        joining_date=date(2026, 7, 15),
        probation_period_months=3,
        end_date=None,
    )
    assert placement.active_on(date(2027, 1, 1))
    assert placement.in_probation_on(date(2026, 7, 15))
    assert placement.in_probation_on(date(2026, 10, 15))
    assert not placement.in_probation_on(date(2026, 10, 16))
    assert not placement.in_probation_on(date(2026, 7, 14))

    placement.end_date = date(2026, 12, 31)
    assert placement.active_on(date(2026, 12, 30))
    assert not placement.active_on(date(2026, 12, 31))

    placement.status = "RESIGNED"
    assert not placement.active_on(date(2026, 8, 1))

    no_probation = Placement(status="PLACED", joining_date=date(2026, 7, 15))
    assert no_probation.probation_end_date is None
    assert not no_probation.in_probation_on(date(2026, 7, 20))


def test_placement_api(client, seed_users, seed_student, seed_company):
    headers = auth_headers(client, "place001")
    resp = client.post(
        "/api/placements",
        json={
            "student_id": seed_student.student_id,
            "company_id": seed_company.company_id,
            "position": "QA Engineer",
            "placement_date": "2026-07-01",
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "PLACED"
    assert body["is_active"] is True
    assert body["is_in_probation"] is False

    resp = client.put(
        f"/api/placements/{body['placement_id']}/status",
        json={"status": "COMPLETED", "end_date": "2026-09-30"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    resp = client.get(f"/api/placements?student_id={seed_student.student_id}", headers=headers)
    assert len(resp.json()) == 1


def test_update_placement_terms(db, seed_student, seed_company):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))

    updated = placement_service.update_placement(
        db,
        placement.placement_id,
        PlacementUpdate(position=" Software Engineer ", salary=Decimal("720000.00"), probation_period_months=6),
    )
    assert updated.position == "Software Engineer"
    assert updated.salary == Decimal("720000.00")
    assert updated.probation_end_date == date(2027, 1, 15)
    assert updated.status == "PLACED"

    with pytest.raises(ValidationError):
        placement_service.update_placement(db, placement.placement_id, PlacementUpdate(probation_period_months=30))
    with pytest.raises(ValidationError):
        placement_service.update_placement(db, placement.placement_id, PlacementUpdate(salary=Decimal("-1")))
    db.refresh(updated)
    assert updated.probation_period_months == 6


def test_update_placement_with_status_then_locked(db, seed_student, seed_company):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))

    resigned = placement_service.update_placement(
        db,
        placement.placement_id,
        PlacementUpdate(notes="Moved abroad", status="RESIGNED", end_date=date(2026, 11, 30)),
    )
    assert resigned.status == "RESIGNED"
    assert resigned.end_date == date(2026, 11, 30)
    assert resigned.notes == "Moved abroad"

    with pytest.raises(ConflictError):
        placement_service.update_placement(db, placement.placement_id, PlacementUpdate(notes="edit"))


def test_update_placement_api(client, seed_users, seed_student, seed_company, db):
    placement = placement_service.create_placement(db, _placement_payload(seed_student, seed_company))
    headers = auth_headers(client, "place001")

    resp = client.put(
        f"/api/placements/{placement.placement_id}",
        json={"work_location": "Bengaluru", "salary": "650000.00"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["work_location"] == "Bengaluru"

    resp = client.put(
        f"/api/placements/{placement.placement_id}", json={"probation_period_months": 25}, headers=headers
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"
