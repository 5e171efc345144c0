import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.employee import Employee
from app.models.course import Course
from app.models.company import Company
from app.models.batch import Batch
from app.utils.helpers import add_months
from datetime import date

TEST_DB_URL = "sqlite:///./test_institute.db"

# 동시성 테스트에서 쓰기 잠금을 기다릴 수 있도록 timeout을 둔다.
engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False, "timeout": 30})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_factory():
    return TestingSession


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(emp_id="admin001", name="Admin", role="admin"),
        "operations": User(emp_id="ops001", name="Operations", role="operations"),
        "counsellor": User(emp_id="coun001", name="Counsellor", role="counsellor"),
        "faculty": User(emp_id="fac001", name="Faculty", role="faculty"),
        "placement_officer": User(emp_id="place001", name="Placement", role="placement_officer"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_course(db):
    course = Course(name="Full Stack Development", duration_months=6, fees=Decimal("45000.00"))
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@pytest.fixture
def seed_counsellor(db):
    employee = Employee(employee_code="EMP100", first_name="Meera", last_name="Iyer", role="COUNSELLOR")
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@pytest.fixture
def seed_company(db):
    company = Company(name="Acme Software", industry="IT Services")
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@pytest.fixture
def make_batch(db, seed_course):
    created = []

    def _make(name=None, capacity=5, current_enrollment=0, status="PLANNED"):
        start = date(2026, 1, 5)
        batch = Batch(
            name=name or f"FSD-{len(created) + 1:02d}",
            course_id=seed_course.course_id,
            start_date=start,
            end_date=add_months(start, seed_course.duration_months),
            capacity=capacity,
            current_enrollment=current_enrollment,
            status=status,
        )
        db.add(batch)
        db.commit()
        db.refresh(batch)
        created.append(batch)
        return batch

    return _make


@pytest.fixture
def seed_batch(make_batch):
    return make_batch(name="FSD-2026-JAN", capacity=5)


def get_token(client, emp_id: str) -> str:
    resp = client.post("/api/auth/login", json={"emp_id": emp_id})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, emp_id: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, emp_id)}"}
