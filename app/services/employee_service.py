"""Employee Service 도메인 서비스 레이어입니다."""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.database import transaction
from app.exceptions import DuplicateResourceError, ResourceNotFoundError, ValidationError
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate

EMPLOYEE_ROLES = {"ADMIN", "COUNSELLOR", "FACULTY", "PLACEMENT_OFFICER", "OPERATIONS"}


def get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.employee_id == employee_id).first()
    if not employee:
        raise ResourceNotFoundError("Employee", employee_id)
    return employee


def get_employees(db: Session, role: Optional[str] = None) -> List[Employee]:
    query = db.query(Employee)
    if role:
        query = query.filter(Employee.role == role.upper())
    return query.order_by(Employee.employee_code).all()


def create_employee(db: Session, data: EmployeeCreate) -> Employee:
    payload = data.model_dump()
    payload["role"] = str(payload["role"]).strip().upper()
    if payload["role"] not in EMPLOYEE_ROLES:
        raise ValidationError(f"알 수 없는 직원 역할입니다: {data.role}", field="role")
    if db.query(Employee).filter(Employee.employee_code == data.employee_code).first():
        raise DuplicateResourceError("Employee", "employee_code", data.employee_code)

    employee = Employee(**payload)
    with transaction(db):
        db.add(employee)
    db.refresh(employee)
    return employee
