"""Seed the database with demo data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, datetime, timedelta
from decimal import Decimal
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.employee import Employee
from app.models.course import Course
from app.models.company import Company
from app.models.batch import Batch
from app.models.lead import Lead
from app.utils.helpers import add_months


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Employees
        employees = [
            Employee(employee_code="EMP001", first_name="Asha", last_name="Rao", role="ADMIN", department="Management"),
            Employee(employee_code="EMP002", first_name="Vikram", last_name="Shah", role="OPERATIONS", department="Operations"),
            Employee(employee_code="EMP003", first_name="Meera", last_name="Iyer", role="COUNSELLOR", department="Admissions"),
            Employee(employee_code="EMP004", first_name="Rahul", last_name="Das", role="FACULTY", department="Academics"),
            Employee(employee_code="EMP005", first_name="Nisha", last_name="Kapoor", role="PLACEMENT_OFFICER", department="Placements"),
        ]
        db.add_all(employees)
        db.flush()

        # Users
        roles = ["admin", "operations", "counsellor", "faculty", "placement_officer"]
        users = [
            User(emp_id=emp.employee_code.lower(), name=emp.full_name, role=role, employee_id=emp.employee_id)
            for emp, role in zip(employees, roles)
        ]
        db.add_all(users)

        # Course & batches
        course = Course(name="Full Stack Development", description="6-month job-ready program",
                        duration_months=6, fees=Decimal("45000.00"))
        db.add(course)
        db.flush()

        for name, start, capacity, status in [
            ("FSD-2026-JAN", date(2026, 1, 5), 30, "ACTIVE"),
            ("FSD-2026-JUL", date(2026, 7, 6), 25, "PLANNED"),
        ]:
            db.add(Batch(
                name=name,
                course_id=course.course_id,
                start_date=start,
                end_date=add_months(start, course.duration_months),
                capacity=capacity,
                current_enrollment=0,
                status=status,
                instructor_id=employees[3].employee_id,
            ))

        # Companies
        db.add_all([
            Company(name="Acme Software", industry="IT Services", contact_person="Priya Nair"),
            Company(name="Globex Analytics", industry="Data", contact_person="Arjun Menon"),
        ])

        # Leads
        db.add_all([
            Lead(first_name="Karan", last_name="Mehta", phone="9000000001", email="karan@example.com",
                 course_interest="Full Stack Development", source="Website",
                 assigned_counsellor_id=employees[2].employee_id,
                 next_follow_up_date=datetime.now() + timedelta(days=2)),
            Lead(first_name="Sneha", last_name="Pillai", phone="9000000002",
                 course_interest="Full Stack Development", source="Referral",
                 assigned_counsellor_id=employees[2].employee_id),
        ])

        db.commit()
        print("Database seeded successfully.")
        print("Login emp_ids: " + ", ".join(u.emp_id for u in users))
    finally:
        db.close()


if __name__ == "__main__":
    seed()
