"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    course_service,
    employee_service,
    company_service,
    batch_service,
    student_service,
    lead_service,
    placement_service,
)
