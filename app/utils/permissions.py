"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

ADMIN = "admin"
OPERATIONS = "operations"
COUNSELLOR = "counsellor"
FACULTY = "faculty"
PLACEMENT_OFFICER = "placement_officer"

# 배치: 관리자/운영 쓰기, 상담/강사 포함 조회
BATCH_WRITE = (ADMIN, OPERATIONS)
BATCH_READ = (ADMIN, OPERATIONS, FACULTY, COUNSELLOR)
# 정원/잔여석 조회는 상담사가 배정 전에 확인한다.
BATCH_AVAILABILITY = (ADMIN, OPERATIONS, COUNSELLOR)

STUDENT_WRITE = (ADMIN, COUNSELLOR)
STUDENT_READ = (ADMIN, COUNSELLOR, FACULTY)

LEAD_ACCESS = (ADMIN, COUNSELLOR)

PLACEMENT_ACCESS = (ADMIN, PLACEMENT_OFFICER)

REFERENCE_WRITE = (ADMIN, OPERATIONS)

ADMIN_ONLY = (ADMIN,)

# Employee.role 값 중 리드 담당자로 지정 가능한 역할
COUNSELLOR_EMPLOYEE_ROLES = ("COUNSELLOR", "ADMIN")
