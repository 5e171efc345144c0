"""서비스 레이어에서 사용하는 도메인 예외 계층입니다.

서비스는 HTTPException 대신 아래 예외를 발생시키고, HTTP 상태 코드 변환은
main.py에 등록된 예외 핸들러가 담당합니다.

    InstituteError
    +-- ResourceNotFoundError      (404)
    +-- ValidationError            (422)
    +-- CapacityExceededError      (409)
    +-- ConflictError              (409)
    |   +-- DuplicateResourceError (409)
    +-- StateError                 (409)
"""

from typing import Any, Dict, Optional


class InstituteError(Exception):
    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "INSTITUTE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details,
        }


class ResourceNotFoundError(InstituteError):
    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type}을(를) 찾을 수 없습니다. (id={resource_id})",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ValidationError(InstituteError):
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field} if field else None)


class CapacityExceededError(InstituteError):
    """정원 초과 등록 또는 현재 등록 인원 미만으로의 정원 축소."""

    status_code = 409

    def __init__(self, message: str, batch_id: Any = None, capacity: Optional[int] = None, current_enrollment: Optional[int] = None):
        self.batch_id = batch_id
        self.capacity = capacity
        self.current_enrollment = current_enrollment
        super().__init__(
            message,
            code="CAPACITY_EXCEEDED",
            details={
                "batch_id": batch_id,
                "capacity": capacity,
                "current_enrollment": current_enrollment,
            },
        )


class ConflictError(InstituteError):
    """종료(불변) 상태의 엔티티에 대한 수정/삭제 시도."""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class DuplicateResourceError(ConflictError):
    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            f"{resource_type} {field} '{value}'이(가) 이미 존재합니다.",
            code="DUPLICATE_RESOURCE",
            details={"resource_type": resource_type, "field": field, "value": value},
        )


class StateError(InstituteError):
    """허용되지 않은 상태 전이 또는 현재 상태에서 불가능한 연산."""

    status_code = 409

    def __init__(self, message: str, current_state: Any = None, requested_state: Any = None):
        self.current_state = current_state
        self.requested_state = requested_state
        super().__init__(
            message,
            code="INVALID_STATE",
            details={
                "current_state": _state_value(current_state),
                "requested_state": _state_value(requested_state),
            },
        )


def _state_value(state: Any) -> Any:
    return getattr(state, "value", state)
