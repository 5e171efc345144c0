"""배치/수강생/리드/취업 상태 값과 허용 전이 테이블입니다."""

from enum import Enum
from typing import Dict, FrozenSet, Type, TypeVar, Union

from app.exceptions import StateError


class BatchStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class StudentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    DROPPED_OUT = "DROPPED_OUT"
    SUSPENDED = "SUSPENDED"


class LeadStatus(str, Enum):
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    INTERESTED = "INTERESTED"
    NOT_INTERESTED = "NOT_INTERESTED"
    CONVERTED = "CONVERTED"
    LOST = "LOST"


class PlacementStatus(str, Enum):
    PLACED = "PLACED"
    RESIGNED = "RESIGNED"
    TERMINATED = "TERMINATED"
    COMPLETED = "COMPLETED"


BATCH_TRANSITIONS: Dict[BatchStatus, FrozenSet[BatchStatus]] = {
    BatchStatus.PLANNED: frozenset({BatchStatus.ACTIVE, BatchStatus.CANCELLED}),
    BatchStatus.ACTIVE: frozenset({BatchStatus.COMPLETED, BatchStatus.CANCELLED}),
    BatchStatus.COMPLETED: frozenset(),
    BatchStatus.CANCELLED: frozenset(),
}

STUDENT_TRANSITIONS: Dict[StudentStatus, FrozenSet[StudentStatus]] = {
    StudentStatus.ACTIVE: frozenset({
        StudentStatus.GRADUATED,
        StudentStatus.DROPPED_OUT,
        StudentStatus.SUSPENDED,
        StudentStatus.INACTIVE,
    }),
    StudentStatus.SUSPENDED: frozenset({StudentStatus.ACTIVE}),
    StudentStatus.INACTIVE: frozenset({StudentStatus.ACTIVE}),
    StudentStatus.GRADUATED: frozenset(),
    StudentStatus.DROPPED_OUT: frozenset(),
}

# 전진 방향 건너뛰기는 허용하고 역방향은 막는다. LOST/NOT_INTERESTED는 비종료 상태 어디서나 가능.
_LEAD_EXITS = frozenset({LeadStatus.LOST, LeadStatus.NOT_INTERESTED, LeadStatus.CONVERTED})
LEAD_TRANSITIONS: Dict[LeadStatus, FrozenSet[LeadStatus]] = {
    LeadStatus.NEW: frozenset({LeadStatus.CONTACTED, LeadStatus.INTERESTED}) | _LEAD_EXITS,
    LeadStatus.CONTACTED: frozenset({LeadStatus.INTERESTED}) | _LEAD_EXITS,
    LeadStatus.INTERESTED: _LEAD_EXITS,
    LeadStatus.CONVERTED: frozenset(),
    LeadStatus.LOST: frozenset(),
    LeadStatus.NOT_INTERESTED: frozenset(),
}

PLACEMENT_TRANSITIONS: Dict[PlacementStatus, FrozenSet[PlacementStatus]] = {
    PlacementStatus.PLACED: frozenset({
        PlacementStatus.RESIGNED,
        PlacementStatus.TERMINATED,
        PlacementStatus.COMPLETED,
    }),
    PlacementStatus.RESIGNED: frozenset(),
    PlacementStatus.TERMINATED: frozenset(),
    PlacementStatus.COMPLETED: frozenset(),
}

_TABLES = {
    BatchStatus: BATCH_TRANSITIONS,
    StudentStatus: STUDENT_TRANSITIONS,
    LeadStatus: LEAD_TRANSITIONS,
    PlacementStatus: PLACEMENT_TRANSITIONS,
}

S = TypeVar("S", BatchStatus, StudentStatus, LeadStatus, PlacementStatus)


def coerce(status_type: Type[S], value: Union[S, str]) -> S:
    try:
        return status_type(value)
    except ValueError:
        raise StateError(f"알 수 없는 상태 값입니다: {value}", requested_state=value)


def can_transition(current: S, target: S) -> bool:
    table = _TABLES[type(current)]
    return target in table[current]


def is_terminal(status: S) -> bool:
    return not _TABLES[type(status)][status]


def ensure_transition(status_type: Type[S], current: Union[S, str], target: Union[S, str], entity: str) -> S:
    """current -> target 전이가 허용되지 않으면 StateError를 발생시키고, 허용되면 target을 반환한다."""
    current_status = coerce(status_type, current)
    target_status = coerce(status_type, target)
    if not can_transition(current_status, target_status):
        raise StateError(
            f"{entity} 상태를 {current_status.value}에서 {target_status.value}(으)로 변경할 수 없습니다.",
            current_state=current_status,
            requested_state=target_status,
        )
    return target_status
