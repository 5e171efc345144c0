"""Test Status Machine 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

import pytest

from app.exceptions import StateError
from app.utils.status_machine import (
    BatchStatus,
    LeadStatus,
    PlacementStatus,
    StudentStatus,
    can_transition,
    coerce,
    ensure_transition,
    is_terminal,
)


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (BatchStatus.PLANNED, BatchStatus.ACTIVE, True),
        (BatchStatus.PLANNED, BatchStatus.CANCELLED, True),
        (BatchStatus.PLANNED, BatchStatus.COMPLETED, False),
        (BatchStatus.ACTIVE, BatchStatus.COMPLETED, True),
        (BatchStatus.ACTIVE, BatchStatus.PLANNED, False),
        (BatchStatus.COMPLETED, BatchStatus.ACTIVE, False),
        (BatchStatus.CANCELLED, BatchStatus.PLANNED, False),
    ],
)
def test_batch_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (StudentStatus.ACTIVE, StudentStatus.SUSPENDED, True),
        (StudentStatus.SUSPENDED, StudentStatus.ACTIVE, True),
        (StudentStatus.INACTIVE, StudentStatus.ACTIVE, True),
        (StudentStatus.SUSPENDED, StudentStatus.GRADUATED, False),
        (StudentStatus.GRADUATED, StudentStatus.ACTIVE, False),
        (StudentStatus.DROPPED_OUT, StudentStatus.ACTIVE, False),
    ],
)
def test_student_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (LeadStatus.NEW, LeadStatus.CONTACTED, True),
        (LeadStatus.NEW, LeadStatus.INTERESTED, True),
        (LeadStatus.NEW, LeadStatus.CONVERTED, True),
        (LeadStatus.INTERESTED, LeadStatus.CONTACTED, False),
        (LeadStatus.CONTACTED, LeadStatus.NEW, False),
        (LeadStatus.INTERESTED, LeadStatus.LOST, True),
        (LeadStatus.LOST, LeadStatus.CONVERTED, False),
        (LeadStatus.NOT_INTERESTED, LeadStatus.CONTACTED, False),
        (LeadStatus.CONVERTED, LeadStatus.LOST, False),
    ],
)
def test_lead_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_terminal_states():
    assert is_terminal(BatchStatus.COMPLETED)
    assert is_terminal(BatchStatus.CANCELLED)
    assert is_terminal(StudentStatus.GRADUATED)
    assert is_terminal(LeadStatus.CONVERTED)
    assert is_terminal(PlacementStatus.RESIGNED)
    assert not is_terminal(PlacementStatus.PLACED)
    assert not is_terminal(StudentStatus.SUSPENDED)


def test_ensure_transition_accepts_strings_and_reports_states():
    assert ensure_transition(PlacementStatus, "PLACED", "COMPLETED", "취업") is PlacementStatus.COMPLETED

    with pytest.raises(StateError) as exc_info:
        ensure_transition(PlacementStatus, "RESIGNED", "PLACED", "취업")
    assert exc_info.value.details == {"current_state": "RESIGNED", "requested_state": "PLACED"}


def test_coerce_unknown_value():
    assert coerce(LeadStatus, "LOST") is LeadStatus.LOST
    with pytest.raises(StateError):
        coerce(LeadStatus, "MAYBE")
