"""Onboarding stage transition table.

Every onboarding_stage write goes through next_stage(). A (stage, event) pair
that is not in TRANSITIONS raises InvalidStageTransitionException. Stored
stage strings that are None or not a known OnboardingStage are treated as
ROLE_SELECTION.

Decision events apply from every stage: a doctor can hold one pending request
in each queue, and the request row (PENDING only, updated once) is what
guards a decision. The stage records the latest outcome.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from medonboard.domain.enums import OnboardingEvent, OnboardingStage, SystemRole
from medonboard.domain.exceptions import InvalidStageTransitionException

S = OnboardingStage
E = OnboardingEvent

_DOCTOR_STAGES = frozenset(
    {
        S.ROLE_SELECTION,
        S.DOCTOR_DETAIL,
        S.DOCTOR_CLINIC_DETAIL,
        S.DOCTOR_APPROVAL_PENDING,
        S.CLINIC_APPROVAL_PENDING,
        S.APPROVED_BY_ADMIN,
        S.APPROVED_BY_CLINIC,
        S.REJECTED,
        S.CLINIC_REJECT_DOCTOR,
    }
)
_CLINIC_STAGES = frozenset(
    {
        S.ROLE_SELECTION,
        S.CLINIC_DETAIL,
        S.CLINIC_APPROVAL_PENDING,
        S.APPROVED_BY_ADMIN,
        S.REJECTED,
    }
)
_PATIENT_STAGES = frozenset(
    {S.ROLE_SELECTION, S.PATIENT_DETAIL, S.PATIENT_PROFILE_COMPLETED}
)


def _build(
    rules: Iterable[tuple[Iterable[OnboardingStage], OnboardingEvent, OnboardingStage]],
) -> Mapping[tuple[OnboardingStage, OnboardingEvent], OnboardingStage]:
    table: dict[tuple[OnboardingStage, OnboardingEvent], OnboardingStage] = {}
    for sources, event, target in rules:
        for source in sources:
            table[(source, event)] = target
    return MappingProxyType(table)


TRANSITIONS: Mapping[tuple[OnboardingStage, OnboardingEvent], OnboardingStage] = _build(
    [
        (S, E.ROLE_SELECTED_GUEST, S.ROLE_SELECTION),
        (S, E.ROLE_SELECTED_PATIENT, S.PATIENT_DETAIL),
        (S, E.ROLE_SELECTED_DOCTOR, S.DOCTOR_DETAIL),
        (S, E.ROLE_SELECTED_CLINIC, S.CLINIC_DETAIL),
        (S, E.ROLE_SELECTED_ADMIN, S.ADMIN_ROLE),
        ({S.ROLE_SELECTION}, E.DOCTOR_INVITED_BY_CLINIC, S.DOCTOR_CLINIC_DETAIL),
        (_DOCTOR_STAGES, E.DOCTOR_SUBMITTED_TO_CLINIC, S.CLINIC_APPROVAL_PENDING),
        (_DOCTOR_STAGES, E.DOCTOR_SUBMITTED_TO_ADMIN, S.DOCTOR_APPROVAL_PENDING),
        (_CLINIC_STAGES, E.CLINIC_SUBMITTED, S.CLINIC_APPROVAL_PENDING),
        (_PATIENT_STAGES, E.PATIENT_PROFILE_SUBMITTED, S.PATIENT_PROFILE_COMPLETED),
        (S, E.ADMIN_APPROVED, S.APPROVED_BY_ADMIN),
        (S, E.ADMIN_REJECTED, S.REJECTED),
        (S, E.CLINIC_APPROVED_DOCTOR, S.APPROVED_BY_CLINIC),
        (S, E.CLINIC_REJECTED_DOCTOR, S.CLINIC_REJECT_DOCTOR),
    ]
)

_ROLE_SELECTION_EVENTS: Mapping[SystemRole, OnboardingEvent] = MappingProxyType(
    {
        SystemRole.GUEST: E.ROLE_SELECTED_GUEST,
        SystemRole.PATIENT: E.ROLE_SELECTED_PATIENT,
        SystemRole.DOCTOR: E.ROLE_SELECTED_DOCTOR,
        SystemRole.CLINIC: E.ROLE_SELECTED_CLINIC,
        SystemRole.ADMIN: E.ROLE_SELECTED_ADMIN,
    }
)


def current_stage(stored: str | None) -> OnboardingStage:
    """Map a stored stage string onto the closed enumeration."""
    return OnboardingStage.parse(stored) or OnboardingStage.ROLE_SELECTION


def can_transition(stored: str | None, event: OnboardingEvent) -> bool:
    return (current_stage(stored), event) in TRANSITIONS


def next_stage(stored: str | None, event: OnboardingEvent) -> OnboardingStage:
    """Return the stage reached by applying event to the stored stage.

    Raises:
        InvalidStageTransitionException: If event is not allowed from that stage.
    """
    target = TRANSITIONS.get((current_stage(stored), event))
    if target is None:
        raise InvalidStageTransitionException(stored, event.value)
    return target


def role_selection_event(role: SystemRole) -> OnboardingEvent:
    """Event fired when a user's system role is set to role."""
    return _ROLE_SELECTION_EVENTS[role]
