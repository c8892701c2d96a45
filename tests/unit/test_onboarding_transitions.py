"""Tests for the onboarding stage transition table."""

import pytest

from medonboard.domain.enums import OnboardingEvent, OnboardingStage, SystemRole
from medonboard.domain.exceptions import InvalidStageTransitionException
from medonboard.domain.onboarding import (
    can_transition,
    current_stage,
    next_stage,
    role_selection_event,
)

S = OnboardingStage
E = OnboardingEvent


@pytest.mark.parametrize(
    ("role", "expected"),
    [
        (SystemRole.GUEST, S.ROLE_SELECTION),
        (SystemRole.PATIENT, S.PATIENT_DETAIL),
        (SystemRole.DOCTOR, S.DOCTOR_DETAIL),
        (SystemRole.CLINIC, S.CLINIC_DETAIL),
        (SystemRole.ADMIN, S.ADMIN_ROLE),
    ],
)
def test_role_selection_reaches_detail_stage_from_anywhere(
    role: SystemRole, expected: OnboardingStage
) -> None:
    """Selecting a role is allowed from every stage, including approved ones."""
    event = role_selection_event(role)
    for stage in OnboardingStage:
        assert next_stage(stage.value, event) is expected


def test_unknown_or_missing_stage_is_role_selection() -> None:
    assert current_stage(None) is S.ROLE_SELECTION
    assert current_stage("somewhere-else") is S.ROLE_SELECTION
    assert next_stage("legacy-value", E.DOCTOR_INVITED_BY_CLINIC) is S.DOCTOR_CLINIC_DETAIL


def test_stage_parsing_is_exact() -> None:
    """Stage values are stored with mixed case; lookups do not fold case."""
    assert current_stage("doctor-detail") is S.DOCTOR_DETAIL
    assert current_stage("DOCTOR-DETAIL") is S.ROLE_SELECTION


def test_clinic_invitation_only_from_role_selection() -> None:
    assert can_transition(None, E.DOCTOR_INVITED_BY_CLINIC)
    with pytest.raises(InvalidStageTransitionException) as exc_info:
        next_stage(S.DOCTOR_DETAIL.value, E.DOCTOR_INVITED_BY_CLINIC)
    assert exc_info.value.error_code == "INVALID_STAGE_TRANSITION"
    assert exc_info.value.details == {
        "current_stage": "doctor-detail",
        "event": "doctor_invited_by_clinic",
    }


def test_doctor_submissions() -> None:
    assert next_stage("doctor-detail", E.DOCTOR_SUBMITTED_TO_ADMIN) is S.DOCTOR_APPROVAL_PENDING
    assert (
        next_stage("doctor-clinic-detail", E.DOCTOR_SUBMITTED_TO_CLINIC)
        is S.CLINIC_APPROVAL_PENDING
    )
    # Resubmission after rejection is allowed.
    assert next_stage("REJECTED", E.DOCTOR_SUBMITTED_TO_ADMIN) is S.DOCTOR_APPROVAL_PENDING
    assert (
        next_stage("CLINIC_REJECT_DOCTOR", E.DOCTOR_SUBMITTED_TO_CLINIC)
        is S.CLINIC_APPROVAL_PENDING
    )


def test_doctor_cannot_submit_from_clinic_or_patient_stage() -> None:
    assert not can_transition("clinic-detail", E.DOCTOR_SUBMITTED_TO_ADMIN)
    assert not can_transition("patient-detail", E.DOCTOR_SUBMITTED_TO_CLINIC)


def test_clinic_submission() -> None:
    assert next_stage("clinic-detail", E.CLINIC_SUBMITTED) is S.CLINIC_APPROVAL_PENDING
    assert not can_transition("doctor-detail", E.CLINIC_SUBMITTED)


@pytest.mark.parametrize("stage", list(OnboardingStage))
def test_decisions_apply_from_every_stage(stage: OnboardingStage) -> None:
    """A doctor can be pending in both queues; either decision moves the stage."""
    assert next_stage(stage.value, E.ADMIN_APPROVED) is S.APPROVED_BY_ADMIN
    assert next_stage(stage.value, E.ADMIN_REJECTED) is S.REJECTED
    assert next_stage(stage.value, E.CLINIC_APPROVED_DOCTOR) is S.APPROVED_BY_CLINIC
    assert next_stage(stage.value, E.CLINIC_REJECTED_DOCTOR) is S.CLINIC_REJECT_DOCTOR


def test_clinic_decision_after_admin_approval() -> None:
    assert can_transition("APPROVED_BY_ADMIN", E.CLINIC_APPROVED_DOCTOR)
    assert can_transition("APPROVED_BY_CLINIC", E.ADMIN_REJECTED)


def test_patient_profile_completion() -> None:
    assert next_stage("patient-detail", E.PATIENT_PROFILE_SUBMITTED) is S.PATIENT_PROFILE_COMPLETED
    # Editing a completed profile keeps the stage.
    assert (
        next_stage("PATIENT_PROFILE_COMPLETED", E.PATIENT_PROFILE_SUBMITTED)
        is S.PATIENT_PROFILE_COMPLETED
    )
    assert not can_transition("doctor-detail", E.PATIENT_PROFILE_SUBMITTED)
