"""Onboarding, approval and user service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from medonboard.application.services.approval_request_store import ApprovalRequestStore
from medonboard.application.services.notification_dispatcher import NotificationDispatcher
from medonboard.application.services.onboarding_service import OnboardingService
from medonboard.application.services.patient_service import PatientService
from medonboard.application.services.profile_auto_create import ProfileAutoCreateService
from medonboard.application.services.user_service import UserService
from medonboard.core.config import get_settings
from medonboard.domain.enums import NotificationFallback
from medonboard.infrastructure.persistence.repositories import (
    ApprovalRequestRepository,
    ClinicRepository,
    DoctorRepository,
    PatientRepository,
    RoleRepository,
    UserRepository,
)

from . import db as db_deps
from .notifications import get_notification_dispatcher


def _default_fallback() -> NotificationFallback:
    return NotificationFallback(get_settings().doctor_notification_fallback)


def get_onboarding_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    doctor_repo: Annotated[DoctorRepository, Depends(db_deps.get_doctor_repo_for_write)],
    clinic_repo: Annotated[ClinicRepository, Depends(db_deps.get_clinic_repo_for_write)],
    request_repo: Annotated[
        ApprovalRequestRepository, Depends(db_deps.get_approval_request_repo_for_write)
    ],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> OnboardingService:
    """Onboarding service for submissions and adjudication (transactional)."""
    store = ApprovalRequestStore(request_repo, doctor_repo, clinic_repo)
    return OnboardingService(
        user_repo,
        doctor_repo,
        clinic_repo,
        store,
        dispatcher,
        default_fallback=_default_fallback(),
    )


def get_onboarding_service_for_read(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
    doctor_repo: Annotated[DoctorRepository, Depends(db_deps.get_doctor_repo)],
    clinic_repo: Annotated[ClinicRepository, Depends(db_deps.get_clinic_repo)],
    request_repo: Annotated[
        ApprovalRequestRepository, Depends(db_deps.get_approval_request_repo)
    ],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> OnboardingService:
    """Onboarding service for status and queue listings (read session)."""
    store = ApprovalRequestStore(request_repo, doctor_repo, clinic_repo)
    return OnboardingService(
        user_repo,
        doctor_repo,
        clinic_repo,
        store,
        dispatcher,
        default_fallback=_default_fallback(),
    )


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    doctor_repo: Annotated[DoctorRepository, Depends(db_deps.get_doctor_repo_for_write)],
    clinic_repo: Annotated[ClinicRepository, Depends(db_deps.get_clinic_repo_for_write)],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> UserService:
    """User service for role selection and team members (transactional)."""
    return UserService(
        user_repo,
        doctor_repo,
        clinic_repo,
        ProfileAutoCreateService(doctor_repo, clinic_repo),
        dispatcher,
        role_repo,
    )


def get_user_service_for_read(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
    doctor_repo: Annotated[DoctorRepository, Depends(db_deps.get_doctor_repo)],
    clinic_repo: Annotated[ClinicRepository, Depends(db_deps.get_clinic_repo)],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo)],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> UserService:
    return UserService(
        user_repo,
        doctor_repo,
        clinic_repo,
        ProfileAutoCreateService(doctor_repo, clinic_repo),
        dispatcher,
        role_repo,
    )


def get_patient_service(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    patient_repo: Annotated[PatientRepository, Depends(db_deps.get_patient_repo_for_write)],
) -> PatientService:
    """Patient service for profile completion (transactional)."""
    return PatientService(user_repo, patient_repo)


def get_patient_service_for_read(
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
    patient_repo: Annotated[PatientRepository, Depends(db_deps.get_patient_repo)],
) -> PatientService:
    return PatientService(user_repo, patient_repo)
