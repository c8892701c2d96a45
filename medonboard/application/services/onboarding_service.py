"""Onboarding state machine: profile submissions, routing and adjudication.

A doctor linked to a clinic is reviewed by that clinic; every other doctor
and every clinic is reviewed by admins. Each operation computes the next
stage from the stage stored before any write, so an invalid transition is
rejected with nothing persisted. Notification failures never undo a state
change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from medonboard.application.dtos.approval_request import ApprovalRequestResult
from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.doctor import DoctorResult
from medonboard.application.dtos.onboarding import OnboardingResult
from medonboard.application.dtos.user import UserResult
from medonboard.application.interfaces.repositories import (
    IClinicRepository,
    IDoctorRepository,
    IUserRepository,
)
from medonboard.application.services.approval_request_store import (
    ApprovalRequestStore,
)
from medonboard.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from medonboard.domain.enums import (
    ApprovalStatus,
    NotificationFallback,
    NotificationTarget,
    OnboardingEvent,
    OnboardingStage,
    RequestType,
    SystemRole,
)
from medonboard.domain.exceptions import (
    EmailAlreadyExistsException,
    LicenseNumberConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from medonboard.domain.onboarding import next_stage
from medonboard.domain.value_objects.approval_scope import (
    AdminScope,
    ApprovalScope,
    ClinicScope,
)
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced
from medonboard.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)

_APPROVED_TEMPLATES = {
    RequestType.DOCTOR.value: "practitioner.account_approved",
    RequestType.CLINIC.value: "clinic.account_approved",
}
_REJECTED_TEMPLATES = {
    RequestType.DOCTOR.value: "practitioner.account_rejected",
    RequestType.CLINIC.value: "clinic.account_rejected",
}
_APPROVED_STAGES = (
    OnboardingStage.APPROVED_BY_ADMIN.value,
    OnboardingStage.APPROVED_BY_CLINIC.value,
)


def _require_reason(reason: str | None) -> str:
    if reason is None or not reason.strip():
        raise ValidationException("Rejection reason is required", field="rejection_reason")
    return reason.strip()


def _future_renewal_date(renewal_date: datetime | None) -> datetime | None:
    value = ensure_utc(renewal_date)
    if value is not None and value <= utc_now():
        raise ValidationException("Renewal date must be in the future", field="renewal_date")
    return value


class OnboardingService:
    """Drives onboarding_stage and approval requests for doctors and clinics."""

    def __init__(
        self,
        user_repo: IUserRepository,
        doctor_repo: IDoctorRepository,
        clinic_repo: IClinicRepository,
        store: ApprovalRequestStore,
        dispatcher: NotificationDispatcher,
        default_fallback: NotificationFallback = NotificationFallback.ADMIN,
    ) -> None:
        self.user_repo = user_repo
        self.doctor_repo = doctor_repo
        self.clinic_repo = clinic_repo
        self.store = store
        self.dispatcher = dispatcher
        self.default_fallback = default_fallback

    # Lookups

    async def _require_user(self, user_id: str) -> UserResult:
        user = await self.user_repo.get_user(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def doctor_for_user(self, user_id: str) -> DoctorResult:
        """Doctor profile owned by user_id; ResourceNotFoundException if none."""
        doctor = await self.doctor_repo.get_by_user_id(user_id)
        if doctor is None:
            raise ResourceNotFoundException("doctor", user_id)
        return doctor

    async def clinic_for_user(self, user_id: str) -> ClinicResult:
        """Clinic profile owned by user_id; ResourceNotFoundException if none."""
        clinic = await self.clinic_repo.get_by_user_id(user_id)
        if clinic is None:
            raise ResourceNotFoundException("clinic", user_id)
        return clinic

    async def _clinic_contact(self, doctor: DoctorResult) -> tuple[str | None, str | None]:
        """(contact email, clinic name) for a clinic-linked doctor."""
        clinic = doctor.clinic
        if clinic is None and doctor.clinic_id is not None:
            clinic = await self.clinic_repo.get_clinic(doctor.clinic_id)
        if clinic is None:
            return None, None
        return clinic.contact_email, clinic.name

    # Doctor submissions

    async def _submit_doctor(
        self,
        user: UserResult,
        doctor: DoctorResult,
        request_data: dict[str, Any],
        *,
        to_clinic: bool,
        target_stage: OnboardingStage,
        fallback: NotificationFallback,
    ) -> OnboardingResult:
        clinic_id = doctor.clinic_id if to_clinic else None
        request = await self.store.submit(
            user.id, RequestType.DOCTOR, doctor.id, request_data, clinic_id=clinic_id
        )
        await self.user_repo.set_onboarding_stage(user.id, target_stage.value)

        payload: dict[str, Any] = {
            "applicant_name": user.name,
            "applicant_email": user.email,
        }
        if to_clinic:
            contact, clinic_name = await self._clinic_contact(doctor)
            payload["clinic_name"] = clinic_name
            if contact:
                target, recipients, template = (
                    NotificationTarget.CLINIC,
                    [contact],
                    "clinic.new_practitioner_request",
                )
            else:
                logger.warning(
                    "Clinic %s has no contact email; falling back to %s",
                    doctor.clinic_id,
                    fallback.value,
                )
                target, recipients, template = await self._fallback_recipients(
                    user, fallback
                )
        else:
            target = NotificationTarget.ADMIN
            recipients = await self.user_repo.get_admin_emails()
            template = "admin.new_practitioner"

        await self.dispatcher.notify(target, recipients, template, {"name": user.name, **payload})
        return OnboardingResult(
            profile=doctor,
            onboarding_stage=target_stage.value,
            notification_target=target,
            request=request,
        )

    async def _fallback_recipients(
        self, user: UserResult, fallback: NotificationFallback
    ) -> tuple[NotificationTarget, list[str], str]:
        if fallback is NotificationFallback.SELF:
            return NotificationTarget.SELF, [user.email], "practitioner.application_received"
        admins = await self.user_repo.get_admin_emails()
        return NotificationTarget.ADMIN, admins, "admin.new_practitioner"

    @traced("onboarding.update_doctor_profile")
    async def update_doctor_profile(
        self,
        user_id: str,
        data: dict[str, Any],
        *,
        fallback: NotificationFallback | None = None,
    ) -> OnboardingResult:
        """Persist doctor changes and route them for review.

        Clinic-linked doctors go to their clinic (CLINIC_APPROVAL_PENDING);
        others go to admins (DOCTOR_APPROVAL_PENDING).
        """
        user = await self._require_user(user_id)
        doctor = await self.doctor_for_user(user_id)
        to_clinic = doctor.has_clinic
        event = (
            OnboardingEvent.DOCTOR_SUBMITTED_TO_CLINIC
            if to_clinic
            else OnboardingEvent.DOCTOR_SUBMITTED_TO_ADMIN
        )
        target_stage = next_stage(user.onboarding_stage, event)
        updated = await self.doctor_repo.update_doctor(doctor.id, data) if data else doctor
        return await self._submit_doctor(
            user,
            updated,
            dict(data),
            to_clinic=to_clinic,
            target_stage=target_stage,
            fallback=fallback or self.default_fallback,
        )

    @traced("onboarding.submit_doctor_documents")
    async def submit_doctor_documents(
        self,
        user_id: str,
        documents: dict[str, Any],
        *,
        fallback: NotificationFallback | None = None,
    ) -> OnboardingResult:
        """Persist documents; route to the clinic only from doctor-clinic-detail."""
        user = await self._require_user(user_id)
        doctor = await self.doctor_for_user(user_id)
        to_clinic = (
            user.onboarding_stage == OnboardingStage.DOCTOR_CLINIC_DETAIL.value
            and doctor.has_clinic
        )
        event = (
            OnboardingEvent.DOCTOR_SUBMITTED_TO_CLINIC
            if to_clinic
            else OnboardingEvent.DOCTOR_SUBMITTED_TO_ADMIN
        )
        target_stage = next_stage(user.onboarding_stage, event)
        updated = await self.doctor_repo.update_doctor(doctor.id, {"documents": documents})
        return await self._submit_doctor(
            user,
            updated,
            {"documents": documents},
            to_clinic=to_clinic,
            target_stage=target_stage,
            fallback=fallback or self.default_fallback,
        )

    async def update_doctor_simple(
        self, user_id: str, data: dict[str, Any]
    ) -> OnboardingResult:
        """Persist doctor changes without review; onboarding_stage is untouched."""
        user = await self._require_user(user_id)
        doctor = await self.doctor_for_user(user_id)
        updated = await self.doctor_repo.update_doctor(doctor.id, data) if data else doctor
        return OnboardingResult(
            profile=updated,
            onboarding_stage=user.onboarding_stage,
            notification_target=NotificationTarget.NONE,
        )

    # Clinic submissions

    @traced("onboarding.update_clinic_profile")
    async def update_clinic_profile(
        self, user_id: str, data: dict[str, Any]
    ) -> OnboardingResult:
        """Persist clinic changes and queue them for admin review."""
        user = await self._require_user(user_id)
        clinic = await self.clinic_for_user(user_id)
        target_stage = next_stage(user.onboarding_stage, OnboardingEvent.CLINIC_SUBMITTED)
        updated = await self.clinic_repo.update_clinic(clinic.id, data) if data else clinic
        request = await self.store.submit(
            user.id, RequestType.CLINIC, updated.id, dict(data), clinic_id=None
        )
        await self.user_repo.set_onboarding_stage(user.id, target_stage.value)
        await self.dispatcher.notify(
            NotificationTarget.ADMIN,
            await self.user_repo.get_admin_emails(),
            "admin.new_clinic",
            {"clinic_name": updated.name, "applicant_email": updated.contact_email},
        )
        return OnboardingResult(
            profile=updated,
            onboarding_stage=target_stage.value,
            notification_target=NotificationTarget.ADMIN,
            request=request,
        )

    async def notify_clinic_documents_update(
        self, user_id: str, documents: dict[str, Any]
    ) -> OnboardingResult:
        """Persist clinic documents and tell admins; no request, stage unchanged."""
        user = await self._require_user(user_id)
        clinic = await self.clinic_for_user(user_id)
        updated = await self.clinic_repo.update_clinic(clinic.id, {"documents": documents})
        await self.dispatcher.notify(
            NotificationTarget.ADMIN,
            await self.user_repo.get_admin_emails(),
            "admin.clinic_documents_updated",
            {"clinic_name": updated.name, "applicant_email": updated.contact_email},
        )
        return OnboardingResult(
            profile=updated,
            onboarding_stage=user.onboarding_stage,
            notification_target=NotificationTarget.ADMIN,
        )

    async def update_clinic_simple(
        self, user_id: str, data: dict[str, Any]
    ) -> OnboardingResult:
        user = await self._require_user(user_id)
        clinic = await self.clinic_for_user(user_id)
        updated = await self.clinic_repo.update_clinic(clinic.id, data) if data else clinic
        return OnboardingResult(
            profile=updated,
            onboarding_stage=user.onboarding_stage,
            notification_target=NotificationTarget.NONE,
        )

    # Adjudication

    async def _adjudicate(
        self,
        request_id: str,
        scope: ApprovalScope,
        reviewer_id: str,
        *,
        status: ApprovalStatus,
        event: OnboardingEvent,
        rejection_reason: str | None = None,
        renewal_date: datetime | None = None,
    ) -> ApprovalRequestResult:
        pending = await self.store.get_in_scope(request_id, scope)
        if pending is None or pending.status != ApprovalStatus.PENDING.value:
            raise ResourceNotFoundException("approval_request", request_id)
        user = await self._require_user(pending.user_id)
        target_stage = next_stage(user.onboarding_stage, event)

        decided = await self.store.adjudicate(
            request_id,
            scope,
            status=status,
            reviewer_id=reviewer_id,
            reviewed_at=utc_now(),
            rejection_reason=rejection_reason,
            renewal_date=renewal_date,
        )
        if decided is None:
            # Adjudicated concurrently between the read and the conditional update.
            raise ResourceNotFoundException("approval_request", request_id)
        await self.user_repo.set_onboarding_stage(user.id, target_stage.value)
        logger.info(
            "Approval request %s %s by %s; user %s now %s",
            request_id,
            status.value,
            reviewer_id,
            user.id,
            target_stage.value,
        )

        templates = (
            _APPROVED_TEMPLATES if status is ApprovalStatus.APPROVED else _REJECTED_TEMPLATES
        )
        template = templates.get(decided.request_type)
        if template is not None:
            await self.dispatcher.notify(
                NotificationTarget.SELF,
                [user.email],
                template,
                {
                    "name": user.name,
                    "reason": rejection_reason,
                    "renewal_date": renewal_date.date().isoformat() if renewal_date else None,
                },
            )
        return decided

    @traced("onboarding.approve")
    async def approve(self, request_id: str, reviewer_id: str) -> ApprovalRequestResult:
        """Approve an admin-queue request; the user moves to APPROVED_BY_ADMIN."""
        return await self._adjudicate(
            request_id,
            AdminScope(),
            reviewer_id,
            status=ApprovalStatus.APPROVED,
            event=OnboardingEvent.ADMIN_APPROVED,
        )

    @traced("onboarding.reject")
    async def reject(
        self, request_id: str, reviewer_id: str, reason: str | None
    ) -> ApprovalRequestResult:
        """Reject an admin-queue request with a non-empty reason."""
        reason = _require_reason(reason)
        return await self._adjudicate(
            request_id,
            AdminScope(),
            reviewer_id,
            status=ApprovalStatus.REJECTED,
            event=OnboardingEvent.ADMIN_REJECTED,
            rejection_reason=reason,
        )

    @traced("onboarding.approve_by_clinic")
    async def approve_by_clinic(
        self,
        request_id: str,
        clinic_user_id: str,
        renewal_date: datetime | None = None,
    ) -> ApprovalRequestResult:
        """Approve a doctor request in the caller's clinic queue.

        Requests of other clinics are reported as not found.
        """
        renewal = _future_renewal_date(renewal_date)
        clinic = await self.clinic_for_user(clinic_user_id)
        return await self._adjudicate(
            request_id,
            ClinicScope(clinic.id),
            clinic_user_id,
            status=ApprovalStatus.APPROVED,
            event=OnboardingEvent.CLINIC_APPROVED_DOCTOR,
            renewal_date=renewal,
        )

    @traced("onboarding.reject_by_clinic")
    async def reject_by_clinic(
        self, request_id: str, clinic_user_id: str, reason: str | None
    ) -> ApprovalRequestResult:
        reason = _require_reason(reason)
        clinic = await self.clinic_for_user(clinic_user_id)
        return await self._adjudicate(
            request_id,
            ClinicScope(clinic.id),
            clinic_user_id,
            status=ApprovalStatus.REJECTED,
            event=OnboardingEvent.CLINIC_REJECTED_DOCTOR,
            rejection_reason=reason,
        )

    # Clinic-managed doctors and status views

    @traced("onboarding.create_doctor_for_clinic")
    async def create_doctor_for_clinic(
        self,
        clinic_user_id: str,
        email: str,
        name: str | None,
        fields: dict[str, Any] | None = None,
    ) -> DoctorResult:
        """Create a DOCTOR user linked to the caller's clinic and invite them."""
        clinic = await self.clinic_for_user(clinic_user_id)
        fields = dict(fields or {})
        if await self.user_repo.get_by_email(email) is not None:
            raise EmailAlreadyExistsException()
        license_number = fields.get("license_number")
        if license_number and await self.doctor_repo.get_by_license_number(license_number):
            raise LicenseNumberConflictException(license_number)

        stage = next_stage(None, OnboardingEvent.DOCTOR_INVITED_BY_CLINIC)
        user = await self.user_repo.create_user(
            email, name, SystemRole.DOCTOR.value, stage.value
        )
        doctor = await self.doctor_repo.create_doctor(
            user.id, clinic_id=clinic.id, fields=fields
        )
        logger.info("Clinic %s created doctor %s (user %s)", clinic.id, doctor.id, user.id)
        await self.dispatcher.notify(
            NotificationTarget.SELF,
            [user.email],
            "practitioner.profile_setup_invitation",
            {"name": name, "email": user.email, "clinic_name": clinic.name},
        )
        return doctor

    async def get_my_request_status(self, user_id: str) -> ApprovalRequestResult | None:
        """The user's most recently updated request with its entity attached."""
        return await self.store.get_latest_by_user(user_id)

    async def list_my_requests(
        self, user_id: str, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        """Every request the user submitted, newest first."""
        return await self.store.get_by_user(user_id, status)

    async def get_my_request(self, user_id: str, request_id: str) -> ApprovalRequestResult:
        """One of the user's own requests; another user's request is not found."""
        found = await self.store.get_by_id(request_id)
        if found is None or found.user_id != user_id:
            raise ResourceNotFoundException("approval_request", request_id)
        return found

    async def list_clinic_doctors(self, clinic_user_id: str) -> list[DoctorResult]:
        """Approved doctors linked to the caller's clinic."""
        clinic = await self.clinic_for_user(clinic_user_id)
        return await self.doctor_repo.list_by_clinic(clinic.id, _APPROVED_STAGES)

    async def get_clinic_doctor(self, clinic_user_id: str, doctor_id: str) -> DoctorResult:
        clinic = await self.clinic_for_user(clinic_user_id)
        doctor = await self.doctor_repo.get_doctor(doctor_id)
        if (
            doctor is None
            or doctor.clinic_id != clinic.id
            or doctor.user is None
            or doctor.user.onboarding_stage not in _APPROVED_STAGES
        ):
            raise ResourceNotFoundException("doctor", doctor_id)
        return doctor

    async def list_clinic_requests(
        self, clinic_user_id: str, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        clinic = await self.clinic_for_user(clinic_user_id)
        return await self.store.get_by_status(status, ClinicScope(clinic.id))

    async def list_admin_requests(
        self, status: str | None = ApprovalStatus.PENDING.value
    ) -> list[ApprovalRequestResult]:
        if status == ApprovalStatus.PENDING.value:
            return await self.store.get_pending(AdminScope())
        return await self.store.get_by_status(status, AdminScope())

    async def get_admin_request(self, request_id: str) -> ApprovalRequestResult:
        found = await self.store.get_in_scope(request_id, AdminScope())
        if found is None:
            raise ResourceNotFoundException("approval_request", request_id)
        return found

    async def get_clinic_request(
        self, request_id: str, clinic_user_id: str
    ) -> ApprovalRequestResult:
        """A doctor request routed to the caller's clinic; NotFound outside that queue."""
        clinic = await self.clinic_for_user(clinic_user_id)
        found = await self.store.get_clinic_request_by_id(request_id, clinic.id)
        if found is None:
            raise ResourceNotFoundException("approval_request", request_id)
        return found
