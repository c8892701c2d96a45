"""Approval request store: idempotent submission and scoped queries.

Scoping is applied twice for clinic queues. The repository hard-filters on
request_type DOCTOR and clinic_id, then every row is post-filtered on the
attached entity so a request whose doctor has moved to another clinic (or
whose entity is not a doctor) never leaks into a clinic's view.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any

from medonboard.application.dtos.approval_request import (
    ApprovalRequestResult,
    ClinicEntity,
    DoctorEntity,
)
from medonboard.application.interfaces.repositories import (
    IApprovalRequestRepository,
    IClinicRepository,
    IDoctorRepository,
)
from medonboard.domain.enums import ApprovalStatus, RequestType
from medonboard.domain.exceptions import ValidationException
from medonboard.domain.value_objects.approval_scope import (
    ApprovalScope,
    ClinicScope,
    validate_request_scope,
)
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced

logger = get_logger(__name__)


def _parse_request_type(value: RequestType | str) -> RequestType:
    try:
        return RequestType(value.upper() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationException(
            f"Invalid request type: {value!r}", field="request_type"
        ) from None


def _parse_status(value: ApprovalStatus | str) -> ApprovalStatus:
    try:
        return ApprovalStatus(value.upper() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationException(f"Invalid status: {value!r}", field="status") from None


def belongs_to_clinic(request: ApprovalRequestResult, clinic_id: str) -> bool:
    """True if request is a DOCTOR request whose attached doctor is linked to clinic_id."""
    if request.request_type != RequestType.DOCTOR.value or request.clinic_id != clinic_id:
        return False
    entity = request.entity
    return isinstance(entity, DoctorEntity) and entity.doctor.clinic_id == request.clinic_id


class ApprovalRequestStore:
    """Reads and writes approval requests; every read attaches the entity."""

    def __init__(
        self,
        request_repo: IApprovalRequestRepository,
        doctor_repo: IDoctorRepository,
        clinic_repo: IClinicRepository,
    ) -> None:
        self.request_repo = request_repo
        self.doctor_repo = doctor_repo
        self.clinic_repo = clinic_repo

    @traced("approval_requests.submit")
    async def submit(
        self,
        user_id: str,
        request_type: RequestType | str,
        entity_id: str,
        data: dict[str, Any],
        clinic_id: str | None = None,
    ) -> ApprovalRequestResult:
        """Create a PENDING request, or refresh request_data of the matching one."""
        rtype = _parse_request_type(request_type)
        validate_request_scope(rtype, clinic_id)
        row, created = await self.request_repo.upsert_pending(
            user_id=user_id,
            request_type=rtype.value,
            entity_id=entity_id,
            request_data=dict(data),
            clinic_id=clinic_id,
        )
        logger.info(
            "%s %s approval request %s (user=%s, clinic=%s)",
            "Created" if created else "Refreshed",
            rtype.value,
            row.id,
            user_id,
            clinic_id,
        )
        return row

    async def attach_entity(self, request: ApprovalRequestResult) -> ApprovalRequestResult:
        """Return request with entity resolved from request_type; unknown types stay unset."""
        entity: DoctorEntity | ClinicEntity | None = None
        if request.request_type == RequestType.DOCTOR.value:
            doctor = await self.doctor_repo.get_doctor(request.entity_id)
            entity = DoctorEntity(doctor) if doctor else None
        elif request.request_type == RequestType.CLINIC.value:
            clinic = await self.clinic_repo.get_clinic(request.entity_id)
            entity = ClinicEntity(clinic) if clinic else None
        else:
            logger.warning(
                "Approval request %s has unknown type %r", request.id, request.request_type
            )
        return replace(request, entity=entity)

    async def _attach_scoped(
        self, rows: list[ApprovalRequestResult], scope: ApprovalScope
    ) -> list[ApprovalRequestResult]:
        attached = [await self.attach_entity(r) for r in rows]
        if not isinstance(scope, ClinicScope):
            return attached
        visible = [r for r in attached if belongs_to_clinic(r, scope.clinic_id)]
        if len(visible) != len(attached):
            logger.warning(
                "Dropped %d approval requests outside clinic %s after entity check",
                len(attached) - len(visible),
                scope.clinic_id,
            )
        return visible

    async def get_pending(self, scope: ApprovalScope) -> list[ApprovalRequestResult]:
        return await self.get_by_status(ApprovalStatus.PENDING, scope)

    async def get_by_status(
        self, status: ApprovalStatus | str | None, scope: ApprovalScope
    ) -> list[ApprovalRequestResult]:
        """Requests in scope, newest first; None lists every status."""
        status_value = _parse_status(status).value if status is not None else None
        rows = await self.request_repo.list_in_scope(scope, status_value)
        return await self._attach_scoped(rows, scope)

    async def get_by_id(self, request_id: str) -> ApprovalRequestResult | None:
        row = await self.request_repo.get_request(request_id)
        return await self.attach_entity(row) if row else None

    async def get_in_scope(
        self, request_id: str, scope: ApprovalScope
    ) -> ApprovalRequestResult | None:
        row = await self.request_repo.get_in_scope(request_id, scope)
        if row is None:
            return None
        visible = await self._attach_scoped([row], scope)
        return visible[0] if visible else None

    async def get_clinic_request_by_id(
        self, request_id: str, clinic_id: str
    ) -> ApprovalRequestResult | None:
        return await self.get_in_scope(request_id, ClinicScope(clinic_id))

    async def get_by_user(
        self, user_id: str, status: ApprovalStatus | str | None = None
    ) -> list[ApprovalRequestResult]:
        status_value = _parse_status(status).value if status is not None else None
        rows = await self.request_repo.list_by_user(user_id, status_value)
        return [await self.attach_entity(r) for r in rows]

    async def get_latest_by_user(self, user_id: str) -> ApprovalRequestResult | None:
        row = await self.request_repo.get_latest_by_user(user_id)
        return await self.attach_entity(row) if row else None

    async def adjudicate(
        self,
        request_id: str,
        scope: ApprovalScope,
        *,
        status: ApprovalStatus,
        reviewer_id: str,
        reviewed_at: datetime,
        rejection_reason: str | None = None,
        renewal_date: datetime | None = None,
    ) -> ApprovalRequestResult | None:
        """Move a PENDING in-scope request to status; None if it was not PENDING."""
        row = await self.request_repo.adjudicate(
            request_id,
            scope,
            status=status.value,
            reviewer_id=reviewer_id,
            reviewed_at=reviewed_at,
            rejection_reason=rejection_reason,
            renewal_date=renewal_date,
        )
        return await self.attach_entity(row) if row else None
