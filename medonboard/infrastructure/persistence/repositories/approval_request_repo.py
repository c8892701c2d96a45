"""Approval request repository.

Every scoped query goes through _scope_clause: the admin queue is exactly the
rows with clinic_id IS NULL, a clinic queue is exactly the DOCTOR rows carrying
that clinic_id.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, func, select, update as sa_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.application.dtos.approval_request import ApprovalRequestResult
from medonboard.domain.enums import ApprovalStatus, RequestType
from medonboard.domain.value_objects.approval_scope import (
    AdminScope,
    ApprovalScope,
    ClinicScope,
)
from medonboard.infrastructure.persistence.models.approval_request import ApprovalRequest
from medonboard.infrastructure.persistence.repositories.base import BaseRepository
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.utils.datetime import utc_now

logger = get_logger(__name__)


def _request_to_result(r: ApprovalRequest) -> ApprovalRequestResult:
    return ApprovalRequestResult(
        id=r.id,
        request_type=r.request_type,
        user_id=r.user_id,
        entity_id=r.entity_id,
        clinic_id=r.clinic_id,
        status=r.status,
        rejection_reason=r.rejection_reason,
        reviewed_by=r.reviewed_by,
        reviewed_at=r.reviewed_at,
        renewal_date=r.renewal_date,
        request_data=dict(r.request_data or {}),
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _scope_clause(scope: ApprovalScope) -> ColumnElement[bool]:
    if isinstance(scope, ClinicScope):
        return and_(
            ApprovalRequest.clinic_id == scope.clinic_id,
            ApprovalRequest.request_type == RequestType.DOCTOR.value,
        )
    if isinstance(scope, AdminScope):
        return ApprovalRequest.clinic_id.is_(None)
    raise TypeError(f"Unsupported approval scope: {scope!r}")


class ApprovalRequestRepository(BaseRepository[ApprovalRequest]):
    """Approval request persistence with idempotent pending submission."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ApprovalRequest)

    def _select(self):
        return select(ApprovalRequest).execution_options(populate_existing=True)

    async def _find_pending(
        self,
        user_id: str,
        request_type: str,
        entity_id: str,
        clinic_id: str | None,
    ) -> ApprovalRequest | None:
        clinic_match = (
            ApprovalRequest.clinic_id.is_(None)
            if clinic_id is None
            else ApprovalRequest.clinic_id == clinic_id
        )
        result = await self.db.execute(
            self._select().where(
                ApprovalRequest.user_id == user_id,
                ApprovalRequest.entity_id == entity_id,
                ApprovalRequest.request_type == request_type,
                ApprovalRequest.status == ApprovalStatus.PENDING.value,
                clinic_match,
            )
        )
        return result.scalars().first()

    async def _refresh(
        self, row: ApprovalRequest, request_data: dict[str, Any]
    ) -> ApprovalRequestResult:
        row.request_data = dict(request_data)
        row.updated_at = utc_now()
        return _request_to_result(await self.update(row))

    async def upsert_pending(
        self,
        user_id: str,
        request_type: str,
        entity_id: str,
        request_data: dict[str, Any],
        clinic_id: str | None,
    ) -> tuple[ApprovalRequestResult, bool]:
        """Refresh the matching PENDING row or insert one; returns (row, created).

        A concurrent insert that loses on the partial unique index is resolved
        by re-reading the winner and refreshing it instead.
        """
        existing = await self._find_pending(user_id, request_type, entity_id, clinic_id)
        if existing is not None:
            return await self._refresh(existing, request_data), False

        row = ApprovalRequest(
            request_type=request_type,
            user_id=user_id,
            entity_id=entity_id,
            clinic_id=clinic_id,
            status=ApprovalStatus.PENDING.value,
            request_data=dict(request_data),
        )
        try:
            async with self.db.begin_nested():
                created = await self.create(row)
        except IntegrityError:
            winner = await self._find_pending(user_id, request_type, entity_id, clinic_id)
            if winner is None:
                raise
            logger.info(
                "Concurrent pending %s request for user %s; refreshing %s",
                request_type,
                user_id,
                winner.id,
            )
            return await self._refresh(winner, request_data), False
        return _request_to_result(created), True

    async def get_request(self, request_id: str) -> ApprovalRequestResult | None:
        result = await self.db.execute(
            self._select().where(ApprovalRequest.id == request_id)
        )
        row = result.scalar_one_or_none()
        return _request_to_result(row) if row else None

    async def get_in_scope(
        self, request_id: str, scope: ApprovalScope
    ) -> ApprovalRequestResult | None:
        result = await self.db.execute(
            self._select().where(ApprovalRequest.id == request_id, _scope_clause(scope))
        )
        row = result.scalar_one_or_none()
        return _request_to_result(row) if row else None

    async def list_in_scope(
        self, scope: ApprovalScope, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        q = self._select().where(_scope_clause(scope))
        if status is not None:
            q = q.where(ApprovalRequest.status == status)
        result = await self.db.execute(q.order_by(ApprovalRequest.created_at.desc()))
        return [_request_to_result(r) for r in result.scalars().all()]

    async def list_by_user(
        self, user_id: str, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        q = self._select().where(ApprovalRequest.user_id == user_id)
        if status is not None:
            q = q.where(ApprovalRequest.status == status)
        result = await self.db.execute(q.order_by(ApprovalRequest.created_at.desc()))
        return [_request_to_result(r) for r in result.scalars().all()]

    async def get_latest_by_user(self, user_id: str) -> ApprovalRequestResult | None:
        result = await self.db.execute(
            self._select()
            .where(ApprovalRequest.user_id == user_id)
            .order_by(ApprovalRequest.updated_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _request_to_result(row) if row else None

    async def adjudicate(
        self,
        request_id: str,
        scope: ApprovalScope,
        *,
        status: str,
        reviewer_id: str,
        reviewed_at: datetime,
        rejection_reason: str | None = None,
        renewal_date: datetime | None = None,
    ) -> ApprovalRequestResult | None:
        """Conditionally move a PENDING in-scope row to status.

        Returns None when no row matched: unknown id, out of scope, or already
        adjudicated. Only one concurrent caller can win.
        """
        result = await self.db.execute(
            sa_update(ApprovalRequest)
            .where(
                ApprovalRequest.id == request_id,
                ApprovalRequest.status == ApprovalStatus.PENDING.value,
                _scope_clause(scope),
            )
            .values(
                status=status,
                reviewed_by=reviewer_id,
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
                renewal_date=renewal_date,
                updated_at=func.now(),
            )
            .returning(ApprovalRequest.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            return None
        return await self.get_request(request_id)
