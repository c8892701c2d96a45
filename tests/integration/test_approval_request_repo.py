"""Approval request repository integration tests. Require Postgres; session is rolled back after each test."""

import pytest

from medonboard.domain.enums import ApprovalStatus, RequestType
from medonboard.domain.value_objects.approval_scope import AdminScope
from medonboard.infrastructure.persistence.repositories.approval_request_repo import (
    ApprovalRequestRepository,
)
from medonboard.infrastructure.persistence.repositories.user_repo import UserRepository
from medonboard.shared.utils.datetime import utc_now


async def _applicant(db_session, email: str):
    users = UserRepository(db_session)
    return await users.create_user(email, "Applicant", "DOCTOR", "doctor-detail")


@pytest.mark.requires_db
async def test_upsert_pending_refreshes_existing_row(db_session) -> None:
    """A second submission for the same key updates request_data in place."""
    user = await _applicant(db_session, "repo-upsert@example.com")
    repo = ApprovalRequestRepository(db_session)

    first, created = await repo.upsert_pending(
        user.id, RequestType.DOCTOR.value, "entity-1", {"step": 1}, None
    )
    second, created_again = await repo.upsert_pending(
        user.id, RequestType.DOCTOR.value, "entity-1", {"step": 2}, None
    )

    assert created is True
    assert created_again is False
    assert second.id == first.id
    assert second.request_data == {"step": 2}
    assert [r.id for r in await repo.list_by_user(user.id)] == [first.id]


@pytest.mark.requires_db
async def test_adjudicate_only_once(db_session) -> None:
    """The conditional update matches a PENDING row once; later calls return None."""
    user = await _applicant(db_session, "repo-adjudicate@example.com")
    reviewer = await UserRepository(db_session).create_user(
        "repo-reviewer@example.com", "Reviewer", "ADMIN", "admin-role"
    )
    repo = ApprovalRequestRepository(db_session)
    request, _ = await repo.upsert_pending(
        user.id, RequestType.DOCTOR.value, "entity-2", {}, None
    )

    decided = await repo.adjudicate(
        request.id,
        AdminScope(),
        status=ApprovalStatus.APPROVED.value,
        reviewer_id=reviewer.id,
        reviewed_at=utc_now(),
    )
    again = await repo.adjudicate(
        request.id,
        AdminScope(),
        status=ApprovalStatus.REJECTED.value,
        reviewer_id=reviewer.id,
        reviewed_at=utc_now(),
        rejection_reason="late",
    )

    assert decided is not None
    assert decided.status == ApprovalStatus.APPROVED.value
    assert decided.reviewed_by == reviewer.id
    assert again is None
    assert (await repo.get_request(request.id)).status == ApprovalStatus.APPROVED.value


@pytest.mark.requires_db
async def test_admin_scope_lists_only_unrouted_rows(db_session) -> None:
    user = await _applicant(db_session, "repo-scope@example.com")
    repo = ApprovalRequestRepository(db_session)
    request, _ = await repo.upsert_pending(
        user.id, RequestType.DOCTOR.value, "entity-3", {}, None
    )
    pending = await repo.list_in_scope(AdminScope(), ApprovalStatus.PENDING.value)
    assert request.id in [r.id for r in pending]
    assert await repo.get_in_scope("missing-request", AdminScope()) is None
