"""ApprovalRequest ORM model.

At most one PENDING row per (user_id, entity_id, request_type, clinic_id) is
enforced by a partial unique index; clinic-scoped rows must be DOCTOR type.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class ApprovalRequest(CuidMixin, TimestampMixin, Base):
    """Approval request. Table: approval_request."""

    __tablename__ = "approval_request"

    request_type: Mapped[str] = mapped_column(String(16), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    clinic_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("clinic.id", ondelete="CASCADE"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, server_default=text("'PENDING'")
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    renewal_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    request_data: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    __table_args__ = (
        CheckConstraint(
            "clinic_id IS NULL OR request_type = 'DOCTOR'",
            name="ck_approval_request_clinic_scope_doctor_only",
        ),
        Index("ix_approval_request_queue", "clinic_id", "status", "request_type"),
    )


Index(
    "uq_approval_request_pending",
    ApprovalRequest.user_id,
    ApprovalRequest.entity_id,
    ApprovalRequest.request_type,
    func.coalesce(ApprovalRequest.clinic_id, ""),
    unique=True,
    postgresql_where=ApprovalRequest.status == "PENDING",
)
