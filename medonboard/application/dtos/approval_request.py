"""DTOs for approval requests and the entity attached to them."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.doctor import DoctorResult


@dataclass(frozen=True)
class DoctorEntity:
    """Attached entity for request_type DOCTOR."""

    doctor: DoctorResult
    kind: str = "DOCTOR"


@dataclass(frozen=True)
class ClinicEntity:
    """Attached entity for request_type CLINIC."""

    clinic: ClinicResult
    kind: str = "CLINIC"


type ApprovalEntity = DoctorEntity | ClinicEntity


@dataclass(frozen=True)
class ApprovalRequestResult:
    """Approval request read-model. entity is set only after attach_entity."""

    id: str
    request_type: str
    user_id: str
    entity_id: str
    clinic_id: str | None
    status: str
    rejection_reason: str | None
    reviewed_by: str | None
    reviewed_at: datetime | None
    renewal_date: datetime | None
    request_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    entity: ApprovalEntity | None = None
