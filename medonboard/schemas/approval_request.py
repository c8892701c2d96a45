"""Approval request API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from medonboard.schemas.clinic import ClinicResponse
from medonboard.schemas.doctor import DoctorResponse


class DoctorEntityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: Literal["DOCTOR"]
    doctor: DoctorResponse


class ClinicEntityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: Literal["CLINIC"]
    clinic: ClinicResponse


class ApprovalRequestResponse(BaseModel):
    """Approval request with its entity attached (None if the entity is gone)."""

    model_config = ConfigDict(from_attributes=True)

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
    request_data: dict[str, Any]
    created_at: datetime | None
    updated_at: datetime | None
    entity: DoctorEntityResponse | ClinicEntityResponse | None = None


class RejectRequest(BaseModel):
    rejection_reason: str = Field(..., max_length=2000)


class ClinicApproveRequest(BaseModel):
    """Optional date at which the clinic wants to re-review the doctor."""

    renewal_date: datetime | None = None
