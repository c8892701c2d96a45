"""Doctor API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from medonboard.schemas.clinic import ClinicResponse
from medonboard.schemas.user import UserResponse


class DoctorProfileUpdate(BaseModel):
    """Doctor fields; only fields present in the body are written."""

    license_number: str | None = Field(default=None, min_length=1, max_length=64)
    specialization: str | None = Field(default=None, max_length=255)
    qualification: str | None = Field(default=None, max_length=255)
    experience_years: int | None = Field(default=None, ge=0, le=80)
    professional_info: dict[str, Any] | None = None


class DoctorDocumentsUpdate(BaseModel):
    documents: dict[str, Any]


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    clinic_id: str | None
    license_number: str | None
    specialization: str | None
    qualification: str | None
    experience_years: int | None
    documents: dict[str, Any]
    professional_info: dict[str, Any]
    user: UserResponse | None = None
    clinic: ClinicResponse | None = None
