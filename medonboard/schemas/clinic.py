"""Clinic API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from medonboard.schemas.user import UserResponse


class ClinicProfileUpdate(BaseModel):
    """Clinic fields; only fields present in the body are written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    address: str | None = Field(default=None, max_length=1000)
    registration_number: str | None = Field(default=None, max_length=64)


class ClinicDocumentsUpdate(BaseModel):
    documents: dict[str, Any]


class ClinicDoctorCreate(BaseModel):
    """Request body for a clinic adding one of its doctors."""

    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    license_number: str | None = Field(default=None, max_length=64)
    specialization: str | None = Field(default=None, max_length=255)
    qualification: str | None = Field(default=None, max_length=255)
    experience_years: int | None = Field(default=None, ge=0, le=80)


class ClinicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    email: str | None
    phone: str | None
    address: str | None
    registration_number: str | None
    documents: dict[str, Any]
    user: UserResponse | None = None
