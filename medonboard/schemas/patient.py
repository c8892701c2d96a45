"""Patient API schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class PatientProfileUpdate(BaseModel):
    """Patient fields; only fields present in the body are written.

    phone_code and phone_number are stored together as "<code> <number>".
    """

    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=32)
    phone_code: str | None = Field(default=None, max_length=8)
    phone_number: str | None = Field(default=None, max_length=32)
    street_address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=128)
    state: str | None = Field(default=None, max_length=128)
    postal_code: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=128)


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    date_of_birth: date | None
    gender: str | None
    phone_number: str | None
    phone_code: str | None = None
    phone_local_number: str | None = None
    street_address: str | None
    city: str | None
    state: str | None
    postal_code: str | None
    country: str | None


class PatientOnboardingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile: PatientResponse
    onboarding_stage: str
