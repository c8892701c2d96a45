"""User API schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserResponse(BaseModel):
    """User detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None
    role: str
    role_id: str | None
    onboarding_stage: str | None
    is_active: bool


class UserRoleUpdate(BaseModel):
    """Request body for selecting a system role (case-insensitive)."""

    role: str = Field(..., min_length=1, max_length=32)


class DynamicRoleAssign(BaseModel):
    """Request body for attaching a dynamic role to a user."""

    role_id: str = Field(..., min_length=1)


class TeamMemberCreate(BaseModel):
    """Request body for an admin adding a team member with a dynamic role."""

    name: str | None = Field(default=None, max_length=255)
    email: EmailStr
    role_id: str = Field(..., min_length=1)
