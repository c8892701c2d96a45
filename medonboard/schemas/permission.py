"""Permission API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    resource: str
    action: str
    code: str
    description: str | None


class PermissionPair(BaseModel):
    resource: str
    action: str


class PermissionCheckRequest(BaseModel):
    """Principal is user_id or role; a stored user takes precedence."""

    user_id: str | None = None
    role: str | None = Field(default=None, max_length=64)
    resource: str = Field(..., min_length=1, max_length=64)
    action: str = Field(..., min_length=1, max_length=64)


class PermissionCheckResponse(BaseModel):
    has_permission: bool


class UserPermissionsResponse(BaseModel):
    user_id: str
    permissions: list[PermissionPair]


class SeedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created: int
    skipped: int
    total: int
