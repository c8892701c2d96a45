"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from medonboard.schemas.permission import PermissionResponse


class RoleCreate(BaseModel):
    """Request body for creating a dynamic role."""

    name: str = Field(..., min_length=1, max_length=64)
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    permission_ids: list[str] = Field(default_factory=list, max_length=200)


class RoleUpdate(BaseModel):
    """Partial update; permission_ids, when present, replaces the whole set."""

    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    permission_ids: list[str] | None = Field(default=None, max_length=200)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str | None
    description: str | None
    is_system: bool
    permissions: list[PermissionResponse] = Field(default_factory=list)
