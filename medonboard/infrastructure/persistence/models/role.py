"""Role and RolePermission ORM models (dynamic roles)."""

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from medonboard.infrastructure.persistence.models.permission import Permission


class Role(CuidMixin, TimestampMixin, Base):
    """Role. Table: role. name is stored upper-cased and unique."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    permissions: Mapped[list[Permission]] = relationship(
        secondary="role_permission",
        order_by=(Permission.resource, Permission.action),
        lazy="raise",
        viewonly=True,
    )


class RolePermission(CuidMixin, Base):
    """Many-to-many role-permission. Table: role_permission."""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        Index("ix_role_permission_role", "role_id"),
    )
