"""Permission ORM model. One row per (resource, action)."""

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Permission(CuidMixin, TimestampMixin, Base):
    """Permission. Table: permission. Unique (resource, action)."""

    __tablename__ = "permission"

    resource: Mapped[str] = mapped_column(String(64), nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permission_resource_action"),
    )
