"""Clinic ORM model (one-to-one with a CLINIC user)."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from medonboard.infrastructure.persistence.models.user import User


class Clinic(CuidMixin, TimestampMixin, Base):
    """Clinic profile. Table: clinic."""

    __tablename__ = "clinic"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    documents: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    user: Mapped[User] = relationship(lazy="raise")
