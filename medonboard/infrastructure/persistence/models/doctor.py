"""Doctor ORM model (one-to-one with a DOCTOR user, optional clinic link)."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.clinic import Clinic
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from medonboard.infrastructure.persistence.models.user import User


class Doctor(CuidMixin, TimestampMixin, Base):
    """Doctor profile. Table: doctor. clinic_id routes approvals to that clinic."""

    __tablename__ = "doctor"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    clinic_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("clinic.id", ondelete="SET NULL"), nullable=True, index=True
    )
    license_number: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True
    )
    specialization: Mapped[str | None] = mapped_column(String(255), nullable=True)
    qualification: Mapped[str | None] = mapped_column(String(255), nullable=True)
    experience_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    documents: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    professional_info: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    user: Mapped[User] = relationship(lazy="raise")
    clinic: Mapped[Clinic | None] = relationship(lazy="raise")
