"""Patient ORM model (one-to-one with a PATIENT user)."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medonboard.infrastructure.persistence.database import Base
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from medonboard.infrastructure.persistence.models.user import User


class Patient(CuidMixin, TimestampMixin, Base):
    """Patient profile with its postal address. Table: patient.

    phone_number holds "<code> <number>" as entered.
    """

    __tablename__ = "patient"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(48), nullable=True)
    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    state: Mapped[str | None] = mapped_column(String(128), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    country: Mapped[str | None] = mapped_column(String(128), nullable=True)

    user: Mapped[User] = relationship(lazy="raise")
