"""Rider model."""

import enum

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin


class RiderStatus(str, enum.Enum):
    """Rider availability."""

    ACTIVE = "active"
    INJURED = "injured"
    RETIRED = "retired"


class Rider(Base, TimestampMixin):
    """Rider table model."""

    __tablename__ = "riders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)  # e.g. jett-lawrence
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    team: Mapped[str] = mapped_column(String(100), nullable=False)
    series: Mapped[str] = mapped_column(String(10), nullable=False)  # sx/mx/both
    nationality: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RiderStatus.ACTIVE.value)
    injury_details: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    results = relationship("RaceResult", back_populates="rider")

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Rider(id='{self.id}', number={self.number})>"
