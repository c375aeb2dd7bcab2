"""Race result model."""

import enum

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin


class ResultStatus(str, enum.Enum):
    """Finishing status of a rider."""

    FINISHED = "finished"
    DNF = "dnf"
    DNS = "dns"
    DSQ = "dsq"


class RaceResult(Base, TimestampMixin):
    """Race result table model (one row per rider)."""

    __tablename__ = "race_results"
    __table_args__ = (
        UniqueConstraint("race_id", "rider_id", name="uq_race_results_race_rider"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[str] = mapped_column(String(50), ForeignKey("races.id"), nullable=False, index=True)
    rider_id: Mapped[str] = mapped_column(String(50), ForeignKey("riders.id"), nullable=False)

    position: Mapped[int] = mapped_column(Integer, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # championship points
    laps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default=ResultStatus.FINISHED.value)
    total_time: Mapped[str | None] = mapped_column(String(20), nullable=True)  # "20:15.234"
    best_lap_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    gap: Mapped[str | None] = mapped_column(String(20), nullable=True)  # "+5.234" / "1 lap"

    # Relationships
    race = relationship("Race", back_populates="results")
    rider = relationship("Rider", back_populates="results")

    def __repr__(self) -> str:
        return f"<RaceResult(race_id='{self.race_id}', rider_id='{self.rider_id}', position={self.position})>"
