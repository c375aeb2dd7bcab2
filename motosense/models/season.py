"""Season model."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motosense.database import Base
from motosense.models.base import TimestampMixin


class Season(Base, TimestampMixin):
    """Season table model."""

    __tablename__ = "seasons"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="upcoming")  # upcoming/active/demo/completed
    is_simulation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    races = relationship("Race", back_populates="season")

    def __repr__(self) -> str:
        return f"<Season(id='{self.id}', year={self.year})>"
