"""Critical IT service model."""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.asset import Asset


class BusinessImpact(str, enum.Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ITService(Base, TimestampMixin):
    """Business-facing IT service delivered by a group of assets."""

    __tablename__ = "it_services"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(100), default="", index=True)
    business_impact: Mapped[BusinessImpact] = mapped_column(
        Enum(BusinessImpact), default=BusinessImpact.MEDIUM
    )
    responsible: Mapped[str] = mapped_column(String(255), default="")

    assets: Mapped[list["Asset"]] = relationship(
        "Asset",
        back_populates="service",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<ITService(id={self.id}, name={self.name})>"
