"""Office site model."""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.asset import Asset
    from src.models.assessment import Assessment


class SiteType(str, enum.Enum):
    """Kind of physical site."""

    OFFICE = "Office"
    DATA_CENTER = "Data Center"
    WAREHOUSE = "Warehouse"
    OTHER = "Other"


class SiteTier(str, enum.Enum):
    """Business importance tier of a site."""

    TIER_1 = "Tier 1"
    TIER_2 = "Tier 2"
    TIER_3 = "Tier 3"

    @property
    def number(self) -> int:
        return int(self.value.split()[-1])


class OfficeSite(Base, TimestampMixin):
    """A location whose disaster-recovery maturity is assessed."""

    __tablename__ = "office_sites"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    address: Mapped[str] = mapped_column(String(500), default="")
    city: Mapped[str] = mapped_column(String(255), default="")
    country: Mapped[str] = mapped_column(String(255), default="")
    contact_name: Mapped[str] = mapped_column(String(255), default="")
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str] = mapped_column(String(100), default="")
    type: Mapped[SiteType] = mapped_column(Enum(SiteType), default=SiteType.OFFICE)
    tier: Mapped[SiteTier | None] = mapped_column(Enum(SiteTier), nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="")
    employee_count: Mapped[int] = mapped_column(Integer, default=0)

    assets: Mapped[list["Asset"]] = relationship(
        "Asset",
        back_populates="site",
        cascade="all, delete-orphan",
        lazy="select",
    )
    assessments: Mapped[list["Assessment"]] = relationship(
        "Assessment",
        back_populates="site",
        cascade="all, delete-orphan",
        lazy="select",
    )

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.country) if part)

    def __repr__(self) -> str:
        return f"<OfficeSite(id={self.id}, name={self.name})>"
