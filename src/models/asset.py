"""Critical IT asset and configuration item models."""

import enum
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.service import ITService
    from src.models.site import OfficeSite


class Criticality(str, enum.Enum):
    """Asset criticality, also used to pick a scoring multiplier."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Asset(Base, TimestampMixin):
    """Critical IT asset installed at a site, optionally part of a service."""

    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    site_id: Mapped[int] = mapped_column(
        ForeignKey("office_sites.id", ondelete="CASCADE"), index=True
    )
    service_id: Mapped[int | None] = mapped_column(
        ForeignKey("it_services.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(String(100), default="")
    criticality: Mapped[Criticality] = mapped_column(
        Enum(Criticality), default=Criticality.MEDIUM
    )
    owner: Mapped[str] = mapped_column(String(255), default="")
    vendor: Mapped[str] = mapped_column(String(255), default="")

    site: Mapped["OfficeSite"] = relationship("OfficeSite", back_populates="assets")
    service: Mapped["ITService"] = relationship("ITService", back_populates="assets")
    config_items: Mapped[list["ConfigItem"]] = relationship(
        "ConfigItem",
        back_populates="asset",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (Index("ix_assets_site_service", "site_id", "service_id"),)

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name={self.name})>"


class ConfigItem(Base):
    """Hardware model deployed as part of an asset (tracked for EOL/warranty)."""

    __tablename__ = "config_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    asset_id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    manufacturer: Mapped[str] = mapped_column(String(255), default="")
    eol_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    eow_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    rma: Mapped[str] = mapped_column(String(50), default="")
    in_use: Mapped[int] = mapped_column(Integer, default=0)
    in_stock: Mapped[int] = mapped_column(Integer, default=0)

    asset: Mapped["Asset"] = relationship("Asset", back_populates="config_items")

    def __repr__(self) -> str:
        return f"<ConfigItem(id={self.id}, name={self.name})>"
