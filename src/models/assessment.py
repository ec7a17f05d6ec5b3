"""Maturity assessment models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.asset import Asset
    from src.models.service import ITService
    from src.models.site import OfficeSite
    from src.models.user import User


class AssessmentStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Assessment(Base, TimestampMixin):
    """One DR maturity assessment of a site (or of one service at a site)."""

    __tablename__ = "assessments"

    id: Mapped[int] = mapped_column(primary_key=True)
    site_id: Mapped[int] = mapped_column(
        ForeignKey("office_sites.id", ondelete="CASCADE"), index=True
    )
    service_id: Mapped[int | None] = mapped_column(
        ForeignKey("it_services.id", ondelete="SET NULL"), nullable=True
    )
    assessed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[AssessmentStatus] = mapped_column(
        Enum(AssessmentStatus), default=AssessmentStatus.IN_PROGRESS, index=True
    )
    overall_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    # Serialized FormulaSettings; empty means defaults
    formula_settings: Mapped[dict] = mapped_column(JSON, default=dict)

    site: Mapped["OfficeSite"] = relationship("OfficeSite", back_populates="assessments")
    service: Mapped["ITService | None"] = relationship("ITService")
    assessed_by: Mapped["User | None"] = relationship("User", back_populates="assessments")
    entries: Mapped[list["ParameterScore"]] = relationship(
        "ParameterScore",
        back_populates="assessment",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_completed(self) -> bool:
        return self.status == AssessmentStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<Assessment(id={self.id}, site_id={self.site_id}, status={self.status})>"


class ParameterScore(Base, TimestampMixin):
    """Answer for one DR parameter of one asset within an assessment."""

    __tablename__ = "parameter_scores"

    id: Mapped[int] = mapped_column(primary_key=True)
    assessment_id: Mapped[int] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"), index=True
    )
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id", ondelete="CASCADE"))
    # References the static DR catalog, not a table
    parameter_id: Mapped[int] = mapped_column(Integer)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    value: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    assessment: Mapped["Assessment"] = relationship("Assessment", back_populates="entries")
    asset: Mapped["Asset"] = relationship("Asset")

    __table_args__ = (
        UniqueConstraint(
            "assessment_id", "asset_id", "parameter_id", name="uq_parameter_score_entry"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<ParameterScore(assessment={self.assessment_id}, asset={self.asset_id}, "
            f"parameter={self.parameter_id}, score={self.score})>"
        )
