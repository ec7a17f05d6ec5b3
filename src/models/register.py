"""Risk and issue register models."""

import enum
from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Severity(str, enum.Enum):
    """Shared by risk criticality and issue severity."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RiskStatus(str, enum.Enum):
    OPEN = "Open"
    MITIGATED = "Mitigated"
    ACCEPTED = "Accepted"
    CLOSED = "Closed"


class IssueStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @property
    def is_terminal(self) -> bool:
        return self in (IssueStatus.RESOLVED, IssueStatus.CLOSED)


ACTIVE_RISK_STATUSES = (RiskStatus.OPEN,)
ACTIVE_ISSUE_STATUSES = (IssueStatus.OPEN, IssueStatus.IN_PROGRESS)


class Risk(Base, TimestampMixin):
    """Identified DR risk awaiting mitigation."""

    __tablename__ = "risks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(100), default="")
    status: Mapped[RiskStatus] = mapped_column(
        Enum(RiskStatus), default=RiskStatus.OPEN, index=True
    )
    impact: Mapped[str] = mapped_column(String(50), default="")
    probability: Mapped[str] = mapped_column(String(50), default="")
    criticality: Mapped[Severity] = mapped_column(Enum(Severity), default=Severity.MEDIUM)
    mitigation_plan: Mapped[str] = mapped_column(Text, default="")
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    site_id: Mapped[int | None] = mapped_column(
        ForeignKey("office_sites.id", ondelete="SET NULL"), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return f"<Risk(id={self.id}, title={self.title})>"


class Issue(Base, TimestampMixin):
    """Live DR issue reported at a site."""

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    site_id: Mapped[int | None] = mapped_column(
        ForeignKey("office_sites.id", ondelete="SET NULL"), nullable=True, index=True
    )
    severity: Mapped[Severity] = mapped_column(Enum(Severity), default=Severity.MEDIUM)
    status: Mapped[IssueStatus] = mapped_column(
        Enum(IssueStatus), default=IssueStatus.OPEN, index=True
    )
    reported_by: Mapped[str] = mapped_column(String(255), default="")
    reported_date: Mapped[date] = mapped_column(Date, default=date.today)
    resolved_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    owner: Mapped[str] = mapped_column(String(255), default="")

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, name={self.name})>"
