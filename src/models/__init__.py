"""SQLAlchemy models."""

from src.models.assessment import Assessment, AssessmentStatus, ParameterScore
from src.models.asset import Asset, ConfigItem, Criticality
from src.models.base import Base
from src.models.register import Issue, IssueStatus, Risk, RiskStatus, Severity
from src.models.service import BusinessImpact, ITService
from src.models.site import OfficeSite, SiteTier, SiteType
from src.models.user import User

__all__ = [
    "Base",
    "User",
    "OfficeSite",
    "SiteType",
    "SiteTier",
    "ITService",
    "BusinessImpact",
    "Asset",
    "ConfigItem",
    "Criticality",
    "Assessment",
    "AssessmentStatus",
    "ParameterScore",
    "Risk",
    "RiskStatus",
    "Issue",
    "IssueStatus",
    "Severity",
]
