"""Pydantic schemas for API validation and serialization."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.assessment import AssessmentStatus
from src.models.asset import Criticality
from src.models.register import IssueStatus, RiskStatus, Severity
from src.models.service import BusinessImpact
from src.models.site import SiteTier, SiteType
from src.services.scoring import FormulaSettings


class PageMeta(BaseModel):
    """Offset pagination envelope fields."""

    total: int
    page: int
    page_size: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "PageMeta":
        pages = (total + page_size - 1) // page_size if total > 0 else 0
        return cls(total=total, page=page, page_size=page_size, pages=pages)


# User schemas
class UserRead(BaseModel):
    """Public user fields (the provider access token is never exposed)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lark_id: str
    email: str | None = None
    name: str
    avatar_url: str | None = None
    created_at: datetime


class MeResponse(BaseModel):
    user: UserRead


class LoginResponse(BaseModel):
    auth_url: str
    state: str


# Site schemas
class SiteBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = ""
    city: str = ""
    country: str = ""
    contact_name: str = ""
    contact_email: str | None = None
    contact_phone: str = ""
    type: SiteType = SiteType.OFFICE
    tier: SiteTier | None = SiteTier.TIER_1
    notes: str = ""
    employee_count: int = Field(default=0, ge=0)


class SiteCreate(SiteBase):
    pass


class SiteUpdate(BaseModel):
    """Partial update; only fields sent by the client are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = None
    city: str | None = None
    country: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    type: SiteType | None = None
    tier: SiteTier | None = None
    notes: str | None = None
    employee_count: int | None = Field(default=None, ge=0)


class SiteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    city: str
    country: str
    contact_name: str
    contact_email: str | None = None
    contact_phone: str
    type: SiteType
    tier: SiteTier | None
    notes: str
    employee_count: int
    created_at: datetime
    updated_at: datetime


# Service schemas
class ServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    category: str = ""
    business_impact: BusinessImpact = BusinessImpact.MEDIUM
    responsible: str = ""


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    business_impact: BusinessImpact | None = None
    responsible: str | None = None


class ServiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    business_impact: BusinessImpact
    responsible: str


# Asset schemas
class AssetCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    site_id: int
    service_id: int | None = None
    type: str = ""
    criticality: Criticality = Criticality.MEDIUM
    owner: str = ""
    vendor: str = ""


class AssetUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    site_id: int | None = None
    service_id: int | None = None
    type: str | None = None
    criticality: Criticality | None = None
    owner: str | None = None
    vendor: str | None = None


class AssetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    site_id: int
    service_id: int | None
    type: str
    criticality: Criticality
    owner: str
    vendor: str


class ConfigItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    manufacturer: str = ""
    eol_date: date | None = None
    eow_date: date | None = None
    rma: str = ""
    in_use: int = Field(default=0, ge=0)
    in_stock: int = Field(default=0, ge=0)


class ConfigItemRead(ConfigItemCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int


# Assessment schemas
class AssessmentCreate(BaseModel):
    site_id: int
    service_id: int | None = None
    formula_settings: FormulaSettings | None = None


class ScoreEntryIn(BaseModel):
    """One answer; `score` may be omitted for value-only parameters."""

    asset_id: int
    parameter_id: int
    score: int | None = None
    value: str | None = Field(default=None, max_length=2000)
    notes: str | None = None


class ScoreEntriesUpdate(BaseModel):
    entries: list[ScoreEntryIn] = Field(min_length=1)


class BatchScoreRequest(BaseModel):
    parameter_id: int
    asset_ids: list[int] = Field(min_length=1)
    score: int


class ScoreEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    asset_id: int
    parameter_id: int
    score: int | None
    value: str | None
    notes: str | None
    updated_at: datetime


class DimensionScoreRead(BaseModel):
    dimension_id: int
    dimension: str
    score: float


class ServiceScoreRead(BaseModel):
    service_id: int
    service_name: str
    score: float


class DimensionProgressRead(DimensionScoreRead):
    completed_parameters: float
    total_parameters: int


class ProgressRead(BaseModel):
    dimensions: list[DimensionProgressRead]
    total_percent: float


class AssessmentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    site_id: int
    service_id: int | None
    assessed_by_id: int | None
    status: AssessmentStatus
    overall_score: float | None
    completed_at: datetime | None
    created_at: datetime


class AssessmentList(PageMeta):
    items: list[AssessmentSummary]


class AssessmentDetail(AssessmentSummary):
    formula_settings: FormulaSettings
    entries: list[ScoreEntryRead]
    dimensions: list[DimensionScoreRead]
    services: list[ServiceScoreRead]
    current_score: float
    progress: ProgressRead


# Register schemas
class RiskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    category: str = ""
    status: RiskStatus = RiskStatus.OPEN
    impact: str = ""
    probability: str = ""
    criticality: Severity = Severity.MEDIUM
    mitigation_plan: str = ""
    assigned_to: str | None = None
    due_date: date | None = None
    site_id: int | None = None


class RiskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    status: RiskStatus | None = None
    impact: str | None = None
    probability: str | None = None
    criticality: Severity | None = None
    mitigation_plan: str | None = None
    assigned_to: str | None = None
    due_date: date | None = None
    site_id: int | None = None


class RiskRead(RiskCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class IssueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    site_id: int | None = None
    severity: Severity = Severity.MEDIUM
    status: IssueStatus = IssueStatus.OPEN
    reported_by: str = ""
    reported_date: date | None = None
    owner: str = ""


class IssueUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    site_id: int | None = None
    severity: Severity | None = None
    status: IssueStatus | None = None
    reported_by: str | None = None
    resolved_date: date | None = None
    owner: str | None = None


class IssueRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    site_id: int | None
    severity: Severity
    status: IssueStatus
    reported_by: str
    reported_date: date
    resolved_date: date | None
    owner: str
