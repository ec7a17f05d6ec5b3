"""CRUD operations for assessments and their parameter scores."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.catalog import get_parameter
from src.constants import SCORE_MAX, SCORE_MIN
from src.db.crud.assets import get_scope_assets
from src.models.assessment import Assessment, AssessmentStatus, ParameterScore
from src.models.base import utcnow
from src.models.schemas import AssessmentCreate, BatchScoreRequest, ScoreEntryIn
from src.models.user import User
from src.services.scoring import FormulaSettings, ScoreCalculator, round_score
from src.utils.logging import LogContext, get_logger
from src.utils.metrics import metrics

logger = get_logger(__name__)


class AssessmentError(ValueError):
    """Rejected change to an assessment (bad input or wrong state)."""


async def get_assessment(db: AsyncSession, assessment_id: int) -> Assessment | None:
    result = await db.execute(select(Assessment).where(Assessment.id == assessment_id))
    return result.scalar_one_or_none()


async def list_assessments(
    db: AsyncSession,
    site_id: int | None = None,
    status: AssessmentStatus | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[Sequence[Assessment], int]:
    """Get a page of assessments, newest first."""
    filters = []
    if site_id is not None:
        filters.append(Assessment.site_id == site_id)
    if status:
        filters.append(Assessment.status == status)

    count_result = await db.execute(select(func.count(Assessment.id)).where(*filters))
    total = count_result.scalar() or 0

    query = (
        select(Assessment)
        .where(*filters)
        .order_by(Assessment.created_at.desc(), Assessment.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    return result.scalars().all(), total


async def get_completed_assessments(db: AsyncSession) -> Sequence[Assessment]:
    """All completed assessments, oldest completion first."""
    result = await db.execute(
        select(Assessment)
        .where(Assessment.status == AssessmentStatus.COMPLETED)
        .order_by(Assessment.completed_at, Assessment.id)
    )
    return result.scalars().all()


async def create_assessment(
    db: AsyncSession,
    data: AssessmentCreate,
    user: User,
) -> Assessment:
    settings = data.formula_settings or FormulaSettings()
    assessment = Assessment(
        site_id=data.site_id,
        service_id=data.service_id,
        assessed_by_id=user.id,
        status=AssessmentStatus.IN_PROGRESS,
        formula_settings=settings.model_dump(mode="json"),
    )
    db.add(assessment)
    await db.commit()
    await db.refresh(assessment)
    return assessment


def score_map(assessment: Assessment) -> dict[tuple[int, int], int | None]:
    """(asset_id, parameter_id) -> score of every recorded entry."""
    return {(e.asset_id, e.parameter_id): e.score for e in assessment.entries}


def calculator_for(assessment: Assessment) -> ScoreCalculator:
    return ScoreCalculator(
        score_map(assessment),
        FormulaSettings.from_stored(assessment.formula_settings),
    )


def _ensure_editable(assessment: Assessment) -> None:
    if assessment.is_completed:
        raise AssessmentError("Completed assessments are read-only")


def _validate_entry(entry: ScoreEntryIn, asset_ids: set[int]) -> None:
    parameter = get_parameter(entry.parameter_id)
    if parameter is None:
        raise AssessmentError(f"Unknown parameter {entry.parameter_id}")
    if entry.score is not None:
        if not parameter.scorable:
            raise AssessmentError(f"Parameter {parameter.id} ({parameter.name}) is not scorable")
        if not SCORE_MIN <= entry.score <= SCORE_MAX:
            raise AssessmentError(f"Score must be between {SCORE_MIN} and {SCORE_MAX}")
    if entry.asset_id not in asset_ids:
        raise AssessmentError(f"Asset {entry.asset_id} is not covered by this assessment")


async def save_entries(
    db: AsyncSession,
    assessment: Assessment,
    entries: Sequence[ScoreEntryIn],
) -> Assessment:
    """Validate then upsert parameter answers.

    Nothing is written when any entry is rejected. For existing answers only
    the fields present in the request are changed.

    Raises:
        AssessmentError: on invalid entries or a completed assessment
    """
    _ensure_editable(assessment)

    assets = await get_scope_assets(db, assessment.site_id, assessment.service_id)
    asset_ids = {a.id for a in assets}
    for entry in entries:
        _validate_entry(entry, asset_ids)

    existing = {(e.asset_id, e.parameter_id): e for e in assessment.entries}
    for entry in entries:
        key = (entry.asset_id, entry.parameter_id)
        if key in existing:
            row = existing[key]
            for field, value in entry.model_dump(exclude_unset=True).items():
                setattr(row, field, value)
        else:
            row = ParameterScore(**entry.model_dump())
            assessment.entries.append(row)
            existing[key] = row

    await db.commit()
    await db.refresh(assessment)
    return assessment


async def batch_score(
    db: AsyncSession,
    assessment: Assessment,
    data: BatchScoreRequest,
) -> Assessment:
    """Apply the same score for one parameter to several assets."""
    entries = [
        ScoreEntryIn(asset_id=asset_id, parameter_id=data.parameter_id, score=data.score)
        for asset_id in dict.fromkeys(data.asset_ids)
    ]
    return await save_entries(db, assessment, entries)


async def update_formula(
    db: AsyncSession,
    assessment: Assessment,
    settings: FormulaSettings,
) -> Assessment:
    _ensure_editable(assessment)

    assessment.formula_settings = settings.model_dump(mode="json")
    await db.commit()
    await db.refresh(assessment)
    return assessment


async def complete_assessment(db: AsyncSession, assessment: Assessment) -> Assessment:
    """Freeze the assessment and store its overall score.

    Raises:
        AssessmentError: if already completed or nothing was scored
    """
    ctx = LogContext(logger, assessment_id=assessment.id, site_id=assessment.site_id)
    _ensure_editable(assessment)

    if not any(e.score is not None for e in assessment.entries):
        raise AssessmentError("Cannot complete an assessment without any scores")

    assets = await get_scope_assets(db, assessment.site_id, assessment.service_id)
    calculator = calculator_for(assessment)

    assessment.overall_score = round_score(calculator.overall_score(assets))
    assessment.status = AssessmentStatus.COMPLETED
    assessment.completed_at = utcnow()
    await db.commit()
    await db.refresh(assessment)

    metrics.assessments_completed_total.inc()
    ctx.info(f"Assessment completed with overall score {assessment.overall_score}")
    return assessment


async def delete_assessment(db: AsyncSession, assessment_id: int) -> bool:
    assessment = await get_assessment(db, assessment_id)
    if not assessment:
        return False

    await db.delete(assessment)
    await db.commit()
    return True
