"""Maturity assessment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from src.db import get_db
from src.db.crud import (
    AssessmentError,
    batch_score,
    calculator_for,
    complete_assessment,
    create_assessment,
    delete_assessment,
    get_assessment,
    get_scope_assets,
    get_service,
    get_site,
    list_assessments,
    save_entries,
    update_formula,
)
from src.models.assessment import Assessment, AssessmentStatus
from src.models.schemas import (
    AssessmentCreate,
    AssessmentDetail,
    AssessmentList,
    AssessmentSummary,
    BatchScoreRequest,
    PageMeta,
    ProgressRead,
    ScoreEntriesUpdate,
    ScoreEntryRead,
    ServiceScoreRead,
)
from src.models.user import User
from src.services.scoring import FormulaSettings, round_score
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


async def _assessment_or_404(db: AsyncSession, assessment_id: int) -> Assessment:
    assessment = await get_assessment(db, assessment_id)
    if not assessment:
        raise HTTPException(status_code=404, detail="Assessment not found")
    return assessment


async def _build_detail(db: AsyncSession, assessment: Assessment) -> AssessmentDetail:
    """Attach the live computed scores to an assessment."""
    assets = await get_scope_assets(db, assessment.site_id, assessment.service_id)
    calculator = calculator_for(assessment)

    services = []
    for service_id in sorted({a.service_id for a in assets if a.service_id is not None}):
        service = await get_service(db, service_id)
        services.append(
            ServiceScoreRead(
                service_id=service_id,
                service_name=service.name if service else "",
                score=round_score(calculator.service_score(assets, service_id)),
            )
        )

    summary = AssessmentSummary.model_validate(assessment)
    return AssessmentDetail(
        **summary.model_dump(),
        formula_settings=calculator.settings,
        entries=[ScoreEntryRead.model_validate(e) for e in assessment.entries],
        dimensions=calculator.dimension_breakdown(assets),
        services=services,
        current_score=round_score(calculator.overall_score(assets)),
        progress=ProgressRead.model_validate(calculator.progress(assets)),
    )


@router.get("", response_model=AssessmentList)
async def list_assessments_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    site_id: int | None = None,
    status: AssessmentStatus | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> AssessmentList:
    """Paginated list of assessments, newest first."""
    items, total = await list_assessments(
        db, site_id=site_id, status=status, page=page, page_size=page_size
    )
    meta = PageMeta.build(total, page, page_size)
    return AssessmentList(
        **meta.model_dump(),
        items=[AssessmentSummary.model_validate(a) for a in items],
    )


@router.post("", response_model=AssessmentDetail, status_code=201)
async def create_assessment_endpoint(
    data: AssessmentCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    """Start an assessment of a site, or of one service at a site."""
    if not await get_site(db, data.site_id):
        raise HTTPException(status_code=404, detail="Site not found")
    if data.service_id is not None and not await get_service(db, data.service_id):
        raise HTTPException(status_code=404, detail="Service not found")

    assessment = await create_assessment(db, data, user)
    return await _build_detail(db, assessment)


@router.get("/{assessment_id}", response_model=AssessmentDetail)
async def get_assessment_endpoint(
    assessment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    assessment = await _assessment_or_404(db, assessment_id)
    return await _build_detail(db, assessment)


@router.put("/{assessment_id}/scores", response_model=AssessmentDetail)
async def save_scores_endpoint(
    assessment_id: int,
    data: ScoreEntriesUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    """Record or change parameter answers."""
    assessment = await _assessment_or_404(db, assessment_id)
    try:
        assessment = await save_entries(db, assessment, data.entries)
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await _build_detail(db, assessment)


@router.post("/{assessment_id}/batch-score", response_model=AssessmentDetail)
async def batch_score_endpoint(
    assessment_id: int,
    data: BatchScoreRequest,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    """Give several assets the same score for one parameter."""
    assessment = await _assessment_or_404(db, assessment_id)
    try:
        assessment = await batch_score(db, assessment, data)
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await _build_detail(db, assessment)


@router.patch("/{assessment_id}/formula", response_model=AssessmentDetail)
async def update_formula_endpoint(
    assessment_id: int,
    data: FormulaSettings,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    """Replace the formula settings used to compute this assessment's scores."""
    assessment = await _assessment_or_404(db, assessment_id)
    try:
        assessment = await update_formula(db, assessment, data)
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await _build_detail(db, assessment)


@router.post("/{assessment_id}/complete", response_model=AssessmentDetail)
async def complete_assessment_endpoint(
    assessment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentDetail:
    """Freeze the assessment and record its overall score."""
    assessment = await _assessment_or_404(db, assessment_id)
    try:
        assessment = await complete_assessment(db, assessment)
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await invalidate_dashboard_cache()
    return await _build_detail(db, assessment)


@router.delete("/{assessment_id}", status_code=204)
async def delete_assessment_endpoint(
    assessment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    if not await delete_assessment(db, assessment_id):
        raise HTTPException(status_code=404, detail="Assessment not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)
