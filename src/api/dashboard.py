"""Dashboard API endpoints."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.constants import DEFAULT_DASHBOARD_LIMIT
from src.db import get_db
from src.db.crud import get_site
from src.models.site import SiteTier
from src.models.user import User
from src.services import dashboard

router = APIRouter()


@router.get("/summary")
async def get_summary(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any]:
    """Headline counts and the average latest site score."""
    return await dashboard.summary(db)


@router.get("/lowest-scoring")
async def get_lowest_scoring(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_DASHBOARD_LIMIT,
    sort: Literal["score", "name", "location", "tier"] = "score",
    order: Literal["asc", "desc"] = "asc",
) -> list[dict[str, Any]]:
    """Assessed sites ranked by their latest score."""
    return await dashboard.lowest_scoring_sites(db, limit=limit, sort=sort, order=order)


@router.get("/unassessed")
async def get_unassessed(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict[str, Any]]:
    """Sites that have never completed an assessment."""
    return await dashboard.unassessed_sites(db)


@router.get("/tier-scores")
async def get_tier_scores(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict[str, Any]]:
    return await dashboard.tier_scores(db)


@router.get("/recent")
async def get_recent(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_DASHBOARD_LIMIT,
) -> list[dict[str, Any]]:
    """Latest completed assessments with auditor names."""
    return await dashboard.recent_assessments(db, limit=limit)


@router.get("/trend")
async def get_trend(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    site_id: int | None = None,
    period: Literal["3m", "6m", "12m"] = "6m",
) -> list[dict[str, Any]]:
    """Maturity scores over time: one point per completion date."""
    return await dashboard.maturity_trend(db, site_id=site_id, period=period)


@router.get("/bubble")
async def get_bubble(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    tier: SiteTier | None = None,
) -> list[dict[str, Any]]:
    """Maturity score vs active risks and issues per site."""
    return await dashboard.bubble_chart(db, tier=tier)


@router.get("/sites/{site_id}/breakdown")
async def get_site_breakdown(
    site_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any]:
    """Dimension and service scores from the site's latest completed assessment."""
    if not await get_site(db, site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    breakdown = await dashboard.site_breakdown(db, site_id=site_id)
    if breakdown is None:
        raise HTTPException(status_code=404, detail="Site has no completed assessment")
    return breakdown
