"""Risk register API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.db import get_db
from src.db.crud import create_risk, delete_risk, get_risk, get_site, list_risks, update_risk
from src.models.register import RiskStatus, Severity
from src.models.schemas import RiskCreate, RiskRead, RiskUpdate
from src.models.user import User
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


@router.get("", response_model=list[RiskRead])
async def list_risks_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status: RiskStatus | None = None,
    criticality: Severity | None = None,
    site_id: int | None = None,
    search: str | None = None,
) -> list[RiskRead]:
    risks = await list_risks(
        db, status=status, criticality=criticality, site_id=site_id, search=search
    )
    return [RiskRead.model_validate(r) for r in risks]


@router.post("", response_model=RiskRead, status_code=201)
async def create_risk_endpoint(
    data: RiskCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RiskRead:
    if data.site_id is not None and not await get_site(db, data.site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    risk = await create_risk(db, data)
    await invalidate_dashboard_cache()
    return RiskRead.model_validate(risk)


@router.get("/{risk_id}", response_model=RiskRead)
async def get_risk_endpoint(
    risk_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RiskRead:
    risk = await get_risk(db, risk_id)
    if not risk:
        raise HTTPException(status_code=404, detail="Risk not found")
    return RiskRead.model_validate(risk)


@router.patch("/{risk_id}", response_model=RiskRead)
async def update_risk_endpoint(
    risk_id: int,
    data: RiskUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RiskRead:
    if data.site_id is not None and not await get_site(db, data.site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    risk = await update_risk(db, risk_id, data)
    if not risk:
        raise HTTPException(status_code=404, detail="Risk not found")

    await invalidate_dashboard_cache()
    return RiskRead.model_validate(risk)


@router.delete("/{risk_id}", status_code=204)
async def delete_risk_endpoint(
    risk_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    if not await delete_risk(db, risk_id):
        raise HTTPException(status_code=404, detail="Risk not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)
