"""Office site API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.db import get_db
from src.db.crud import (
    create_site,
    delete_site,
    get_site,
    get_site_by_name,
    list_assets,
    list_sites,
    update_site,
)
from src.models.schemas import AssetRead, SiteCreate, SiteRead, SiteUpdate
from src.models.site import SiteTier, SiteType
from src.models.user import User
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


async def _site_or_404(db: AsyncSession, site_id: int):
    site = await get_site(db, site_id)
    if not site:
        raise HTTPException(status_code=404, detail="Site not found")
    return site


@router.get("", response_model=list[SiteRead])
async def list_sites_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = None,
    type: SiteType | None = None,
    tier: SiteTier | None = None,
) -> list[SiteRead]:
    """List office sites."""
    sites = await list_sites(db, search=search, site_type=type, tier=tier)
    return [SiteRead.model_validate(s) for s in sites]


@router.post("", response_model=SiteRead, status_code=201)
async def create_site_endpoint(
    data: SiteCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SiteRead:
    """Create an office site."""
    if await get_site_by_name(db, data.name):
        raise HTTPException(status_code=409, detail="A site with this name already exists")

    site = await create_site(db, data)
    await invalidate_dashboard_cache()
    return SiteRead.model_validate(site)


@router.get("/{site_id}", response_model=SiteRead)
async def get_site_endpoint(
    site_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SiteRead:
    return SiteRead.model_validate(await _site_or_404(db, site_id))


@router.get("/{site_id}/assets", response_model=list[AssetRead])
async def list_site_assets(
    site_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AssetRead]:
    """List the critical assets installed at a site."""
    await _site_or_404(db, site_id)
    assets = await list_assets(db, site_id=site_id)
    return [AssetRead.model_validate(a) for a in assets]


@router.patch("/{site_id}", response_model=SiteRead)
async def update_site_endpoint(
    site_id: int,
    data: SiteUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SiteRead:
    """Partially update a site."""
    if data.name is not None:
        existing = await get_site_by_name(db, data.name)
        if existing and existing.id != site_id:
            raise HTTPException(status_code=409, detail="A site with this name already exists")

    site = await update_site(db, site_id, data)
    if not site:
        raise HTTPException(status_code=404, detail="Site not found")

    await invalidate_dashboard_cache()
    return SiteRead.model_validate(site)


@router.delete("/{site_id}", status_code=204)
async def delete_site_endpoint(
    site_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a site together with its assets and assessments."""
    if not await delete_site(db, site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)
