"""Critical asset and configuration item API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.db import get_db
from src.db.crud import (
    AssetInUseError,
    create_asset,
    create_config_item,
    delete_asset,
    delete_config_item,
    get_asset,
    get_service,
    get_site,
    list_assets,
    list_config_items,
    update_asset,
)
from src.models.asset import Criticality
from src.models.schemas import (
    AssetCreate,
    AssetRead,
    AssetUpdate,
    ConfigItemCreate,
    ConfigItemRead,
)
from src.models.user import User
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


async def _check_references(
    db: AsyncSession,
    site_id: int | None,
    service_id: int | None,
) -> None:
    """404 when the asset would point at a missing site or service."""
    if site_id is not None and not await get_site(db, site_id):
        raise HTTPException(status_code=404, detail="Site not found")
    if service_id is not None and not await get_service(db, service_id):
        raise HTTPException(status_code=404, detail="Service not found")


@router.get("", response_model=list[AssetRead])
async def list_assets_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    site_id: int | None = None,
    service_id: int | None = None,
    criticality: Criticality | None = None,
    type: str | None = None,
) -> list[AssetRead]:
    """List critical assets."""
    assets = await list_assets(
        db,
        site_id=site_id,
        service_id=service_id,
        criticality=criticality,
        asset_type=type,
    )
    return [AssetRead.model_validate(a) for a in assets]


@router.post("", response_model=AssetRead, status_code=201)
async def create_asset_endpoint(
    data: AssetCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssetRead:
    await _check_references(db, data.site_id, data.service_id)

    asset = await create_asset(db, data)
    await invalidate_dashboard_cache()
    return AssetRead.model_validate(asset)


@router.delete("/config-items/{item_id}", status_code=204)
async def delete_config_item_endpoint(
    item_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    if not await delete_config_item(db, item_id):
        raise HTTPException(status_code=404, detail="Config item not found")
    return Response(status_code=204)


@router.get("/{asset_id}", response_model=AssetRead)
async def get_asset_endpoint(
    asset_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssetRead:
    asset = await get_asset(db, asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return AssetRead.model_validate(asset)


@router.patch("/{asset_id}", response_model=AssetRead)
async def update_asset_endpoint(
    asset_id: int,
    data: AssetUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssetRead:
    if "site_id" in data.model_fields_set and data.site_id is None:
        raise HTTPException(status_code=400, detail="An asset must belong to a site")
    await _check_references(db, data.site_id, data.service_id)

    asset = await update_asset(db, asset_id, data)
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")

    await invalidate_dashboard_cache()
    return AssetRead.model_validate(asset)


@router.delete("/{asset_id}", status_code=204)
async def delete_asset_endpoint(
    asset_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    try:
        deleted = await delete_asset(db, asset_id)
    except AssetInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Asset not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)


@router.get("/{asset_id}/config-items", response_model=list[ConfigItemRead])
async def list_config_items_endpoint(
    asset_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ConfigItemRead]:
    """List the hardware configuration items of an asset."""
    if not await get_asset(db, asset_id):
        raise HTTPException(status_code=404, detail="Asset not found")

    items = await list_config_items(db, asset_id)
    return [ConfigItemRead.model_validate(i) for i in items]


@router.post("/{asset_id}/config-items", response_model=ConfigItemRead, status_code=201)
async def create_config_item_endpoint(
    asset_id: int,
    data: ConfigItemCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ConfigItemRead:
    if not await get_asset(db, asset_id):
        raise HTTPException(status_code=404, detail="Asset not found")

    item = await create_config_item(db, asset_id, data)
    return ConfigItemRead.model_validate(item)
