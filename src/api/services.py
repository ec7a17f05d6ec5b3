"""IT service API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.db import get_db
from src.db.crud import (
    create_service,
    delete_service,
    get_service,
    get_service_assets,
    get_service_by_name,
    list_services,
    update_service,
)
from src.models.schemas import AssetRead, ServiceCreate, ServiceRead, ServiceUpdate
from src.models.user import User
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


@router.get("", response_model=list[ServiceRead])
async def list_services_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    category: str | None = None,
) -> list[ServiceRead]:
    """List IT services."""
    services = await list_services(db, category=category)
    return [ServiceRead.model_validate(s) for s in services]


@router.post("", response_model=ServiceRead, status_code=201)
async def create_service_endpoint(
    data: ServiceCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ServiceRead:
    if await get_service_by_name(db, data.name):
        raise HTTPException(status_code=409, detail="A service with this name already exists")

    service = await create_service(db, data)
    return ServiceRead.model_validate(service)


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service_endpoint(
    service_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ServiceRead:
    service = await get_service(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return ServiceRead.model_validate(service)


@router.get("/{service_id}/assets", response_model=list[AssetRead])
async def list_service_assets(
    service_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    site_id: int | None = None,
) -> list[AssetRead]:
    """List the assets delivering a service, optionally at one site."""
    if not await get_service(db, service_id):
        raise HTTPException(status_code=404, detail="Service not found")

    assets = await get_service_assets(db, service_id, site_id=site_id)
    return [AssetRead.model_validate(a) for a in assets]


@router.patch("/{service_id}", response_model=ServiceRead)
async def update_service_endpoint(
    service_id: int,
    data: ServiceUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ServiceRead:
    if data.name is not None:
        existing = await get_service_by_name(db, data.name)
        if existing and existing.id != service_id:
            raise HTTPException(status_code=409, detail="A service with this name already exists")

    service = await update_service(db, service_id, data)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    await invalidate_dashboard_cache()
    return ServiceRead.model_validate(service)


@router.delete("/{service_id}", status_code=204)
async def delete_service_endpoint(
    service_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    if not await delete_service(db, service_id):
        raise HTTPException(status_code=404, detail="Service not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)
