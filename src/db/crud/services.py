"""CRUD operations for IT services."""

from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.crud.common import apply_updates
from src.models.assessment import Assessment
from src.models.asset import Asset
from src.models.schemas import ServiceCreate, ServiceUpdate
from src.models.service import ITService


async def get_service(db: AsyncSession, service_id: int) -> ITService | None:
    result = await db.execute(select(ITService).where(ITService.id == service_id))
    return result.scalar_one_or_none()


async def get_service_by_name(db: AsyncSession, name: str) -> ITService | None:
    result = await db.execute(select(ITService).where(ITService.name == name))
    return result.scalar_one_or_none()


async def list_services(db: AsyncSession, category: str | None = None) -> Sequence[ITService]:
    query = select(ITService)
    if category:
        query = query.where(ITService.category == category)

    result = await db.execute(query.order_by(ITService.name, ITService.id))
    return result.scalars().all()


async def get_service_assets(
    db: AsyncSession,
    service_id: int,
    site_id: int | None = None,
) -> Sequence[Asset]:
    """Assets delivering a service, optionally restricted to one site."""
    query = select(Asset).where(Asset.service_id == service_id)
    if site_id is not None:
        query = query.where(Asset.site_id == site_id)

    result = await db.execute(query.order_by(Asset.name, Asset.id))
    return result.scalars().all()


async def create_service(db: AsyncSession, data: ServiceCreate) -> ITService:
    service = ITService(**data.model_dump())
    db.add(service)
    await db.commit()
    await db.refresh(service)
    return service


async def update_service(
    db: AsyncSession,
    service_id: int,
    data: ServiceUpdate,
) -> ITService | None:
    service = await get_service(db, service_id)
    if not service:
        return None

    apply_updates(service, data)
    await db.commit()
    await db.refresh(service)
    return service


async def delete_service(db: AsyncSession, service_id: int) -> bool:
    """Delete a service; its assets and assessments stay, unlinked."""
    service = await get_service(db, service_id)
    if not service:
        return False

    await db.execute(
        update(Asset).where(Asset.service_id == service_id).values(service_id=None)
    )
    await db.execute(
        update(Assessment).where(Assessment.service_id == service_id).values(service_id=None)
    )

    await db.delete(service)
    await db.commit()
    return True
