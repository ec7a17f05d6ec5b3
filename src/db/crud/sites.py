"""CRUD operations for office sites."""

from collections.abc import Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.crud.common import apply_updates, like
from src.models.register import Issue, Risk
from src.models.schemas import SiteCreate, SiteUpdate
from src.models.site import OfficeSite, SiteTier, SiteType


async def get_site(db: AsyncSession, site_id: int) -> OfficeSite | None:
    result = await db.execute(select(OfficeSite).where(OfficeSite.id == site_id))
    return result.scalar_one_or_none()


async def get_site_by_name(db: AsyncSession, name: str) -> OfficeSite | None:
    result = await db.execute(select(OfficeSite).where(OfficeSite.name == name))
    return result.scalar_one_or_none()


async def list_sites(
    db: AsyncSession,
    search: str | None = None,
    site_type: SiteType | None = None,
    tier: SiteTier | None = None,
) -> Sequence[OfficeSite]:
    """List sites ordered by name.

    Args:
        search: Case-insensitive match on name, city or country
    """
    query = select(OfficeSite)

    if search:
        pattern = like(search)
        query = query.where(
            or_(
                OfficeSite.name.ilike(pattern, escape="\\"),
                OfficeSite.city.ilike(pattern, escape="\\"),
                OfficeSite.country.ilike(pattern, escape="\\"),
            )
        )
    if site_type:
        query = query.where(OfficeSite.type == site_type)
    if tier:
        query = query.where(OfficeSite.tier == tier)

    result = await db.execute(query.order_by(OfficeSite.name, OfficeSite.id))
    return result.scalars().all()


async def create_site(db: AsyncSession, data: SiteCreate) -> OfficeSite:
    site = OfficeSite(**data.model_dump())
    db.add(site)
    await db.commit()
    await db.refresh(site)
    return site


async def update_site(db: AsyncSession, site_id: int, data: SiteUpdate) -> OfficeSite | None:
    site = await get_site(db, site_id)
    if not site:
        return None

    apply_updates(site, data)
    await db.commit()
    await db.refresh(site)
    return site


async def delete_site(db: AsyncSession, site_id: int) -> bool:
    """Delete a site with its assets and assessments."""
    site = await get_site(db, site_id)
    if not site:
        return False

    # Registers keep their entries, unlinked
    for model in (Risk, Issue):
        await db.execute(update(model).where(model.site_id == site_id).values(site_id=None))

    await db.delete(site)
    await db.commit()
    return True
