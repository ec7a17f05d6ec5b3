"""CRUD operations for assets and their configuration items."""

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.crud.common import apply_updates
from src.models.assessment import Assessment, AssessmentStatus, ParameterScore
from src.models.asset import Asset, ConfigItem, Criticality
from src.models.schemas import AssetCreate, AssetUpdate, ConfigItemCreate


class AssetInUseError(Exception):
    """The asset is part of a completed assessment and cannot be removed."""


async def get_asset(db: AsyncSession, asset_id: int) -> Asset | None:
    result = await db.execute(select(Asset).where(Asset.id == asset_id))
    return result.scalar_one_or_none()


async def list_assets(
    db: AsyncSession,
    site_id: int | None = None,
    service_id: int | None = None,
    criticality: Criticality | None = None,
    asset_type: str | None = None,
) -> Sequence[Asset]:
    query = select(Asset)

    if site_id is not None:
        query = query.where(Asset.site_id == site_id)
    if service_id is not None:
        query = query.where(Asset.service_id == service_id)
    if criticality:
        query = query.where(Asset.criticality == criticality)
    if asset_type:
        query = query.where(Asset.type == asset_type)

    result = await db.execute(query.order_by(Asset.name, Asset.id))
    return result.scalars().all()


async def get_scope_assets(
    db: AsyncSession,
    site_id: int,
    service_id: int | None = None,
) -> list[Asset]:
    """Assets covered by an assessment of a site (or of one service at it)."""
    assets = await list_assets(db, site_id=site_id, service_id=service_id)
    return list(assets)


async def create_asset(db: AsyncSession, data: AssetCreate) -> Asset:
    asset = Asset(**data.model_dump())
    db.add(asset)
    await db.commit()
    await db.refresh(asset)
    return asset


async def update_asset(db: AsyncSession, asset_id: int, data: AssetUpdate) -> Asset | None:
    asset = await get_asset(db, asset_id)
    if not asset:
        return None

    apply_updates(asset, data)
    await db.commit()
    await db.refresh(asset)
    return asset


async def delete_asset(db: AsyncSession, asset_id: int) -> bool:
    """Delete an asset with its configuration items and in-progress scores.

    Raises:
        AssetInUseError: if a completed assessment holds scores for the asset
    """
    asset = await get_asset(db, asset_id)
    if not asset:
        return False

    frozen = await db.execute(
        select(ParameterScore.id)
        .join(Assessment, ParameterScore.assessment_id == Assessment.id)
        .where(
            ParameterScore.asset_id == asset_id,
            Assessment.status == AssessmentStatus.COMPLETED,
        )
        .limit(1)
    )
    if frozen.first() is not None:
        raise AssetInUseError("Asset is scored in a completed assessment")

    await db.execute(delete(ParameterScore).where(ParameterScore.asset_id == asset_id))
    await db.delete(asset)
    await db.commit()
    return True


async def list_config_items(db: AsyncSession, asset_id: int) -> Sequence[ConfigItem]:
    result = await db.execute(
        select(ConfigItem).where(ConfigItem.asset_id == asset_id).order_by(ConfigItem.id)
    )
    return result.scalars().all()


async def create_config_item(
    db: AsyncSession,
    asset_id: int,
    data: ConfigItemCreate,
) -> ConfigItem:
    item = ConfigItem(asset_id=asset_id, **data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_config_item(db: AsyncSession, item_id: int) -> bool:
    result = await db.execute(select(ConfigItem).where(ConfigItem.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        return False

    await db.delete(item)
    await db.commit()
    return True
