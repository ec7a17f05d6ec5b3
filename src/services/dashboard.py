"""Dashboard aggregations over persisted assessments.

Every public function returns JSON-native data (it goes through the Redis
cache) and takes the database session as its first positional argument;
everything else must be passed by keyword so cache keys are stable.
"""

from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.catalog import DIMENSIONS
from src.constants import (
    BUBBLE_COLOR_HIGH,
    BUBBLE_COLOR_LOW,
    BUBBLE_COLOR_MEDIUM,
    BUBBLE_HIGH_THRESHOLD,
    BUBBLE_LOW_THRESHOLD,
    BUBBLE_SIZE_DEFAULT,
    BUBBLE_SIZE_TIER_1,
    BUBBLE_SIZE_TIER_2,
    DEFAULT_DASHBOARD_LIMIT,
    TREND_PERIOD_MONTHS,
    UNASSESSED_LABEL,
    UNSPECIFIED_TIER,
)
from src.db.crud.assessments import calculator_for, get_completed_assessments
from src.models.assessment import Assessment
from src.models.asset import Asset
from src.models.register import ACTIVE_ISSUE_STATUSES, ACTIVE_RISK_STATUSES, Issue, Risk
from src.models.service import ITService
from src.models.site import OfficeSite, SiteTier
from src.models.user import User
from src.services.scoring import round_score
from src.utils.cache import cached


def tier_label(tier: SiteTier | None) -> str:
    return tier.value if tier else UNSPECIFIED_TIER


def bubble_size(tier: SiteTier | None) -> int:
    if tier == SiteTier.TIER_1:
        return BUBBLE_SIZE_TIER_1
    if tier == SiteTier.TIER_2:
        return BUBBLE_SIZE_TIER_2
    return BUBBLE_SIZE_DEFAULT


def bubble_color(score: float) -> str:
    if score < BUBBLE_LOW_THRESHOLD:
        return BUBBLE_COLOR_LOW
    if score < BUBBLE_HIGH_THRESHOLD:
        return BUBBLE_COLOR_MEDIUM
    return BUBBLE_COLOR_HIGH


def months_ago(today: date, months: int) -> date:
    """Same day `months` calendar months earlier, clamped to the month's end."""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    for day in (today.day, 30, 29, 28):
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return date(year, month, 28)


def _format_date(value: datetime | None) -> str | None:
    return value.date().isoformat() if value else None


async def _sites(db: AsyncSession) -> Sequence[OfficeSite]:
    result = await db.execute(select(OfficeSite).order_by(OfficeSite.name, OfficeSite.id))
    return result.scalars().all()


async def _assets_by_site(db: AsyncSession) -> dict[int, list[Asset]]:
    result = await db.execute(select(Asset))
    grouped: dict[int, list[Asset]] = defaultdict(list)
    for asset in result.scalars().all():
        grouped[asset.site_id].append(asset)
    return grouped


def _scope_assets(assessment: Assessment, assets_by_site: dict[int, list[Asset]]) -> list[Asset]:
    assets = assets_by_site.get(assessment.site_id, [])
    if assessment.service_id is None:
        return assets
    return [a for a in assets if a.service_id == assessment.service_id]


def _latest_by_site(assessments: Sequence[Assessment]) -> dict[int, Assessment]:
    latest: dict[int, Assessment] = {}
    for assessment in assessments:  # ordered by completion time
        latest[assessment.site_id] = assessment
    return latest


def _site_row(site: OfficeSite) -> dict[str, Any]:
    return {
        "site_id": site.id,
        "site_name": site.name,
        "location": site.location,
        "tier": tier_label(site.tier),
    }


@cached("dashboard:summary")
async def summary(db: AsyncSession) -> dict[str, Any]:
    """Headline counts and the average of each site's latest score."""
    sites = await _sites(db)
    latest = _latest_by_site(await get_completed_assessments(db))

    async def count(query) -> int:
        result = await db.execute(query)
        return result.scalar() or 0

    scores = [a.overall_score for a in latest.values() if a.overall_score is not None]
    return {
        "total_sites": len(sites),
        "assessed_sites": len(latest),
        "total_services": await count(select(func.count(ITService.id))),
        "total_assets": await count(select(func.count(Asset.id))),
        "open_risks": await count(
            select(func.count(Risk.id)).where(Risk.status.in_(ACTIVE_RISK_STATUSES))
        ),
        "open_issues": await count(
            select(func.count(Issue.id)).where(Issue.status.in_(ACTIVE_ISSUE_STATUSES))
        ),
        "average_score": round_score(sum(scores) / len(scores)) if scores else 0.0,
    }


@cached("dashboard:lowest")
async def lowest_scoring_sites(
    db: AsyncSession,
    limit: int = DEFAULT_DASHBOARD_LIMIT,
    sort: str = "score",
    order: str = "asc",
) -> list[dict[str, Any]]:
    """Assessed sites by latest score; `limit` is applied after sorting.

    Args:
        sort: score, name, location or tier
        order: asc or desc
    """
    sites = {s.id: s for s in await _sites(db)}
    latest = _latest_by_site(await get_completed_assessments(db))

    rows = []
    for site_id, assessment in latest.items():
        site = sites.get(site_id)
        if site is None:
            continue
        rows.append(
            {
                **_site_row(site),
                "score": assessment.overall_score or 0.0,
                "last_assessment": _format_date(assessment.completed_at),
            }
        )

    sort_keys = {
        "score": lambda r: (r["score"], r["site_name"]),
        "name": lambda r: r["site_name"].lower(),
        "location": lambda r: r["location"].lower(),
        "tier": lambda r: (r["tier"], r["score"]),
    }
    rows.sort(key=sort_keys.get(sort, sort_keys["score"]), reverse=order == "desc")
    return rows[:limit]


@cached("dashboard:unassessed")
async def unassessed_sites(db: AsyncSession) -> list[dict[str, Any]]:
    """Sites without any completed assessment."""
    latest = _latest_by_site(await get_completed_assessments(db))
    return [
        {**_site_row(site), "last_assessment": UNASSESSED_LABEL}
        for site in await _sites(db)
        if site.id not in latest
    ]


@cached("dashboard:tiers")
async def tier_scores(db: AsyncSession) -> list[dict[str, Any]]:
    """Average latest score per tier (tiers without assessed sites report 0)."""
    sites = {s.id: s for s in await _sites(db)}
    latest = _latest_by_site(await get_completed_assessments(db))

    grouped: dict[str, list[float]] = {tier.value: [] for tier in SiteTier}
    for site_id, assessment in latest.items():
        site = sites.get(site_id)
        if site is None or assessment.overall_score is None:
            continue
        grouped.setdefault(tier_label(site.tier), []).append(assessment.overall_score)

    return [
        {
            "tier": tier,
            "average_score": round_score(sum(scores) / len(scores)) if scores else 0.0,
            "site_count": len(scores),
        }
        for tier, scores in grouped.items()
    ]


@cached("dashboard:recent")
async def recent_assessments(
    db: AsyncSession,
    limit: int = DEFAULT_DASHBOARD_LIMIT,
) -> list[dict[str, Any]]:
    """Most recently completed assessments."""
    completed = list(await get_completed_assessments(db))[::-1][:limit]
    sites = {s.id: s for s in await _sites(db)}

    user_ids = {a.assessed_by_id for a in completed if a.assessed_by_id}
    users: dict[int, User] = {}
    if user_ids:
        result = await db.execute(select(User).where(User.id.in_(user_ids)))
        users = {u.id: u for u in result.scalars().all()}

    rows = []
    for assessment in completed:
        site = sites.get(assessment.site_id)
        auditor = users.get(assessment.assessed_by_id) if assessment.assessed_by_id else None
        rows.append(
            {
                "assessment_id": assessment.id,
                "site_id": assessment.site_id,
                "site_name": site.name if site else None,
                "date": _format_date(assessment.completed_at),
                "score": assessment.overall_score or 0.0,
                "auditor": auditor.name if auditor else None,
            }
        )
    return rows


@cached("dashboard:trend")
async def maturity_trend(
    db: AsyncSession,
    site_id: int | None = None,
    period: str = "6m",
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Overall and per-dimension scores of completed assessments over time.

    Assessments completed on the same day are averaged into one point.
    """
    today = today or date.today()
    cutoff = months_ago(today, TREND_PERIOD_MONTHS.get(period, TREND_PERIOD_MONTHS["6m"]))
    assets_by_site = await _assets_by_site(db)

    buckets: dict[str, dict[str, list[float]]] = {}
    for assessment in await get_completed_assessments(db):
        if site_id is not None and assessment.site_id != site_id:
            continue
        if assessment.completed_at is None or assessment.completed_at.date() < cutoff:
            continue

        assets = _scope_assets(assessment, assets_by_site)
        calculator = calculator_for(assessment)
        point = buckets.setdefault(assessment.completed_at.date().isoformat(), defaultdict(list))
        point["Overall"].append(assessment.overall_score or 0.0)
        for dimension in DIMENSIONS:
            point[dimension.name].append(calculator.dimension_average(assets, dimension))

    return [
        {
            "date": day,
            **{key: round_score(sum(values) / len(values)) for key, values in point.items()},
        }
        for day, point in sorted(buckets.items())
    ]


@cached("dashboard:bubble")
async def bubble_chart(db: AsyncSession, tier: SiteTier | None = None) -> list[dict[str, Any]]:
    """Maturity vs active risks and issues per assessed site."""
    latest = _latest_by_site(await get_completed_assessments(db))

    active: dict[int, int] = defaultdict(int)
    for model, statuses in ((Risk, ACTIVE_RISK_STATUSES), (Issue, ACTIVE_ISSUE_STATUSES)):
        result = await db.execute(
            select(model.site_id, func.count(model.id))
            .where(model.status.in_(statuses), model.site_id.is_not(None))
            .group_by(model.site_id)
        )
        for site_id, count in result.all():
            active[site_id] += count

    rows = []
    for site in await _sites(db):
        assessment = latest.get(site.id)
        if assessment is None or (tier is not None and site.tier != tier):
            continue
        score = assessment.overall_score or 0.0
        rows.append(
            {
                "site_id": site.id,
                "site_name": site.name,
                "active_risks_issues": active[site.id],
                "employee_count": site.employee_count,
                "maturity_score": score,
                "tier": site.tier.number if site.tier else None,
                "bubble_size": bubble_size(site.tier),
                "bubble_color": bubble_color(score),
            }
        )
    return rows


@cached("dashboard:site")
async def site_breakdown(db: AsyncSession, site_id: int) -> dict[str, Any] | None:
    """Dimension and service scores of a site's latest completed assessment."""
    latest = _latest_by_site(await get_completed_assessments(db)).get(site_id)
    if latest is None:
        return None

    assets = _scope_assets(latest, await _assets_by_site(db))
    calculator = calculator_for(latest)

    service_ids = sorted({a.service_id for a in assets if a.service_id is not None})
    names: dict[int, str] = {}
    if service_ids:
        result = await db.execute(
            select(ITService.id, ITService.name).where(ITService.id.in_(service_ids))
        )
        names = dict(result.all())

    return {
        "site_id": site_id,
        "assessment_id": latest.id,
        "completed_at": _format_date(latest.completed_at),
        "overall_score": latest.overall_score or 0.0,
        "dimensions": calculator.dimension_breakdown(assets),
        "services": [
            {
                "service_id": service_id,
                "service_name": names.get(service_id, ""),
                "score": round_score(calculator.service_score(assets, service_id)),
            }
            for service_id in service_ids
        ],
    }
