"""CRUD operations for the risk and issue registers."""

from collections.abc import Sequence
from datetime import date

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.crud.common import apply_updates, like
from src.models.register import Issue, IssueStatus, Risk, RiskStatus, Severity
from src.models.schemas import IssueCreate, IssueUpdate, RiskCreate, RiskUpdate


# ============== Risks ==============


async def get_risk(db: AsyncSession, risk_id: int) -> Risk | None:
    result = await db.execute(select(Risk).where(Risk.id == risk_id))
    return result.scalar_one_or_none()


async def list_risks(
    db: AsyncSession,
    status: RiskStatus | None = None,
    criticality: Severity | None = None,
    site_id: int | None = None,
    search: str | None = None,
) -> Sequence[Risk]:
    """List risks, newest first."""
    query = select(Risk)

    if status:
        query = query.where(Risk.status == status)
    if criticality:
        query = query.where(Risk.criticality == criticality)
    if site_id is not None:
        query = query.where(Risk.site_id == site_id)
    if search:
        pattern = like(search)
        query = query.where(
            or_(
                Risk.title.ilike(pattern, escape="\\"),
                Risk.description.ilike(pattern, escape="\\"),
            )
        )

    result = await db.execute(query.order_by(Risk.created_at.desc(), Risk.id.desc()))
    return result.scalars().all()


async def create_risk(db: AsyncSession, data: RiskCreate) -> Risk:
    risk = Risk(**data.model_dump())
    db.add(risk)
    await db.commit()
    await db.refresh(risk)
    return risk


async def update_risk(db: AsyncSession, risk_id: int, data: RiskUpdate) -> Risk | None:
    risk = await get_risk(db, risk_id)
    if not risk:
        return None

    apply_updates(risk, data)
    await db.commit()
    await db.refresh(risk)
    return risk


async def delete_risk(db: AsyncSession, risk_id: int) -> bool:
    risk = await get_risk(db, risk_id)
    if not risk:
        return False

    await db.delete(risk)
    await db.commit()
    return True


# ============== Issues ==============


async def get_issue(db: AsyncSession, issue_id: int) -> Issue | None:
    result = await db.execute(select(Issue).where(Issue.id == issue_id))
    return result.scalar_one_or_none()


async def list_issues(
    db: AsyncSession,
    status: IssueStatus | None = None,
    severity: Severity | None = None,
    site_id: int | None = None,
    search: str | None = None,
) -> Sequence[Issue]:
    """List issues, most recently reported first."""
    query = select(Issue)

    if status:
        query = query.where(Issue.status == status)
    if severity:
        query = query.where(Issue.severity == severity)
    if site_id is not None:
        query = query.where(Issue.site_id == site_id)
    if search:
        pattern = like(search)
        query = query.where(
            or_(
                Issue.name.ilike(pattern, escape="\\"),
                Issue.description.ilike(pattern, escape="\\"),
            )
        )

    result = await db.execute(query.order_by(Issue.reported_date.desc(), Issue.id.desc()))
    return result.scalars().all()


async def create_issue(db: AsyncSession, data: IssueCreate) -> Issue:
    values = data.model_dump()
    values["reported_date"] = values["reported_date"] or date.today()
    issue = Issue(**values)
    if issue.status.is_terminal:
        issue.resolved_date = date.today()

    db.add(issue)
    await db.commit()
    await db.refresh(issue)
    return issue


async def update_issue(db: AsyncSession, issue_id: int, data: IssueUpdate) -> Issue | None:
    issue = await get_issue(db, issue_id)
    if not issue:
        return None

    apply_updates(issue, data)
    # Stamp the resolution date on the transition to Resolved/Closed
    if issue.status.is_terminal and issue.resolved_date is None:
        issue.resolved_date = date.today()

    await db.commit()
    await db.refresh(issue)
    return issue


async def delete_issue(db: AsyncSession, issue_id: int) -> bool:
    issue = await get_issue(db, issue_id)
    if not issue:
        return False

    await db.delete(issue)
    await db.commit()
    return True
