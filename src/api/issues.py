"""Issue register API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user
from src.db import get_db
from src.db.crud import create_issue, delete_issue, get_issue, get_site, list_issues, update_issue
from src.models.register import IssueStatus, Severity
from src.models.schemas import IssueCreate, IssueRead, IssueUpdate
from src.models.user import User
from src.utils.cache import invalidate_dashboard_cache

router = APIRouter()


@router.get("", response_model=list[IssueRead])
async def list_issues_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status: IssueStatus | None = None,
    severity: Severity | None = None,
    site_id: int | None = None,
    search: str | None = None,
) -> list[IssueRead]:
    issues = await list_issues(db, status=status, severity=severity, site_id=site_id, search=search)
    return [IssueRead.model_validate(i) for i in issues]


@router.post("", response_model=IssueRead, status_code=201)
async def create_issue_endpoint(
    data: IssueCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IssueRead:
    if data.site_id is not None and not await get_site(db, data.site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    issue = await create_issue(db, data)
    await invalidate_dashboard_cache()
    return IssueRead.model_validate(issue)


@router.get("/{issue_id}", response_model=IssueRead)
async def get_issue_endpoint(
    issue_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IssueRead:
    issue = await get_issue(db, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return IssueRead.model_validate(issue)


@router.patch("/{issue_id}", response_model=IssueRead)
async def update_issue_endpoint(
    issue_id: int,
    data: IssueUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IssueRead:
    """Partially update an issue; resolving or closing stamps the resolution date."""
    if data.site_id is not None and not await get_site(db, data.site_id):
        raise HTTPException(status_code=404, detail="Site not found")

    issue = await update_issue(db, issue_id, data)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")

    await invalidate_dashboard_cache()
    return IssueRead.model_validate(issue)


@router.delete("/{issue_id}", status_code=204)
async def delete_issue_endpoint(
    issue_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    if not await delete_issue(db, issue_id):
        raise HTTPException(status_code=404, detail="Issue not found")

    await invalidate_dashboard_cache()
    return Response(status_code=204)
