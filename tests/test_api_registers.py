"""Tests for risk and issue register endpoints."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.register import Issue, IssueStatus, Risk, RiskStatus, Severity
from src.models.site import OfficeSite


class TestRisks:
    """Tests for /api/risks."""

    @pytest.mark.asyncio
    async def test_create_risk(self, authenticated_client: AsyncClient, site: OfficeSite):
        response = await authenticated_client.post(
            "/api/risks",
            json={
                "title": "Single ISP uplink",
                "category": "Network",
                "impact": "High",
                "probability": "Medium",
                "criticality": "High",
                "due_date": "2026-12-31",
                "site_id": site.id,
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Open"
        assert data["criticality"] == "High"
        assert data["due_date"] == "2026-12-31"
        assert data["assigned_to"] is None
        assert "created_at" in data

    @pytest.mark.asyncio
    async def test_create_risk_unknown_site(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/risks", json={"title": "Flood", "site_id": 999}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_risk_invalid_status(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/risks", json={"title": "Flood", "status": "Ignored"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_risks_filters(
        self, authenticated_client: AsyncClient, db_session: AsyncSession, site: OfficeSite
    ):
        db_session.add_all(
            [
                Risk(title="Power outage", site_id=site.id, criticality=Severity.CRITICAL),
                Risk(title="Vendor lock-in", status=RiskStatus.ACCEPTED),
                Risk(title="Ageing UPS", description="Battery past warranty", site_id=site.id),
            ]
        )
        await db_session.commit()

        response = await authenticated_client.get("/api/risks")
        assert len(response.json()) == 3

        response = await authenticated_client.get("/api/risks", params={"status": "Accepted"})
        assert [r["title"] for r in response.json()] == ["Vendor lock-in"]

        response = await authenticated_client.get("/api/risks", params={"criticality": "Critical"})
        assert [r["title"] for r in response.json()] == ["Power outage"]

        response = await authenticated_client.get("/api/risks", params={"site_id": site.id})
        assert {r["title"] for r in response.json()} == {"Power outage", "Ageing UPS"}

        response = await authenticated_client.get("/api/risks", params={"search": "warranty"})
        assert [r["title"] for r in response.json()] == ["Ageing UPS"]

    @pytest.mark.asyncio
    async def test_update_and_delete_risk(
        self, authenticated_client: AsyncClient, db_session: AsyncSession
    ):
        risk = Risk(title="Flood")
        db_session.add(risk)
        await db_session.commit()

        response = await authenticated_client.patch(
            f"/api/risks/{risk.id}", json={"status": "Mitigated", "assigned_to": "Facilities"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Mitigated"
        assert response.json()["title"] == "Flood"

        response = await authenticated_client.delete(f"/api/risks/{risk.id}")
        assert response.status_code == 204
        response = await authenticated_client.get(f"/api/risks/{risk.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_risk_unknown_site(
        self, authenticated_client: AsyncClient, db_session: AsyncSession
    ):
        risk = Risk(title="Flood")
        db_session.add(risk)
        await db_session.commit()

        response = await authenticated_client.patch(f"/api/risks/{risk.id}", json={"site_id": 999})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_risk_not_found(self, authenticated_client: AsyncClient):
        assert (await authenticated_client.get("/api/risks/999")).status_code == 404
        assert (
            await authenticated_client.patch("/api/risks/999", json={"title": "x"})
        ).status_code == 404
        assert (await authenticated_client.delete("/api/risks/999")).status_code == 404


class TestIssues:
    """Tests for /api/issues."""

    @pytest.mark.asyncio
    async def test_create_issue_defaults_reported_date(
        self, authenticated_client: AsyncClient, site: OfficeSite
    ):
        response = await authenticated_client.post(
            "/api/issues",
            json={"name": "Generator failed test", "site_id": site.id, "severity": "Critical"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Open"
        assert data["reported_date"] == date.today().isoformat()
        assert data["resolved_date"] is None

    @pytest.mark.asyncio
    async def test_create_resolved_issue_sets_resolved_date(
        self, authenticated_client: AsyncClient
    ):
        response = await authenticated_client.post(
            "/api/issues",
            json={"name": "Old ticket", "status": "Closed", "reported_date": "2026-01-05"},
        )
        data = response.json()
        assert data["reported_date"] == "2026-01-05"
        assert data["resolved_date"] == date.today().isoformat()

    @pytest.mark.asyncio
    async def test_resolving_issue_stamps_date_once(
        self, authenticated_client: AsyncClient, db_session: AsyncSession
    ):
        """Test resolved_date is set when the issue reaches a terminal status."""
        issue = Issue(name="Switch flapping", reported_date=date(2026, 3, 1))
        db_session.add(issue)
        await db_session.commit()

        response = await authenticated_client.patch(
            f"/api/issues/{issue.id}", json={"status": "In Progress"}
        )
        assert response.json()["resolved_date"] is None

        response = await authenticated_client.patch(
            f"/api/issues/{issue.id}", json={"status": "Resolved"}
        )
        assert response.json()["resolved_date"] == date.today().isoformat()

        response = await authenticated_client.patch(
            f"/api/issues/{issue.id}",
            json={"status": "Closed", "resolved_date": "2026-03-10"},
        )
        assert response.json()["resolved_date"] == "2026-03-10"

    @pytest.mark.asyncio
    async def test_list_issues_newest_first(
        self, authenticated_client: AsyncClient, db_session: AsyncSession, site: OfficeSite
    ):
        db_session.add_all(
            [
                Issue(name="Older", reported_date=date(2026, 1, 1), site_id=site.id),
                Issue(name="Newer", reported_date=date(2026, 5, 1),
                      severity=Severity.HIGH),
                Issue(name="Done", reported_date=date(2026, 2, 1),
                      status=IssueStatus.RESOLVED, resolved_date=date(2026, 2, 2)),
            ]
        )
        await db_session.commit()

        response = await authenticated_client.get("/api/issues")
        assert [i["name"] for i in response.json()] == ["Newer", "Done", "Older"]

        response = await authenticated_client.get("/api/issues", params={"status": "Resolved"})
        assert [i["name"] for i in response.json()] == ["Done"]

        response = await authenticated_client.get("/api/issues", params={"severity": "High"})
        assert [i["name"] for i in response.json()] == ["Newer"]

        response = await authenticated_client.get("/api/issues", params={"site_id": site.id})
        assert [i["name"] for i in response.json()] == ["Older"]

        response = await authenticated_client.get("/api/issues", params={"search": "new"})
        assert [i["name"] for i in response.json()] == ["Newer"]

    @pytest.mark.asyncio
    async def test_create_issue_unknown_site(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/issues", json={"name": "Ghost", "site_id": 999}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_issue(self, authenticated_client: AsyncClient, db_session: AsyncSession):
        issue = Issue(name="Temporary")
        db_session.add(issue)
        await db_session.commit()

        response = await authenticated_client.delete(f"/api/issues/{issue.id}")
        assert response.status_code == 204
        response = await authenticated_client.delete(f"/api/issues/{issue.id}")
        assert response.status_code == 404
