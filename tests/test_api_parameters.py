"""Tests for the read-only DR catalog endpoints."""

import pytest
from httpx import AsyncClient


class TestParameterCatalog:
    @pytest.mark.asyncio
    async def test_list_dimensions(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/parameters/dimensions")
        assert response.status_code == 200
        dimensions = response.json()

        assert len(dimensions) == 9
        internal = dimensions[0]
        assert internal["name"] == "Internal Support"
        assert internal["scorable_parameter_count"] == 7
        assert internal["parameters"][0]["weightage"] == 25
        assert internal["parameters"][3]["options"] == [
            "Remote L1 support",
            "Remote L2 support",
            "Not Available",
        ]

    @pytest.mark.asyncio
    async def test_get_dimension(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/parameters/dimensions/4")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Redundancy"
        assert [p["scorable"] for p in data["parameters"]] == [False, True]

        response = await authenticated_client.get("/api/parameters/dimensions/10")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_parameter(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/parameters/15")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Asset Uptime"
        assert data["type"] == "percentage"
        assert data["unit"] == "%"
        assert data["dimension_id"] == 3

        response = await authenticated_client.get("/api/parameters/45")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_score_definitions(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/parameters/score-definitions")
        assert [d["score"] for d in response.json()] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_default_formula(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/parameters/formula")
        assert response.json() == {
            "use_dimension_weightage": True,
            "use_asset_criticality": False,
            "dimension_weightage_multiplier": 1.0,
            "criticality_multipliers": {"High": 1.2, "Medium": 1.0, "Low": 0.8},
        }
