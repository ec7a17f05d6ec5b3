"""DR dimension and parameter catalog endpoints (read-only)."""

from dataclasses import asdict
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from src.auth import get_current_user
from src.catalog import (
    DIMENSIONS,
    SCORE_DEFINITIONS,
    Dimension,
    dimension_for_parameter,
    get_dimension,
    get_parameter,
)
from src.models.user import User
from src.services.scoring import FormulaSettings

router = APIRouter()


def _dimension_payload(dimension: Dimension) -> dict[str, Any]:
    payload = asdict(dimension)
    payload["scorable_parameter_count"] = len(dimension.scorable_parameters)
    return payload


@router.get("/dimensions")
async def list_dimensions(
    user: Annotated[User, Depends(get_current_user)],
) -> list[dict[str, Any]]:
    """All DR dimensions with their parameters."""
    return [_dimension_payload(d) for d in DIMENSIONS]


@router.get("/dimensions/{dimension_id}")
async def get_dimension_endpoint(
    dimension_id: int,
    user: Annotated[User, Depends(get_current_user)],
) -> dict[str, Any]:
    dimension = get_dimension(dimension_id)
    if not dimension:
        raise HTTPException(status_code=404, detail="Dimension not found")
    return _dimension_payload(dimension)


@router.get("/score-definitions")
async def list_score_definitions(
    user: Annotated[User, Depends(get_current_user)],
) -> list[dict[str, Any]]:
    """Meaning of each score on the 1-5 maturity scale."""
    return [asdict(d) for d in SCORE_DEFINITIONS]


@router.get("/formula", response_model=FormulaSettings)
async def default_formula(
    user: Annotated[User, Depends(get_current_user)],
) -> FormulaSettings:
    """Formula settings new assessments start with."""
    return FormulaSettings()


@router.get("/{parameter_id}")
async def get_parameter_endpoint(
    parameter_id: int,
    user: Annotated[User, Depends(get_current_user)],
) -> dict[str, Any]:
    parameter = get_parameter(parameter_id)
    if not parameter:
        raise HTTPException(status_code=404, detail="Parameter not found")

    dimension = dimension_for_parameter(parameter_id)
    return {**asdict(parameter), "dimension_id": dimension.id if dimension else None}
