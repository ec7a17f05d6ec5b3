"""Main API router."""

from fastapi import APIRouter

from src.api.assessments import router as assessments_router
from src.api.assets import router as assets_router
from src.api.auth import router as auth_router
from src.api.dashboard import router as dashboard_router
from src.api.issues import router as issues_router
from src.api.parameters import router as parameters_router
from src.api.risks import router as risks_router
from src.api.services import router as services_router
from src.api.sites import router as sites_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(sites_router, prefix="/sites", tags=["sites"])
api_router.include_router(services_router, prefix="/services", tags=["services"])
api_router.include_router(assets_router, prefix="/assets", tags=["assets"])
api_router.include_router(parameters_router, prefix="/parameters", tags=["parameters"])
api_router.include_router(assessments_router, prefix="/assessments", tags=["assessments"])
api_router.include_router(risks_router, prefix="/risks", tags=["risks"])
api_router.include_router(issues_router, prefix="/issues", tags=["issues"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
