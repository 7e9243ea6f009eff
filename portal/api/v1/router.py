"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from portal.api.v1.dependencies.
"""

from fastapi import APIRouter

from portal.api.v1.endpoints import (
    auth,
    catalog,
    files,
    health,
    profiles,
    projects,
    session,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
