"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from medonboard.api.v1.dependencies.
"""

from fastapi import APIRouter

from medonboard.api.v1.endpoints import (
    admin,
    clinics,
    doctors,
    health,
    patients,
    permissions,
    roles,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(clinics.router, prefix="/clinics", tags=["clinics"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
