"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from valet_backend.app.api.v1.endpoints import auth, locations, owners, dashboard, audit_logs

router = APIRouter()

router.include_router(auth.router)
router.include_router(locations.router)
router.include_router(owners.router)
router.include_router(dashboard.router)
router.include_router(audit_logs.router)
