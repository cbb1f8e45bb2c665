"""
Security guards for role-based and location-scoped access control.

Provides dependency factories for protecting endpoints.
"""

from typing import Iterable, List, Optional
from fastapi import Depends
from valet_backend.app.core.access_scope import AccessContext, Principal, enforce_location_access, enforce_role
from valet_backend.app.core.dependencies import get_access_context, get_current_principal
from valet_backend.app.models.enums import UserRole


def require_role(allowed_roles: Iterable[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin/locations")
        async def list_locations(principal: Principal = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        RoleNotAllowedError (403) naming the allowed roles
    """
    allowed = frozenset(allowed_roles)

    async def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        enforce_role(principal, allowed)
        return principal

    return role_checker


def require_scoped_role(allowed_roles: Iterable[UserRole]):
    """
    Like require_role, but hands the endpoint the full AccessContext.

    Usage:
        @router.get("/dashboard/owner")
        async def owner_dashboard(context: AccessContext = Depends(require_scoped_role([UserRole.OWNER]))):
            ...
    """
    allowed = frozenset(allowed_roles)

    async def scoped_role_checker(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        enforce_role(context.principal, allowed)
        return context

    return scoped_role_checker


require_admin = require_role([UserRole.ADMIN])


def narrow_location_scope(context: AccessContext, location_id: Optional[str]) -> List[str]:
    """
    Location ids a query should be filtered by.

    All accessible ids when no location is requested, otherwise just the
    requested one after the scope check.

    Raises:
        LocationNotAssignedError (403) when location_id is out of scope
    """
    enforce_location_access(context, location_id)
    if location_id:
        return [location_id]
    return sorted(context.location_ids)
