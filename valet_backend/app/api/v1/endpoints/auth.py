"""
Authentication API endpoints.

Staff login (ADMIN, OWNER, MANAGER) and current-user lookup.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from valet_backend.app.core.access_scope import AccessContext
from valet_backend.app.core.dependencies import get_access_context
from valet_backend.app.db.session import get_db
from valet_backend.app.schemas.auth import (
    CurrentUser, CurrentUserData, CurrentUserResponse, LoginRequest, LoginResponse
)
from valet_backend.app.schemas.location import LocationSummary
from valet_backend.app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with user_id, email or phone number and return a JWT token.

    Drivers are rejected with 403; they sign in through the mobile app.
    """
    result = await auth_service.login(
        db,
        credentials.login_id,
        credentials.password,
        ip_address=request.client.host if request.client else None,
    )
    user = result.user

    return LoginResponse(
        success=True,
        user_id=user.user_id,
        name=user.name,
        role=user.role_name,
        role_id=user.role_id,
        token=result.token
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(context: AccessContext = Depends(get_access_context)):
    """
    Get the authenticated user and the locations it can currently access.
    """
    principal = context.principal

    return CurrentUserResponse(
        data=CurrentUserData(
            user=CurrentUser(
                user_id=principal.user_id,
                name=principal.name,
                email_id=principal.email_id,
                phone_number=principal.phone_number,
                role_name=principal.role,
                role=principal.role,
                role_id=principal.role_id
            ),
            accessibleLocations=[LocationSummary.model_validate(loc) for loc in context.locations]
        )
    )
