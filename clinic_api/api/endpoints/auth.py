"""Authentication endpoints for the admin dashboard."""

from fastapi import APIRouter, Response, status

from clinic_api.config import settings
from clinic_api.dependencies import CurrentAdmin
from clinic_api.schemas.auth import AdminSession, LoginRequest, LoginResponse
from clinic_api.schemas.common import ApiResponse
from clinic_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in to the dashboard",
)
async def login(request: LoginRequest, response: Response) -> LoginResponse:
    """
    Check the admin credentials and open a session.

    The session token is returned in the body and set as an HttpOnly cookie.

    Args:
        request: Email and password
        response: Outgoing response (cookie)

    Returns:
        Session token and admin identity

    Raises:
        UnauthorizedException: If the credentials are wrong
    """
    admin = AuthService.authenticate(request.email, request.password)
    token, session = AuthService.create_session(admin)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return LoginResponse(access_token=token, data=session)


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Sign out",
)
async def logout(response: Response) -> ApiResponse[None]:
    """Clear the session cookie."""
    response.delete_cookie(settings.session_cookie_name)
    return ApiResponse(message="Signed out")


@router.get(
    "/session",
    response_model=ApiResponse[AdminSession],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Current admin session",
)
async def get_session(admin: CurrentAdmin) -> ApiResponse[AdminSession]:
    """Return the signed-in admin."""
    return ApiResponse(data=admin)
