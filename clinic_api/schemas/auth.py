"""Admin authentication schemas."""

from datetime import datetime

from pydantic import Field

from clinic_api.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Dashboard login credentials."""

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=200)


class AdminSession(CamelModel):
    """The signed-in administrator."""

    id: str
    email: str
    name: str
    expires_at: datetime | None = None


class LoginResponse(CamelModel):
    """Schema for a successful login."""

    success: bool = True
    message: str = "Signed in"
    access_token: str
    token_type: str = "bearer"
    data: AdminSession
