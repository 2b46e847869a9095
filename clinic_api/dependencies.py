"""FastAPI dependencies."""

from typing import Annotated

import redis
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.config import settings
from clinic_api.core.exceptions import RateLimitException, UnauthorizedException
from clinic_api.core.redis_client import CacheManager, RateLimiter, get_redis_client
from clinic_api.database import get_db
from clinic_api.schemas.auth import AdminSession
from clinic_api.services.auth_service import AuthService

# Security; a missing header falls through to the session cookie
security = HTTPBearer(auto_error=False)


def client_ip(request: Request) -> str | None:
    """Caller address, honouring the first ``X-Forwarded-For`` hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def get_current_admin(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AdminSession:
    """
    Resolve the signed-in admin from the bearer header or session cookie.

    Args:
        request: Incoming request
        credentials: Bearer token credentials, if sent

    Returns:
        Admin identity from the session

    Raises:
        UnauthorizedException: If no valid session is presented
    """
    token = credentials.credentials if credentials else None
    token = token or request.cookies.get(settings.session_cookie_name)

    admin = AuthService.session_from_token(token)
    if admin is None:
        raise UnauthorizedException()

    return admin


def get_cache_manager(
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> CacheManager:
    """Cache manager over the shared Redis client."""
    return CacheManager(redis_client)


async def limit_booking_rate(
    request: Request,
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> None:
    """
    Allow a limited number of booking attempts per client IP per minute.

    Raises:
        RateLimitException: If the caller exceeded the limit
    """
    key = f"rate:booking:{client_ip(request) or 'unknown'}"
    limiter = RateLimiter(redis_client)
    if not limiter.check_rate_limit(key, settings.booking_rate_limit_per_minute, window=60):
        raise RateLimitException("Too many booking attempts. Please try again in a minute.")


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentAdmin = Annotated[AdminSession, Depends(get_current_admin)]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
