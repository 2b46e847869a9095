"""Authentication service for the dashboard administrator."""

from datetime import UTC, datetime, timedelta

import structlog

from clinic_api.config import settings
from clinic_api.core.exceptions import UnauthorizedException
from clinic_api.core.security import create_session_token, decode_session_token, verify_password
from clinic_api.schemas.auth import AdminSession

logger = structlog.get_logger(__name__)

ADMIN_ID = "1"


class AuthService:
    """Credentials check and session tokens for the single configured admin."""

    @staticmethod
    def authenticate(email: str, password: str) -> AdminSession:
        """
        Check dashboard credentials.

        The email is compared trimmed and case-insensitively; the password
        against the configured bcrypt hash.

        Args:
            email: Submitted email
            password: Submitted password

        Returns:
            The admin identity

        Raises:
            UnauthorizedException: If the credentials do not match
        """
        if not settings.admin_email or not settings.admin_password_hash:
            logger.error("admin_credentials_not_configured")
            raise UnauthorizedException("Invalid email or password")

        email_matches = email.strip().lower() == settings.admin_email.strip().lower()
        # Always run bcrypt so a wrong email costs as much as a wrong password
        password_matches = verify_password(password, settings.admin_password_hash)

        if not (email_matches and password_matches):
            logger.warning("admin_login_failed", email=email.strip().lower())
            raise UnauthorizedException("Invalid email or password")

        logger.info("admin_login_succeeded", email=settings.admin_email)
        return AdminSession(id=ADMIN_ID, email=settings.admin_email, name=settings.admin_name)

    @staticmethod
    def create_session(admin: AdminSession) -> tuple[str, AdminSession]:
        """
        Issue a signed session token for ``admin``.

        Returns:
            Tuple of (token, admin with expiry)
        """
        expires_delta = timedelta(minutes=settings.session_expire_minutes)
        token = create_session_token(
            {"sub": admin.id, "email": admin.email, "name": admin.name},
            expires_delta=expires_delta,
        )
        session = admin.model_copy(update={"expires_at": datetime.now(UTC) + expires_delta})
        return token, session

    @staticmethod
    def session_from_token(token: str | None) -> AdminSession | None:
        """Admin identity carried by a session token, or None if invalid."""
        if not token:
            return None

        payload = decode_session_token(token)
        if payload is None:
            return None

        subject = payload.get("sub")
        email = payload.get("email")
        if not isinstance(subject, str) or not isinstance(email, str):
            return None

        return AdminSession(
            id=subject,
            email=email,
            name=payload.get("name") or settings.admin_name,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
