"""reCAPTCHA v3 verification for the public booking form."""

from dataclasses import dataclass

import httpx
import structlog

from clinic_api.config import settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CaptchaResult:
    """Outcome of a reCAPTCHA check."""

    success: bool
    score: float | None = None
    action: str | None = None


async def verify_recaptcha(
    token: str,
    expected_action: str | None = None,
    remote_ip: str | None = None,
) -> CaptchaResult:
    """
    Verify a reCAPTCHA v3 token with Google.

    The token passes when Google accepts it, its score reaches the configured
    threshold and its action matches the booking action.

    Args:
        token: Token produced by the browser widget
        expected_action: Action the token must carry (defaults to settings)
        remote_ip: Client address forwarded to Google

    Returns:
        Verification result
    """
    expected_action = expected_action or settings.recaptcha_action

    if not settings.recaptcha_secret_key:
        logger.error("recaptcha_not_configured")
        return CaptchaResult(success=False)

    form = {"secret": settings.recaptcha_secret_key, "response": token}
    if remote_ip:
        form["remoteip"] = remote_ip

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(settings.recaptcha_verify_url, data=form)
            payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("recaptcha_verification_failed", error=str(e))
        return CaptchaResult(success=False)

    score = payload.get("score")
    action = payload.get("action")
    if not payload.get("success") or score is None:
        logger.warning("recaptcha_rejected", error_codes=payload.get("error-codes", []))
        return CaptchaResult(success=False, score=score, action=action)

    passed = score >= settings.recaptcha_min_score and action == expected_action
    logger.info(
        "recaptcha_verified",
        score=score,
        action=action,
        expected_action=expected_action,
        passed=passed,
    )
    return CaptchaResult(success=passed, score=score, action=action)
