# app/auth/admin.py - Admin gate: fail-closed role check and login redirects

import logging
from urllib.parse import urlencode

from app.auth.identity import IdentityService, ProfileStore
from app.auth.models import (
    AdminAuthResult,
    AdminContext,
    Authorized,
    DenialReason,
    Unauthorized,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/admin/login"
DEFAULT_NEXT_PATH = "/admin"


class AdminRedirectError(Exception):
    """Raised to divert a request to the admin login page. Handlers never resume after it."""

    def __init__(self, location: str, outcome: Unauthorized):
        super().__init__(location)
        self.location = location
        self.outcome = outcome


def safe_next_path(next_path: str | None) -> str:
    """Only local absolute paths are allowed as post-login destinations."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DEFAULT_NEXT_PATH
    return next_path


def build_login_url(
    next_path: str | None,
    *,
    forbidden: bool = False,
    reason: str | None = None,
) -> str:
    params = {"next": safe_next_path(next_path)}
    if forbidden:
        params["forbidden"] = "1"
    if reason:
        params["reason"] = reason
    return f"{LOGIN_PATH}?{urlencode(params)}"


def check_admin(
    *,
    access_token: str | None,
    identity: IdentityService,
    profiles: ProfileStore,
) -> AdminAuthResult:
    """
    Decide whether the session belongs to an administrator.

    Only a profile row whose role is exactly "admin" authorizes. A failed
    identity lookup, a failed profile lookup, a missing row and any other
    role all deny.
    """
    try:
        user = identity.get_user(access_token)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Identity lookup failed", extra={"error": str(exc)})
        user = None

    if user is None:
        logger.debug("Not authenticated", extra={"has_token": bool(access_token)})
        return Unauthorized(DenialReason.NOT_AUTHENTICATED)

    try:
        profile = profiles.get_profile(user.id)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Profile lookup failed", extra={"user_id": user.id, "error": str(exc)})
        return Unauthorized(DenialReason.PROFILE_LOOKUP_FAILED)

    if profile is None:
        logger.debug("Profile missing or blocked by RLS", extra={"user_id": user.id})
        return Unauthorized(DenialReason.PROFILE_MISSING)

    if not profile.is_admin:
        logger.debug("User is not admin", extra={"user_id": user.id, "role": profile.role})
        return Unauthorized(DenialReason.NOT_ADMIN)

    return Authorized(AdminContext(user_id=user.id, email=profile.email or user.email or None))


def login_redirect_for(outcome: Unauthorized, next_path: str, *, include_reason: bool) -> str:
    return build_login_url(
        next_path,
        forbidden=outcome.forbidden,
        reason=outcome.reason.value if include_reason and outcome.forbidden else None,
    )


def enforce_admin(result: AdminAuthResult, next_path: str, *, include_reason: bool = False) -> AdminContext:
    """Unwrap an Authorized result or raise AdminRedirectError towards the login page."""
    if isinstance(result, Authorized):
        return result.admin
    location = login_redirect_for(result, next_path, include_reason=include_reason)
    logger.info(
        "Admin access denied",
        extra={"reason": result.reason.value, "next_path": safe_next_path(next_path)},
    )
    raise AdminRedirectError(location, result)
