# app/auth/__init__.py - Authentication module

from app.auth.admin import AdminRedirectError, check_admin, enforce_admin
from app.auth.dependencies import get_access_token, get_admin_authorizer, require_admin
from app.auth.models import AdminContext, Authorized, DenialReason, Unauthorized

__all__ = [
    "check_admin",
    "enforce_admin",
    "get_access_token",
    "get_admin_authorizer",
    "require_admin",
    "AdminContext",
    "AdminRedirectError",
    "Authorized",
    "DenialReason",
    "Unauthorized",
]
