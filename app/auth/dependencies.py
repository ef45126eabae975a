# app/auth/dependencies.py - Session token, Supabase-backed collaborators, admin gate dependency

from collections.abc import Callable, Iterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from app.auth.admin import check_admin, enforce_admin
from app.auth.identity import (
    IdentityService,
    ProfileStore,
    SupabaseIdentityService,
    SupabaseProfileStore,
)
from app.auth.models import AdminContext
from app.config import get_settings
from app.database import close_client, get_session_client

security = HTTPBearer(auto_error=False)

AdminAuthorizer = Callable[[str], AdminContext]


def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """
    Resolve the caller's Supabase access token:
    1) bearer token
    2) session cookie set by /admin/login
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    cookie = request.cookies.get(get_settings().session_cookie_name)
    return cookie or None


def get_request_client(access_token: str | None = Depends(get_access_token)) -> Iterator[Client]:
    """One client per request, closed once the response has been produced."""
    client = get_session_client(access_token)
    try:
        yield client
    finally:
        close_client(client)


def get_identity_service(client: Client = Depends(get_request_client)) -> IdentityService:
    return SupabaseIdentityService(client)


def get_profile_store(client: Client = Depends(get_request_client)) -> ProfileStore:
    return SupabaseProfileStore(client)


def get_admin_authorizer(
    access_token: str | None = Depends(get_access_token),
    identity: IdentityService = Depends(get_identity_service),
    profiles: ProfileStore = Depends(get_profile_store),
) -> AdminAuthorizer:
    """
    Lazy gate: nothing is looked up until the returned callable runs, so
    handlers can validate their input before touching the identity service.
    """
    include_reason = not get_settings().is_production

    def _authorize(next_path: str) -> AdminContext:
        result = check_admin(access_token=access_token, identity=identity, profiles=profiles)
        return enforce_admin(result, next_path, include_reason=include_reason)

    return _authorize


def require_admin(next_path: str) -> Callable[..., AdminContext]:
    """Dependency factory for admin-only pages; redirects to login when the gate denies."""

    def _dependency(authorize: AdminAuthorizer = Depends(get_admin_authorizer)) -> AdminContext:
        return authorize(next_path)

    return _dependency
