# app/auth/identity.py - Identity and profile lookups backed by Supabase

import logging
from typing import Any, Protocol

from supabase import AuthError, Client

from app.auth.models import AdminProfile, IdentityUser, PasswordSession
from app.services.store_errors import run_query

logger = logging.getLogger(__name__)


class IdentityService(Protocol):
    def get_user(self, access_token: str | None) -> IdentityUser | None: ...


class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> AdminProfile | None: ...


class SupabaseIdentityService:
    def __init__(self, client: Client):
        self._client = client

    def get_user(self, access_token: str | None) -> IdentityUser | None:
        """Resolve the session token to a user. Invalid or expired tokens raise AuthError."""
        if not access_token:
            return None
        response = self._client.auth.get_user(access_token)
        user = getattr(response, "user", None) if response else None
        if user is None:
            return None
        return IdentityUser(id=str(user.id), email=user.email)

    def sign_in_with_password(self, email: str, password: str) -> PasswordSession | None:
        try:
            response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as exc:
            logger.info("Password sign-in rejected", extra={"error": str(exc)})
            return None
        session = getattr(response, "session", None)
        if session is None or not session.access_token:
            return None
        return PasswordSession(access_token=session.access_token, expires_in=session.expires_in)


class SupabaseProfileStore:
    def __init__(self, client: Client):
        self._client = client

    def get_profile(self, user_id: str) -> AdminProfile | None:
        result = run_query(
            self._client.table("profiles")
            .select("id, email, role")
            .eq("id", user_id)
            .maybe_single()
        )
        # maybe_single() yields no response at all when the row is absent
        row: Any = result.data if result is not None else None
        if not row:
            return None
        return AdminProfile(**row)
