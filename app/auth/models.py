# app/auth/models.py - Identity, profile and gate outcome types

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

ADMIN_ROLE = "admin"


class IdentityUser(BaseModel):
    id: str
    email: str | None = None


class PasswordSession(BaseModel):
    access_token: str
    expires_in: int | None = None


class AdminProfile(BaseModel):
    id: str | None = None
    email: str | None = None
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


@dataclass(frozen=True)
class AdminContext:
    user_id: str
    email: str | None


class DenialReason(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    PROFILE_LOOKUP_FAILED = "profile_lookup_failed"
    PROFILE_MISSING = "profile_missing"
    NOT_ADMIN = "not_admin"


@dataclass(frozen=True)
class Authorized:
    admin: AdminContext


@dataclass(frozen=True)
class Unauthorized:
    reason: DenialReason

    @property
    def forbidden(self) -> bool:
        """Signed in, but not allowed into the admin area."""
        return self.reason is not DenialReason.NOT_AUTHENTICATED


AdminAuthResult = Authorized | Unauthorized
