# app/routers/debug.py - Admin auth diagnostics (non-production only)

from urllib.parse import urlparse

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_access_token, get_identity_service, get_profile_store
from app.auth.identity import IdentityService, ProfileStore
from app.config import get_settings
from app.utils.exceptions import NotFoundError

router = APIRouter()


def require_non_production() -> None:
    if get_settings().is_production:
        raise NotFoundError("Not Found")


@router.get("/admin", dependencies=[Depends(require_non_production)])
async def debug_admin(
    access_token: str | None = Depends(get_access_token),
    identity: IdentityService = Depends(get_identity_service),
    profiles: ProfileStore = Depends(get_profile_store),
) -> dict:
    """Show which user the session resolves to and what the profiles table returns for it."""
    settings = get_settings()
    host = urlparse(settings.supabase_url).hostname or ""

    user = None
    user_error = None
    try:
        user = identity.get_user(access_token)
    except Exception as exc:  # noqa: BLE001
        user_error = str(exc)

    profile = None
    profile_error = None
    if user is not None:
        try:
            found = profiles.get_profile(user.id)
            profile = found.model_dump() if found else None
        except Exception as exc:  # noqa: BLE001
            profile_error = str(exc)

    return {
        "projectRef": host.split(".")[0] or None,
        "envUrl": settings.supabase_url,
        "auth": {
            "user": user.model_dump() if user else None,
            "error": user_error,
        },
        "profileForCurrentUser": {
            "data": profile,
            "error": profile_error,
        },
    }
