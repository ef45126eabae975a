# app/routers/admin_auth.py - Admin sign-in state, password sign-in, sign-out

from collections.abc import Iterator

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from app.auth.admin import LOGIN_PATH, safe_next_path
from app.auth.identity import SupabaseIdentityService
from app.config import get_settings
from app.database import close_client, get_sign_in_client
from app.routers._responses import DataEnvelope, ErrorEnvelope, error_response

router = APIRouter()


class AdminLoginState(BaseModel):
    next: str
    forbidden: bool
    reason: str | None = None


def get_sign_in_service() -> Iterator[SupabaseIdentityService]:
    # Fresh client per sign-in so no session is kept on a shared client.
    client = get_sign_in_client()
    try:
        yield SupabaseIdentityService(client)
    finally:
        close_client(client)


@router.get("/login", response_model=DataEnvelope)
async def admin_login_state(
    next: str | None = None,
    forbidden: str | None = None,
    reason: str | None = None,
) -> DataEnvelope:
    """What the login page needs: where to go afterwards and why the caller landed here."""
    settings = get_settings()
    state = AdminLoginState(
        next=safe_next_path(next),
        forbidden=forbidden == "1",
        reason=None if settings.is_production else reason,
    )
    return DataEnvelope(data=state.model_dump())


@router.post("/login", responses={303: {"description": "Signed in"}, 401: {"model": ErrorEnvelope}})
async def admin_login(
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form(""),
    sign_in: SupabaseIdentityService = Depends(get_sign_in_service),
):
    """
    Password sign-in. The admin role is checked by the gate on the next page, not here.

    Only the access token is kept, in a cookie that expires with it. There is no
    refresh: once it lapses the gate sends the admin back to the login page with
    `next` set, and signing in again returns them to where they were.
    """
    normalized_email = email.strip().lower()
    if not normalized_email or not password:
        return error_response("Invalid credentials", 401)

    session = sign_in.sign_in_with_password(normalized_email, password)
    if session is None:
        return error_response("Invalid credentials", 401)

    settings = get_settings()
    response = RedirectResponse(safe_next_path(next), status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return response


@router.post("/logout", responses={303: {"description": "Signed out"}})
async def admin_logout() -> RedirectResponse:
    response = RedirectResponse(LOGIN_PATH, status_code=303)
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return response
