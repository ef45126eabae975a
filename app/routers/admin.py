# app/routers/admin.py - Admin console: overview, moderation queue, status action

from dataclasses import asdict

from fastapi import APIRouter, Depends, Form
from supabase import Client

from app.auth import AdminContext, require_admin
from app.auth.dependencies import AdminAuthorizer, get_admin_authorizer, get_request_client
from app.config import get_settings
from app.routers._responses import DataEnvelope, ErrorEnvelope
from app.services.moderation import (
    ADMIN_OVERVIEW_PATH,
    SUBMISSIONS_PATH,
    load_overview,
    load_queue,
    set_submission_status,
)
from app.services.submission_store import SubmissionStore, SupabaseSubmissionStore
from app.services.view_cache import ViewCache, get_view_cache

router = APIRouter()


def get_submission_store(client: Client = Depends(get_request_client)) -> SubmissionStore:
    return SupabaseSubmissionStore(client)


@router.get("", response_model=DataEnvelope, responses={502: {"model": ErrorEnvelope}})
async def admin_overview(
    admin: AdminContext = Depends(require_admin(ADMIN_OVERVIEW_PATH)),
    store: SubmissionStore = Depends(get_submission_store),
    cache: ViewCache = Depends(get_view_cache),
) -> DataEnvelope:
    """Counts per status plus the most recent submissions."""
    overview = load_overview(store=store, cache=cache)
    return DataEnvelope(
        data={
            "admin": asdict(admin),
            "environment": "PRODUCTION" if get_settings().is_production else "DEVELOPMENT",
            **overview,
        }
    )


@router.get(
    "/submissions",
    response_model=DataEnvelope,
    responses={400: {"model": ErrorEnvelope}, 502: {"model": ErrorEnvelope}},
)
async def admin_submissions(
    status: str | None = None,
    q: str | None = None,
    _: AdminContext = Depends(require_admin(SUBMISSIONS_PATH)),
    store: SubmissionStore = Depends(get_submission_store),
    cache: ViewCache = Depends(get_view_cache),
) -> DataEnvelope:
    """Moderation queue, newest first. status is pending (default), approved, denied or all."""
    return DataEnvelope(data=load_queue(store=store, cache=cache, status_filter=status, name_query=q))


@router.post(
    "/submissions/status",
    response_model=DataEnvelope,
    responses={
        400: {"model": ErrorEnvelope},
        404: {"model": ErrorEnvelope},
        409: {"model": ErrorEnvelope},
        502: {"model": ErrorEnvelope},
    },
)
async def admin_set_submission_status(
    submission_id: str = Form("", alias="id"),
    status: str = Form(""),
    updated_at: str = Form(""),
    authorize: AdminAuthorizer = Depends(get_admin_authorizer),
    store: SubmissionStore = Depends(get_submission_store),
    cache: ViewCache = Depends(get_view_cache),
) -> DataEnvelope:
    """Approve, deny or re-queue one submission. Non-admins are redirected to login."""
    row = set_submission_status(
        submission_id=submission_id,
        status=status,
        expected_updated_at=updated_at,
        authorize=authorize,
        store=store,
        cache=cache,
    )
    return DataEnvelope(data=row)
