from __future__ import annotations

from typing import Any, Protocol

from supabase import Client

from app.models.submission import SubmissionStatus
from app.services.store_errors import run_query

SUBMISSIONS_TABLE = "business_submissions"

SUBMISSION_LIST_COLUMNS = (
    "id,created_at,updated_at,status,site_slug,submitter_name,submitter_email,name,"
    "categories,price_range,address,postcode,phone,website,instagram,facebook,"
    "short_desc,long_desc,payload,owner_id"
)
SUBMISSION_RECENT_COLUMNS = "id,created_at,status,site_slug,name,submitter_email"


class SubmissionStore(Protocol):
    def update_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        *,
        expected_updated_at: str | None = None,
    ) -> list[dict[str, Any]]: ...

    def count_by_status(self, status: SubmissionStatus) -> int: ...

    def list_submissions(
        self,
        *,
        status: SubmissionStatus | None,
        name_query: str | None,
        limit: int,
    ) -> list[dict[str, Any]]: ...

    def list_recent(self, *, limit: int) -> list[dict[str, Any]]: ...


class SupabaseSubmissionStore:
    """Row access for business_submissions. Every query runs as the session user, under RLS."""

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(SUBMISSIONS_TABLE)

    def update_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        *,
        expected_updated_at: str | None = None,
    ) -> list[dict[str, Any]]:
        query = self._table().update({"status": status.value}).eq("id", submission_id)
        if expected_updated_at:
            query = query.eq("updated_at", expected_updated_at)
        result = run_query(query)
        return list(result.data or [])

    def count_by_status(self, status: SubmissionStatus) -> int:
        result = run_query(
            self._table().select("id", count="exact", head=True).eq("status", status.value)
        )
        return result.count or 0

    def list_submissions(
        self,
        *,
        status: SubmissionStatus | None,
        name_query: str | None,
        limit: int,
    ) -> list[dict[str, Any]]:
        query = self._table().select(SUBMISSION_LIST_COLUMNS)
        if status is not None:
            query = query.eq("status", status.value)
        if name_query:
            query = query.ilike("name", f"%{name_query}%")
        result = run_query(query.order("created_at", desc=True).limit(limit))
        return list(result.data or [])

    def list_recent(self, *, limit: int) -> list[dict[str, Any]]:
        result = run_query(
            self._table()
            .select(SUBMISSION_RECENT_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
        )
        return list(result.data or [])
