from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from app.auth.models import AdminContext
from app.models.submission import SubmissionCounts, SubmissionStatus
from app.services.store_errors import StoreError
from app.services.submission_store import SubmissionStore
from app.services.view_cache import ViewCache
from app.utils.exceptions import ConflictError, NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

ADMIN_OVERVIEW_PATH = "/admin"
SUBMISSIONS_PATH = "/admin/submissions"

QUEUE_LIMIT = 200
RECENT_LIMIT = 12
ALL_STATUSES = "all"


def parse_status(value: object) -> SubmissionStatus:
    normalized = str(value or "").strip().lower()
    try:
        return SubmissionStatus(normalized)
    except ValueError:
        raise ValidationError("Invalid status.") from None


def parse_status_filter(value: str | None) -> SubmissionStatus | None:
    """Queue filter: one status, or None for "all". Defaults to pending."""
    normalized = (value or SubmissionStatus.PENDING.value).strip().lower()
    if normalized == ALL_STATUSES:
        return None
    try:
        return SubmissionStatus(normalized)
    except ValueError:
        raise ValidationError("Invalid status filter.") from None


def set_submission_status(
    *,
    submission_id: object,
    status: object,
    authorize: Callable[[str], AdminContext],
    store: SubmissionStore,
    cache: ViewCache,
    expected_updated_at: object = None,
) -> dict[str, Any]:
    """
    Move one submission to pending, approved or denied.

    Input is validated before the admin gate or the store is touched. The
    gate raises AdminRedirectError on denial, so nothing below it runs for a
    non-admin. One update is issued, matched by id (and by updated_at when the
    caller supplies it); there is no retry.
    """
    cleaned_id = str(submission_id or "").strip()
    if not cleaned_id:
        raise ValidationError("Missing submission id.")
    target = parse_status(status)
    expected = str(expected_updated_at or "").strip() or None

    admin = authorize(SUBMISSIONS_PATH)

    try:
        rows = store.update_status(cleaned_id, target, expected_updated_at=expected)
    except StoreError as exc:
        logger.warning(
            "Submission status update failed",
            extra={"submission_id": cleaned_id, "status": target.value, "error": exc.message},
        )
        raise UpstreamError(exc.message or "Update failed.") from exc

    if not rows:
        if expected:
            raise ConflictError(
                "Update conflict: the submission changed since you loaded the page. "
                "Refresh and try again."
            )
        raise NotFoundError("No rows updated. Check the submission id and RLS policies.")

    cache.revalidate(ADMIN_OVERVIEW_PATH)
    cache.revalidate(SUBMISSIONS_PATH)

    logger.info(
        "Submission status updated",
        extra={"submission_id": cleaned_id, "status": target.value, "admin_user_id": admin.user_id},
    )
    return rows[0]


def _load(loader: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    try:
        return loader(*args, **kwargs)
    except StoreError as exc:
        raise UpstreamError(exc.message) from exc


def _status_counts(store: SubmissionStore) -> SubmissionCounts:
    return SubmissionCounts(
        **{status.value: _load(store.count_by_status, status) for status in SubmissionStatus}
    )


def load_overview(*, store: SubmissionStore, cache: ViewCache) -> dict[str, Any]:
    def _build() -> dict[str, Any]:
        recent = _load(store.list_recent, limit=RECENT_LIMIT)
        return {"counts": _status_counts(store).model_dump(), "recent": recent}

    return cache.get_or_build(ADMIN_OVERVIEW_PATH, _build)


def load_queue(
    *,
    store: SubmissionStore,
    cache: ViewCache,
    status_filter: str | None = None,
    name_query: str | None = None,
) -> dict[str, Any]:
    status = parse_status_filter(status_filter)
    query = (name_query or "").strip()
    variant = f"{status.value if status else ALL_STATUSES}|{query.lower()}"

    def _build() -> dict[str, Any]:
        rows = _load(
            store.list_submissions,
            status=status,
            name_query=query or None,
            limit=QUEUE_LIMIT,
        )
        return {
            "status": status.value if status else ALL_STATUSES,
            "q": query,
            "counts": _status_counts(store).model_dump(),
            "submissions": rows,
        }

    return cache.get_or_build(SUBMISSIONS_PATH, _build, variant=variant)
