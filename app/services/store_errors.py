from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError


class StoreError(Exception):
    """Raised when a Supabase table query is rejected (RLS denial, schema mismatch, network)."""

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


def describe_api_error(exc: APIError) -> str:
    parts = [
        getattr(exc, "message", None),
        getattr(exc, "details", None),
        getattr(exc, "hint", None),
        getattr(exc, "code", None),
    ]
    described = " • ".join(str(part) for part in parts if part)
    return described or str(exc) or "Query failed."


def run_query(query: Any) -> Any:
    try:
        return query.execute()
    except APIError as exc:
        raise StoreError(describe_api_error(exc), code=getattr(exc, "code", None)) from exc
