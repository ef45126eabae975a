from __future__ import annotations

import os

import pytest

# Settings are read when app.main is imported, before any fixture runs.
os.environ.setdefault("SUPABASE_URL", "https://testproject.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

from app.config import get_settings  # noqa: E402
from app.services import view_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SUPABASE_URL", "https://testproject.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "test-anon-key")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("SUPABASE_DEBUG", "false")
    get_settings.cache_clear()
    view_cache._view_cache = None
    yield
    get_settings.cache_clear()
    view_cache._view_cache = None
