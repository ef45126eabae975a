from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from app.auth.dependencies import get_identity_service, get_profile_store
from app.auth.models import AdminProfile, IdentityUser, PasswordSession
from app.config import get_settings
from app.main import app
from app.routers.admin import get_submission_store
from app.routers.admin_auth import get_sign_in_service

USERS = {
    "tok-admin": IdentityUser(id="admin-1", email="admin@example.com"),
    "tok-editor": IdentityUser(id="editor-1", email="editor@example.com"),
}
PROFILES = {
    "admin-1": AdminProfile(id="admin-1", email=None, role="admin"),
    "editor-1": AdminProfile(id="editor-1", email="editor@example.com", role="editor"),
}


class _IdentityStub:
    def __init__(self):
        self.tokens: list[str | None] = []

    def get_user(self, access_token):
        self.tokens.append(access_token)
        return USERS.get(access_token or "")


class _ProfilesStub:
    def get_profile(self, user_id):
        return PROFILES.get(user_id)


class _StoreStub:
    def __init__(self):
        self.updates: list[tuple] = []

    def update_status(self, submission_id, status, *, expected_updated_at=None):
        self.updates.append((submission_id, status.value, expected_updated_at))
        return [{"id": submission_id, "status": status.value, "updated_at": "2025-12-02T09:00:00+00:00"}]

    def count_by_status(self, status):
        return {"pending": 2, "approved": 4, "denied": 0}[status.value]

    def list_submissions(self, *, status, name_query, limit):
        return [{"id": "abc123", "name": "Salts Diner", "status": status.value if status else "pending"}]

    def list_recent(self, *, limit):
        return [{"id": "abc123", "name": "Salts Diner"}]


class _SignInStub:
    def __init__(self):
        self.attempts: list[tuple[str, str]] = []

    def sign_in_with_password(self, email, password):
        self.attempts.append((email, password))
        if password != "correct-horse":
            return None
        return PasswordSession(access_token="tok-admin", expires_in=3600)


@pytest.fixture
def stubs():
    identity = _IdentityStub()
    store = _StoreStub()
    sign_in = _SignInStub()
    app.dependency_overrides[get_identity_service] = lambda: identity
    app.dependency_overrides[get_profile_store] = lambda: _ProfilesStub()
    app.dependency_overrides[get_submission_store] = lambda: store
    app.dependency_overrides[get_sign_in_service] = lambda: sign_in
    yield {"identity": identity, "store": store, "sign_in": sign_in}
    app.dependency_overrides.clear()


@pytest.fixture
def client(stubs) -> TestClient:
    return TestClient(app, follow_redirects=False)


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _redirect_query(response) -> dict[str, list[str]]:
    assert response.status_code == 303
    parts = urlsplit(response.headers["location"])
    assert parts.path == "/admin/login"
    return parse_qs(parts.query)


@pytest.fixture
def stripe_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    calls: list[dict] = []

    async def _fake_create_payment_intent(**kwargs):
        calls.append(kwargs)
        return {
            "attempt": {"provider": "stripe", "status": "created"},
            "mapped": {"payment_intent_id": "pi_9", "client_secret": "pi_9_secret_e2e"},
        }

    monkeypatch.setattr("app.providers.stripe.create_payment_intent", _fake_create_payment_intent)
    return calls


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


# Payment intents


def test_create_payment_intent_for_known_service(client: TestClient, stripe_calls: list[dict]):
    response = client.post(
        "/api/create-payment-intent",
        json={"serviceId": "website-5", "amount": 1, "currency": "usd"},
    )

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_9_secret_e2e"}
    assert stripe_calls[0]["amount"] == 4000
    assert stripe_calls[0]["currency"] == "gbp"


def test_create_payment_intent_for_unknown_service(client: TestClient, stripe_calls: list[dict]):
    response = client.post("/api/create-payment-intent", json={"serviceId": "not-a-real-id"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid service"}
    assert stripe_calls == []


def test_create_payment_intent_rejects_non_json_body(client: TestClient, stripe_calls: list[dict]):
    response = client.post(
        "/api/create-payment-intent",
        content=b"serviceId=website-5",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}
    assert stripe_calls == []


@pytest.mark.parametrize(
    ("path", "amount", "product"),
    [
        ("/api/stripe/create-christmas-pack-intent", 400, "saltaire_christmas_pack"),
        ("/api/stripe/create-christmas-custom-intent", 4000, "saltaire_christmas_custom_plan"),
    ],
)
def test_email_offer_endpoints(client: TestClient, stripe_calls: list[dict], path: str, amount: int, product: str):
    response = client.post(path, json={"email": "reader@example.com", "amount": 1})

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_9_secret_e2e"}
    assert stripe_calls[0]["amount"] == amount
    assert stripe_calls[0]["metadata"]["product"] == product
    assert stripe_calls[0]["receipt_email"] == "reader@example.com"


def test_email_offer_rejects_bad_email(client: TestClient, stripe_calls: list[dict]):
    response = client.post("/api/stripe/create-christmas-pack-intent", json={"email": "not an email"})

    assert response.status_code == 400
    assert response.json() == {"error": "Valid email required"}
    assert "clientSecret" not in response.json()
    assert stripe_calls == []


@pytest.fixture
def retrieved_intent(monkeypatch: pytest.MonkeyPatch) -> dict:
    intent = {
        "payment_intent_id": "pi_paid",
        "status": "succeeded",
        "amount_received": 400,
        "currency": "gbp",
        "metadata": {"product": "saltaire_christmas_pack"},
    }

    async def _fake_retrieve_payment_intent(**kwargs):
        return {"attempt": {"provider": "stripe", "status": "found"}, "mapped": intent}

    monkeypatch.setattr("app.providers.stripe.retrieve_payment_intent", _fake_retrieve_payment_intent)
    return intent


def test_christmas_pack_download_after_payment(client: TestClient, retrieved_intent: dict):
    response = client.get("/api/packs/christmas-pack?pi=pi_paid")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="saltaire-christmas-mini-plan.pdf"'
    assert response.headers["cache-control"] == "private, no-store"
    assert response.content.startswith(b"%PDF")


def test_christmas_pack_download_refused_for_unpaid_intent(client: TestClient, retrieved_intent: dict):
    retrieved_intent["status"] = "processing"

    response = client.get("/api/packs/christmas-pack?pi=pi_paid")

    assert response.status_code == 403
    assert response.json() == {"error": "Payment not verified"}


def test_christmas_pack_download_requires_intent_id(client: TestClient, retrieved_intent: dict):
    response = client.get("/api/packs/christmas-pack")

    assert response.status_code == 400
    assert response.json() == {"error": "Missing payment intent id"}


# Moderation


def test_admin_approves_submission(client: TestClient, stubs):
    response = client.post(
        "/admin/submissions/status",
        data={"id": "abc123", "status": "approved"},
        headers=_bearer("tok-admin"),
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "approved"
    assert stubs["store"].updates == [("abc123", "approved", None)]


def test_non_admin_is_redirected_forbidden_without_update(client: TestClient, stubs):
    response = client.post(
        "/admin/submissions/status",
        data={"id": "abc123", "status": "approved"},
        headers=_bearer("tok-editor"),
    )

    query = _redirect_query(response)
    assert query["next"] == ["/admin/submissions"]
    assert query["forbidden"] == ["1"]
    assert query["reason"] == ["not_admin"]
    assert stubs["store"].updates == []


def test_production_redirect_omits_reason(client: TestClient, stubs, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()

    response = client.post(
        "/admin/submissions/status",
        data={"id": "abc123", "status": "approved"},
        headers=_bearer("tok-editor"),
    )

    assert _redirect_query(response) == {"next": ["/admin/submissions"], "forbidden": ["1"]}


def test_invalid_status_fails_before_auth_and_store(client: TestClient, stubs):
    response = client.post(
        "/admin/submissions/status",
        data={"id": "abc123", "status": "archived"},
        headers=_bearer("tok-admin"),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status."}
    assert stubs["identity"].tokens == []
    assert stubs["store"].updates == []


def test_missing_id_fails_before_auth_and_store(client: TestClient, stubs):
    response = client.post(
        "/admin/submissions/status",
        data={"status": "approved"},
        headers=_bearer("tok-admin"),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing submission id."}
    assert stubs["identity"].tokens == []


def test_session_cookie_is_accepted(stubs):
    client = TestClient(app, follow_redirects=False, cookies={"sb-access-token": "tok-admin"})

    response = client.post("/admin/submissions/status", data={"id": "abc123", "status": "denied"})

    assert response.status_code == 200
    assert stubs["identity"].tokens == ["tok-admin"]


def test_lapsed_session_cookie_returns_to_login_with_next(stubs):
    client = TestClient(app, follow_redirects=False, cookies={"sb-access-token": "tok-expired"})

    response = client.get("/admin/submissions")

    assert _redirect_query(response) == {"next": ["/admin/submissions"]}
    assert stubs["identity"].tokens == ["tok-expired"]


# Admin pages


def test_overview_requires_session(client: TestClient):
    response = client.get("/admin")

    assert _redirect_query(response) == {"next": ["/admin"]}


def test_overview_for_admin(client: TestClient):
    response = client.get("/admin", headers=_bearer("tok-admin"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["admin"] == {"user_id": "admin-1", "email": "admin@example.com"}
    assert data["counts"] == {"pending": 2, "approved": 4, "denied": 0}
    assert data["environment"] == "DEVELOPMENT"


def test_submissions_queue_for_admin(client: TestClient):
    response = client.get("/admin/submissions?status=approved&q=diner", headers=_bearer("tok-admin"))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["q"] == "diner"
    assert data["submissions"][0]["id"] == "abc123"


def test_submissions_queue_rejects_unknown_filter(client: TestClient):
    response = client.get("/admin/submissions?status=archived", headers=_bearer("tok-admin"))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status filter."}


# Sign-in


def test_login_state_sanitizes_next(client: TestClient):
    response = client.get("/admin/login?next=//evil.example.com&forbidden=1&reason=not_admin")

    assert response.json() == {"data": {"next": "/admin", "forbidden": True, "reason": "not_admin"}}


def test_login_sets_cookie_and_redirects_to_next(client: TestClient, stubs):
    response = client.post(
        "/admin/login",
        data={"email": " Admin@Example.com ", "password": "correct-horse", "next": "/admin/submissions"},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/submissions"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("sb-access-token=tok-admin")
    assert "HttpOnly" in cookie
    assert "Max-Age=3600" in cookie
    assert stubs["sign_in"].attempts == [("admin@example.com", "correct-horse")]


def test_login_with_bad_password(client: TestClient):
    response = client.post("/admin/login", data={"email": "admin@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_logout_clears_cookie(client: TestClient):
    response = client.post("/admin/logout")

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"
    assert 'sb-access-token=""' in response.headers["set-cookie"]


# Debug


def test_debug_admin_reports_profile(client: TestClient):
    response = client.get("/api/debug/admin", headers=_bearer("tok-editor"))

    assert response.status_code == 200
    body = response.json()
    assert body["projectRef"] == "testproject"
    assert body["auth"]["user"] == {"id": "editor-1", "email": "editor@example.com"}
    assert body["profileForCurrentUser"]["data"]["role"] == "editor"


def test_debug_admin_hidden_in_production(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()

    response = client.get("/api/debug/admin")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
