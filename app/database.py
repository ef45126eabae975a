# app/database.py - Supabase client factory

from supabase import Client, ClientOptions, create_client

from app.config import get_settings


def get_session_client(access_token: str | None) -> Client:
    """
    Per-request anon-key client acting as the signed-in user.

    Table queries carry the user's access token so row-level security policies
    evaluate against that user rather than the anon role. Without a token the
    client is anonymous.
    """
    settings = get_settings()
    client = create_client(settings.supabase_url, settings.supabase_anon_key)
    if access_token:
        client.postgrest.auth(access_token)
    return client


def get_sign_in_client() -> Client:
    """
    Client for a single password sign-in.

    The session is handed to the browser as a cookie, so the client neither
    stores it nor schedules a background token refresh.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def close_client(client: Client) -> None:
    """Release the client's HTTP connection pools (table queries and auth)."""
    client.postgrest.session.close()
    auth_http = getattr(client.auth, "_http_client", None)
    if auth_http is not None:
        auth_http.close()
