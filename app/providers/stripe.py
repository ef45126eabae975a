from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from app.providers.common import (
    ProviderAdapterResult,
    flatten_form_fields,
    now_ms,
    parse_json_or_raw,
)


def _as_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _error_message(body: dict[str, Any]) -> str | None:
    error = body.get("error")
    if isinstance(error, dict):
        return _as_str(error.get("message")) or _as_str(error.get("type"))
    return _as_str(error)


async def create_payment_intent(
    *,
    api_key: str | None,
    api_url: str,
    amount: int,
    currency: str,
    metadata: dict[str, str],
    receipt_email: str | None = None,
    timeout_seconds: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return {
            "attempt": {
                "provider": "stripe",
                "action": "create_payment_intent",
                "status": "skipped",
                "skip_reason": "missing_provider_api_key",
            },
            "mapped": None,
        }

    form = flatten_form_fields(
        {
            "amount": amount,
            "currency": currency,
            "automatic_payment_methods": {"enabled": True},
            "receipt_email": receipt_email,
            "metadata": metadata,
        }
    )

    start_ms = now_ms()
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        res = await client.post(
            f"{api_url.rstrip('/')}/v1/payment_intents",
            data=form,
            headers={"Authorization": f"Bearer {api_key}"},
        )
        body = parse_json_or_raw(res.text, res.json)

    provider_error = _error_message(body)
    if res.status_code >= 400 or provider_error:
        return {
            "attempt": {
                "provider": "stripe",
                "action": "create_payment_intent",
                "status": "failed",
                "http_status": res.status_code,
                "provider_status": provider_error,
                "duration_ms": now_ms() - start_ms,
            },
            "mapped": None,
        }

    client_secret = _as_str(body.get("client_secret"))
    if not client_secret:
        return {
            "attempt": {
                "provider": "stripe",
                "action": "create_payment_intent",
                "status": "failed",
                "http_status": res.status_code,
                "provider_status": "No client secret returned from Stripe",
                "duration_ms": now_ms() - start_ms,
            },
            "mapped": None,
        }

    return {
        "attempt": {
            "provider": "stripe",
            "action": "create_payment_intent",
            "status": "created",
            "http_status": res.status_code,
            "payment_intent_id": _as_str(body.get("id")),
            "duration_ms": now_ms() - start_ms,
        },
        "mapped": {
            "payment_intent_id": _as_str(body.get("id")),
            "client_secret": client_secret,
            "amount": body.get("amount"),
            "currency": _as_str(body.get("currency")),
        },
    }


async def retrieve_payment_intent(
    *,
    api_key: str | None,
    api_url: str,
    payment_intent_id: str,
    timeout_seconds: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return {
            "attempt": {
                "provider": "stripe",
                "action": "retrieve_payment_intent",
                "status": "skipped",
                "skip_reason": "missing_provider_api_key",
            },
            "mapped": None,
        }

    start_ms = now_ms()
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        res = await client.get(
            f"{api_url.rstrip('/')}/v1/payment_intents/{quote(payment_intent_id, safe='')}",
            headers={"Authorization": f"Bearer {api_key}"},
        )
        body = parse_json_or_raw(res.text, res.json)

    provider_error = _error_message(body)
    if res.status_code >= 400 or provider_error:
        return {
            "attempt": {
                "provider": "stripe",
                "action": "retrieve_payment_intent",
                "status": "failed",
                "http_status": res.status_code,
                "provider_status": provider_error,
                "duration_ms": now_ms() - start_ms,
            },
            "mapped": None,
        }

    amount_received = body.get("amount_received")
    metadata = body.get("metadata")
    return {
        "attempt": {
            "provider": "stripe",
            "action": "retrieve_payment_intent",
            "status": "found",
            "http_status": res.status_code,
            "payment_intent_id": _as_str(body.get("id")),
            "duration_ms": now_ms() - start_ms,
        },
        "mapped": {
            "payment_intent_id": _as_str(body.get("id")),
            "status": _as_str(body.get("status")),
            "amount_received": amount_received if isinstance(amount_received, int) else 0,
            "currency": _as_str(body.get("currency")),
            "metadata": metadata if isinstance(metadata, dict) else {},
        },
    }
