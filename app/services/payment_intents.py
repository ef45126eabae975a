from __future__ import annotations

import logging
import re

import httpx

from app.config import get_settings
from app.providers import stripe
from app.services.paid_services import FixedPriceOffer, get_paid_service_by_id

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class PaymentIntentError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def _require_stripe_key() -> str:
    api_key = get_settings().stripe_secret_key
    if not api_key:
        raise PaymentIntentError("Payments are not configured", 500)
    return api_key


async def _create_intent(
    *,
    amount: int,
    currency: str,
    metadata: dict[str, str],
    receipt_email: str | None = None,
) -> str:
    """Create one intent and return its client secret. Provider failures raise RuntimeError."""
    settings = get_settings()
    api_key = _require_stripe_key()
    try:
        result = await stripe.create_payment_intent(
            api_key=api_key,
            api_url=settings.stripe_api_url,
            amount=amount,
            currency=currency,
            metadata=metadata,
            receipt_email=receipt_email,
            timeout_seconds=settings.stripe_timeout_seconds,
        )
    except httpx.HTTPError as exc:
        raise RuntimeError(f"Stripe request failed: {exc}") from exc

    attempt = result["attempt"]
    mapped = result["mapped"]
    if mapped is None:
        logger.warning(
            "Stripe payment intent creation failed",
            extra={
                "http_status": attempt.get("http_status"),
                "provider_status": attempt.get("provider_status"),
                "metadata": metadata,
            },
        )
        raise RuntimeError(attempt.get("provider_status") or "Failed to create PaymentIntent")

    logger.info(
        "Stripe payment intent created",
        extra={
            "payment_intent_id": mapped.get("payment_intent_id"),
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
        },
    )
    return mapped["client_secret"]


async def create_service_payment_intent(service_id: object) -> str:
    """Price comes from the static catalog; only the service id is taken from the client."""
    service = get_paid_service_by_id(service_id)
    if service is None:
        raise PaymentIntentError("Invalid service", 400)

    try:
        return await _create_intent(
            amount=service.amount,
            currency=service.currency,
            metadata={"serviceId": service.id, "serviceName": service.name},
        )
    except RuntimeError as exc:
        logger.error("Stripe error", extra={"service_id": service.id, "error": str(exc)})
        raise PaymentIntentError("Unable to create payment", 500) from exc


async def create_offer_payment_intent(offer: FixedPriceOffer, email: object) -> str:
    """Fixed-price offer paid by email address; the receipt goes to that address."""
    cleaned_email = str(email if email is not None else "").strip()
    if not cleaned_email or not is_valid_email(cleaned_email):
        raise PaymentIntentError("Valid email required", 400)

    try:
        return await _create_intent(
            amount=offer.amount,
            currency=offer.currency,
            metadata={"product": offer.product, "price_pence": str(offer.amount)},
            receipt_email=cleaned_email,
        )
    except RuntimeError as exc:
        raise PaymentIntentError(str(exc) or "Failed to create PaymentIntent", 500) from exc


def offer_payment_verified(offer: FixedPriceOffer, intent: dict) -> bool:
    """Succeeded, in the offer's currency, for at least its price, and tagged with its product."""
    metadata = intent.get("metadata") or {}
    return (
        intent.get("status") == "succeeded"
        and intent.get("currency") == offer.currency
        and (intent.get("amount_received") or 0) >= offer.amount
        and metadata.get("product") == offer.product
    )


async def verify_offer_payment(offer: FixedPriceOffer, payment_intent_id: str | None) -> str:
    """Confirm a completed payment for ``offer`` before its download is served; returns the intent id."""
    cleaned_id = (payment_intent_id or "").strip()
    if not cleaned_id:
        raise PaymentIntentError("Missing payment intent id", 400)

    settings = get_settings()
    api_key = _require_stripe_key()
    try:
        result = await stripe.retrieve_payment_intent(
            api_key=api_key,
            api_url=settings.stripe_api_url,
            payment_intent_id=cleaned_id,
            timeout_seconds=settings.stripe_timeout_seconds,
        )
    except httpx.HTTPError as exc:
        raise PaymentIntentError(f"Stripe request failed: {exc}", 500) from exc

    intent = result["mapped"]
    if intent is None:
        attempt = result["attempt"]
        logger.warning(
            "Stripe payment intent lookup failed",
            extra={
                "payment_intent_id": cleaned_id,
                "http_status": attempt.get("http_status"),
                "provider_status": attempt.get("provider_status"),
            },
        )
        raise PaymentIntentError(attempt.get("provider_status") or "Download failed", 500)

    if not offer_payment_verified(offer, intent):
        logger.info(
            "Offer download refused",
            extra={"payment_intent_id": cleaned_id, "product": offer.product, "status": intent.get("status")},
        )
        raise PaymentIntentError("Payment not verified", 403)
    return cleaned_id
