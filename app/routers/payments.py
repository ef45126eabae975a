# app/routers/payments.py - Stripe payment-intent endpoints (fixed server-side prices) and paid pack download

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from app.routers._responses import (
    ClientSecretResponse,
    ErrorEnvelope,
    client_secret_response,
    error_response,
)
from app.services.pack_documents import CHRISTMAS_PACK_FILENAME, render_christmas_pack_pdf
from app.services.paid_services import CHRISTMAS_CUSTOM_PLAN, CHRISTMAS_PACK, FixedPriceOffer
from app.services.payment_intents import (
    PaymentIntentError,
    create_offer_payment_intent,
    create_service_payment_intent,
    verify_offer_payment,
)

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


class ServicePaymentIntentRequest(BaseModel):
    # Any amount/currency sent by the client is dropped here.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    service_id: Any = Field(default=None, alias="serviceId")


class EmailPaymentIntentRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Any = None


@router.post(
    "/create-payment-intent",
    response_model=ClientSecretResponse,
    responses=_ERROR_RESPONSES,
)
async def create_payment_intent(payload: ServicePaymentIntentRequest) -> JSONResponse:
    """Pay for a catalog service (website builds, audit, advertising)."""
    try:
        client_secret = await create_service_payment_intent(payload.service_id)
    except PaymentIntentError as exc:
        return error_response(exc.message, exc.status_code)
    return client_secret_response(client_secret)


async def _offer_intent(offer: FixedPriceOffer, payload: EmailPaymentIntentRequest) -> JSONResponse:
    try:
        client_secret = await create_offer_payment_intent(offer, payload.email)
    except PaymentIntentError as exc:
        return error_response(exc.message, exc.status_code)
    return client_secret_response(client_secret)


@router.post(
    "/stripe/create-christmas-pack-intent",
    response_model=ClientSecretResponse,
    responses=_ERROR_RESPONSES,
)
async def create_christmas_pack_intent(payload: EmailPaymentIntentRequest) -> JSONResponse:
    return await _offer_intent(CHRISTMAS_PACK, payload)


@router.post(
    "/stripe/create-christmas-custom-intent",
    response_model=ClientSecretResponse,
    responses=_ERROR_RESPONSES,
)
async def create_christmas_custom_intent(payload: EmailPaymentIntentRequest) -> JSONResponse:
    return await _offer_intent(CHRISTMAS_CUSTOM_PLAN, payload)


@router.get(
    "/packs/christmas-pack",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The Christmas pack PDF"},
        400: {"model": ErrorEnvelope},
        403: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)
async def download_christmas_pack(pi: str | None = None) -> Response:
    """Serve the pack once the payment intent `pi` is confirmed as a paid Christmas pack."""
    try:
        await verify_offer_payment(CHRISTMAS_PACK, pi)
    except PaymentIntentError as exc:
        return error_response(exc.message, exc.status_code)
    return Response(
        content=render_christmas_pack_pdf(),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{CHRISTMAS_PACK_FILENAME}"',
            "Cache-Control": "private, no-store",
        },
    )
