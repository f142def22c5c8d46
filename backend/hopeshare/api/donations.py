"""Donation endpoints and the Mercado Pago notification webhook."""

import logging
import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db, get_payment_gateway
from hopeshare.schemas.donation import (
    DonationCreateRequest,
    DonationCreateResponse,
    DonationResponse,
    RefundRequest,
    WebhookAck,
)
from hopeshare.services import donations
from hopeshare.services.payment_gateway import MercadoPagoClient

logger = logging.getLogger(__name__)

router = APIRouter()
webhook_router = APIRouter()


@router.post("", response_model=DonationCreateResponse, status_code=201)
async def create_donation(
    body: DonationCreateRequest,
    db: AsyncSession = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_payment_gateway),
) -> DonationCreateResponse:
    donation, preference = await donations.create_donation(
        db, gateway, body.user_id, body.campaign_id, body.amount
    )
    return DonationCreateResponse(
        donation_id=donation.id,
        preference_id=preference.id,
        init_point=preference.init_point,
        sandbox_init_point=preference.sandbox_init_point,
    )


@router.get("/user/{user_id}", response_model=list[DonationResponse])
async def list_user_donations(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DonationResponse]:
    return [DonationResponse.model_validate(d) for d in await donations.list_by_user(db, user_id)]


@router.get("/campanha/{campanha_id}", response_model=list[DonationResponse])
async def list_campaign_donations(
    campanha_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DonationResponse]:
    items = await donations.list_by_campaign(db, campanha_id)
    return [DonationResponse.model_validate(d) for d in items]


@router.post("/{payment_id}/refund", response_model=DonationResponse)
async def refund_donation(
    payment_id: str,
    body: RefundRequest | None = None,
    db: AsyncSession = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_payment_gateway),
) -> DonationResponse:
    amount = body.amount if body else None
    donation = await donations.refund(db, gateway, payment_id, amount)
    return DonationResponse.model_validate(donation)


# ---------------------------------------------------------------------------
# POST /webhooks/mercadopago
# ---------------------------------------------------------------------------


def _payment_reference(payload: dict, query: dict) -> tuple[str | None, str | None]:
    """(topic, payment id) from an IPN or webhook notification.

    IPN:     {"topic": "payment", "resource": ".../v1/payments/123"}
    Webhook: {"type": "payment", "data": {"id": "123"}}
    Either may also arrive as query parameters.
    """
    topic = payload.get("topic") or payload.get("type") or query.get("topic") or query.get("type")

    payment_id = None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("id"):
        payment_id = str(data["id"])
    elif payload.get("resource"):
        payment_id = str(payload["resource"]).rstrip("/").rsplit("/", 1)[-1]
    else:
        payment_id = query.get("data.id") or query.get("id")
    return topic, payment_id


@webhook_router.post("/mercadopago", response_model=WebhookAck)
async def mercadopago_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_payment_gateway),
) -> WebhookAck:
    """Always answers 200 so the gateway does not keep redelivering."""
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    topic, payment_id = _payment_reference(payload, dict(request.query_params))
    logger.info("Mercado Pago notification received: topic=%s id=%s", topic, payment_id)

    if not gateway.validate_webhook_signature(dict(request.headers), payment_id):
        logger.warning("Mercado Pago notification %s has no valid signature", payment_id)

    if topic != "payment" or not payment_id:
        logger.info("Ignoring notification with topic=%s id=%s", topic, payment_id)
        return WebhookAck(success=True)

    try:
        await donations.record_payment_event(db, gateway, payment_id)
        await db.commit()
    except Exception as exc:
        logger.exception("Failed to process payment %s", payment_id)
        await db.rollback()
        return WebhookAck(success=False, error=str(exc))
    return WebhookAck(success=True)
