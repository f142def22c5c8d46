"""Mercado Pago REST client (checkout preferences, payments, refunds).

Only the fields this system reads or writes are modelled. Every call is a
single attempt; failures surface as ``PaymentGatewayError``.
"""

import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import httpx

from hopeshare.core.config import settings
from hopeshare.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass
class Preference:
    id: str
    init_point: str | None = None
    sandbox_init_point: str | None = None


@dataclass
class PaymentInfo:
    payment_id: str
    status: str
    amount: Decimal
    external_reference: str | None = None
    payment_method: str | None = None
    status_detail: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundInfo:
    id: str
    amount: Decimal | None = None
    status: str | None = None


def _parse_signature(header: str) -> dict[str, str]:
    """``ts=1704908010,v1=618c85...`` -> {"ts": ..., "v1": ...}."""
    parts: dict[str, str] = {}
    for chunk in header.split(","):
        key, _, value = chunk.strip().partition("=")
        if key and value:
            parts[key] = value
    return parts


class MercadoPagoClient:
    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.mercadopago.com",
        timeout: float = 10.0,
        webhook_secret: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.webhook_secret = webhook_secret
        self._transport = transport

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if method == "POST":
            headers["X-Idempotency-Key"] = str(uuid.uuid4())

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, json=json, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Mercado Pago %s %s failed with %s: %s",
                method,
                path,
                exc.response.status_code,
                exc.response.text,
            )
            raise PaymentGatewayError(
                f"Mercado Pago returned {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Mercado Pago %s %s failed: %s", method, path, exc)
            raise PaymentGatewayError(f"Mercado Pago request failed: {exc}") from exc
        return resp.json()

    async def create_preference(
        self,
        items: list[dict],
        payer: dict | None,
        metadata: dict,
        external_reference: str,
    ) -> Preference:
        payload = {
            "items": [
                {
                    "title": item["title"],
                    "quantity": int(item.get("quantity", 1)),
                    "unit_price": float(item["unit_price"]),
                    "currency_id": item.get("currency_id", "BRL"),
                }
                for item in items
            ],
            "back_urls": {
                "success": f"{settings.FRONTEND_URL}/donation/success",
                "failure": f"{settings.FRONTEND_URL}/donation/failure",
                "pending": f"{settings.FRONTEND_URL}/donation/pending",
            },
            "notification_url": f"{settings.API_URL}/webhooks/mercadopago",
            "external_reference": external_reference,
            "metadata": metadata,
        }
        if payer and payer.get("email"):
            payload["payer"] = payer

        data = await self._request("POST", "/checkout/preferences", json=payload)
        return Preference(
            id=str(data["id"]),
            init_point=data.get("init_point"),
            sandbox_init_point=data.get("sandbox_init_point"),
        )

    async def get_payment(self, payment_id: str) -> PaymentInfo:
        data = await self._request("GET", f"/v1/payments/{payment_id}")
        return PaymentInfo(
            payment_id=str(data.get("id", payment_id)),
            status=data.get("status", "pending"),
            amount=Decimal(str(data.get("transaction_amount") or 0)),
            external_reference=data.get("external_reference"),
            payment_method=data.get("payment_method_id"),
            status_detail=data.get("status_detail"),
            metadata=data.get("metadata") or {},
        )

    async def refund(self, payment_id: str, amount: Decimal | None = None) -> RefundInfo:
        body = {"amount": float(amount)} if amount else {}
        data = await self._request("POST", f"/v1/payments/{payment_id}/refunds", json=body)
        refunded = data.get("amount")
        return RefundInfo(
            id=str(data.get("id")),
            amount=Decimal(str(refunded)) if refunded is not None else None,
            status=data.get("status"),
        )

    def validate_webhook_signature(self, headers: dict[str, str], data_id: str | None) -> bool:
        """Check ``x-signature`` against the webhook secret.

        Without a configured secret only the presence of the headers is
        checked.
        """
        signature = headers.get("x-signature")
        request_id = headers.get("x-request-id")
        if not signature or not request_id:
            return False
        if not self.webhook_secret:
            return True

        parts = _parse_signature(signature)
        ts, received = parts.get("ts"), parts.get("v1")
        if not ts or not received:
            return False

        manifest = f"id:{(data_id or '').lower()};request-id:{request_id};ts:{ts};"
        expected = hmac.new(
            self.webhook_secret.encode(), manifest.encode(), hashlib.sha256
        ).hexdigest()
        return hmac.compare_digest(expected, received)


def get_default_gateway() -> MercadoPagoClient:
    return MercadoPagoClient(
        access_token=settings.MERCADO_PAGO_ACCESS_TOKEN,
        base_url=settings.MERCADO_PAGO_API_URL,
        timeout=settings.MERCADO_PAGO_TIMEOUT,
        webhook_secret=settings.MERCADO_PAGO_WEBHOOK_SECRET,
    )
