"""Seed helpers and test doubles shared by the test modules.

Every helper opens its own short session and commits, so the app's
request sessions always see the seeded rows.
"""

import random
import uuid
from datetime import datetime
from decimal import Decimal

from hopeshare.core.exceptions import PaymentGatewayError
from hopeshare.core.security import hash_password
from hopeshare.db.base import utcnow
from hopeshare.db.session import async_session_factory
from hopeshare.models.bank import Bank
from hopeshare.models.campaign import Campaign
from hopeshare.models.deposit_request import DepositRequest
from hopeshare.models.donation import Donation
from hopeshare.models.identity_validation import IdentityValidation
from hopeshare.models.payout_config import PayoutConfig
from hopeshare.models.user import User
from hopeshare.services.payment_gateway import (
    MercadoPagoClient,
    PaymentInfo,
    Preference,
    RefundInfo,
)

PASSWORD = "secret123"


def _uid() -> str:
    return uuid.uuid4().hex[:8]


def _cpf() -> str:
    return "".join(random.choices("0123456789", k=11))


async def _save(*objects):
    async with async_session_factory() as session:
        session.add_all(objects)
        await session.commit()
    return objects[0] if len(objects) == 1 else objects


async def fetch(model, key):
    """Load a fresh copy of a row, bypassing any cached state."""
    async with async_session_factory() as session:
        return await session.get(model, key)


async def create_user(is_admin: bool = False, **overrides) -> User:
    uid = _uid()
    fields = {
        "username": f"user-{uid}",
        "email": f"user-{uid}@example.com",
        "password_hash": hash_password(PASSWORD),
        "type_user": "INDIVIDUAL",
        "cpf": _cpf(),
        "is_admin": is_admin,
    }
    fields.update(overrides)
    return await _save(User(**fields))


async def create_campaign(owner: User, **overrides) -> Campaign:
    fields = {
        "title": f"Campaign {_uid()}",
        "description": "Help us",
        "category": "health",
        "value_required": Decimal("1000.00"),
        "value_donated": Decimal("0"),
        "status": "ACTIVE",
        "user_id": owner.id,
    }
    fields.update(overrides)
    return await _save(Campaign(**fields))


async def set_identity(user: User, status: str = "APPROVED") -> IdentityValidation:
    return await _save(IdentityValidation(user_id=user.id, status=status, documents=[]))


async def create_payout_config(user: User) -> PayoutConfig:
    return await _save(
        PayoutConfig(user_id=user.id, receipt_type="PIX", pix_key=user.email, pix_type="EMAIL")
    )


async def create_donation(
    campaign: Campaign,
    user: User | None,
    amount: str,
    status: str = "approved",
    payment_id: str | None = None,
    created_at: datetime | None = None,
) -> Donation:
    donation = Donation(
        payment_id=payment_id or f"pay-{_uid()}",
        campaign_id=campaign.id,
        user_id=user.id if user else None,
        campaign_title=campaign.title,
        amount=Decimal(amount),
        payment_method="pix",
        status=status,
        credited_at=utcnow() if status == "approved" else None,
    )
    if created_at is not None:
        donation.created_at = created_at
    return await _save(donation)


async def create_deposit(
    user: User, campaign: Campaign, value: str = "0", status: str = "PENDING"
) -> DepositRequest:
    return await _save(
        DepositRequest(
            user_id=user.id,
            campaign_id=campaign.id,
            campaign_title=campaign.title,
            value_donated=Decimal(value),
            status=status,
        )
    )


async def create_banks() -> None:
    await _save(
        Bank(code="001", name="BCO DO BRASIL S.A.", full_name="Banco do Brasil S.A."),
        Bank(code="237", name="BCO BRADESCO S.A.", full_name="Banco Bradesco S.A."),
        Bank(code="260", name="NU PAGAMENTOS - IP", full_name="Nu Pagamentos S.A."),
    )


class FakeGateway(MercadoPagoClient):
    """In-memory Mercado Pago: payments are registered by the test."""

    def __init__(self):
        super().__init__(access_token="TEST-token")
        self.payments: dict[str, PaymentInfo] = {}
        self.preferences: list[dict] = []
        self.refunds: list[tuple[str, Decimal | None]] = []

    def add_payment(self, payment_id: str, status: str, amount: str, **fields) -> PaymentInfo:
        payment = PaymentInfo(
            payment_id=payment_id, status=status, amount=Decimal(amount), **fields
        )
        self.payments[payment_id] = payment
        return payment

    async def create_preference(self, items, payer, metadata, external_reference) -> Preference:
        self.preferences.append(
            {
                "items": items,
                "payer": payer,
                "metadata": metadata,
                "external_reference": external_reference,
            }
        )
        number = len(self.preferences)
        return Preference(
            id=f"pref-{number}",
            init_point=f"https://www.mercadopago.com/checkout?pref_id=pref-{number}",
            sandbox_init_point=f"https://sandbox.mercadopago.com/checkout?pref_id=pref-{number}",
        )

    async def get_payment(self, payment_id: str) -> PaymentInfo:
        try:
            return self.payments[payment_id]
        except KeyError as exc:
            raise PaymentGatewayError(f"Mercado Pago returned 404 for {payment_id}") from exc

    async def refund(self, payment_id: str, amount: Decimal | None = None) -> RefundInfo:
        self.refunds.append((payment_id, amount))
        return RefundInfo(id=f"refund-{len(self.refunds)}", amount=amount, status="approved")


class FakeStorage:
    """Replaces the boto3-backed upload/delete functions."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.deleted_prefixes: list[str] = []

    def upload_object(self, key: str, data: bytes, content_type: str) -> dict[str, str]:
        self.objects[key] = (data, content_type)
        return {"key": key, "url": f"https://files.test/{key}"}

    def delete_object(self, key: str) -> None:
        self.objects.pop(key, None)
        self.deleted.append(key)

    def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self.objects if key.startswith(prefix)]
        for key in keys:
            del self.objects[key]
        self.deleted_prefixes.append(prefix)
        return len(keys)
