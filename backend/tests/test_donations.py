"""Donation intents, the Mercado Pago webhook and refunds."""

import uuid
from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import func, select

from hopeshare.db.session import async_session_factory
from hopeshare.models.campaign import Campaign, CampaignDonor
from hopeshare.models.donation import Donation
from hopeshare.models.user import User
from tests.helpers import create_campaign, create_donation, create_user, fetch


async def _count(model) -> int:
    async with async_session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def test_create_donation_opens_preference(client: AsyncClient, gateway):
    donor = await create_user()
    campaign = await create_campaign(await create_user())

    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "25.00"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["preference_id"] == "pref-1"
    assert body["init_point"].startswith("https://www.mercadopago.com/")
    assert body["sandbox_init_point"].startswith("https://sandbox.mercadopago.com/")

    sent = gateway.preferences[0]
    assert sent["external_reference"] == str(campaign.id)
    assert sent["metadata"] == {
        "user_id": str(donor.id),
        "campaign_id": str(campaign.id),
        "donation_id": body["donation_id"],
    }

    donation = await fetch(Donation, uuid.UUID(body["donation_id"]))
    assert donation.status == "pending"
    assert donation.preference_id == "pref-1"
    # Nothing is credited until the gateway approves the payment
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("0")


async def test_create_donation_rejects_bad_input(client: AsyncClient):
    donor = await create_user()
    campaign = await create_campaign(await create_user())

    r = await client.post("/donations", json={"user_id": str(donor.id), "amount": "10"})
    assert r.status_code == 400

    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "0"},
    )
    assert r.status_code == 400

    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(uuid.uuid4()), "amount": "10"},
    )
    assert r.status_code == 404
    assert await _count(Donation) == 0


async def test_create_donation_requires_active_campaign(client: AsyncClient, gateway):
    donor = await create_user()
    campaign = await create_campaign(await create_user(), status="SUSPENDED")

    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "10"},
    )
    assert r.status_code == 400
    assert gateway.preferences == []


async def test_webhook_credits_once(client: AsyncClient, gateway):
    donor = await create_user()
    campaign = await create_campaign(await create_user())
    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "50"},
    )
    donation_id = r.json()["donation_id"]
    gateway.add_payment(
        "9001",
        "approved",
        "50.00",
        external_reference=str(campaign.id),
        payment_method="pix",
        metadata={"user_id": str(donor.id), "donation_id": donation_id},
    )

    notification = {"type": "payment", "data": {"id": "9001"}}
    for _ in range(2):
        r = await client.post("/webhooks/mercadopago", json=notification)
        assert r.status_code == 200
        assert r.json()["success"] is True

    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("50")
    assert await _count(Donation) == 1
    assert await _count(CampaignDonor) == 1

    donation = await fetch(Donation, uuid.UUID(donation_id))
    assert donation.status == "approved"
    assert donation.payment_id == "9001"
    assert donation.credited_at is not None

    stored = await fetch(User, donor.id)
    assert stored.total_donated == Decimal("50")
    assert stored.total_campaigns_donated == 1

    r = await client.get(f"/campanha/{campaign.id}/donors")
    assert r.status_code == 200
    assert [d["username"] for d in r.json()] == [donor.username]


async def test_webhook_ipn_format_creates_donation(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user())
    gateway.add_payment("777", "approved", "15.00", external_reference=str(campaign.id))

    r = await client.post(
        "/webhooks/mercadopago",
        json={"topic": "payment", "resource": "https://api.mercadopago.com/v1/payments/777"},
    )
    assert r.json() == {"success": True, "error": None}

    r = await client.get(f"/donations/campanha/{campaign.id}")
    assert [(d["payment_id"], d["status"], d["user_id"]) for d in r.json()] == [
        ("777", "approved", None)
    ]
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("15")


async def test_webhook_pending_payment_does_not_credit(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user())
    gateway.add_payment("555", "in_process", "15.00", external_reference=str(campaign.id))

    r = await client.post("/webhooks/mercadopago", json={"type": "payment", "data": {"id": "555"}})
    assert r.json()["success"] is True
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("0")

    gateway.add_payment("555", "approved", "15.00", external_reference=str(campaign.id))
    await client.post("/webhooks/mercadopago", json={"type": "payment", "data": {"id": "555"}})
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("15")
    assert await _count(Donation) == 1


async def test_webhook_unknown_campaign_is_ignored(client: AsyncClient, gateway):
    gateway.add_payment("404", "approved", "10.00", external_reference=str(uuid.uuid4()))

    r = await client.post("/webhooks/mercadopago", json={"type": "payment", "data": {"id": "404"}})
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert await _count(Donation) == 0


async def test_webhook_gateway_failure_still_answers_200(client: AsyncClient):
    r = await client.post("/webhooks/mercadopago", json={"type": "payment", "data": {"id": "1"}})
    assert r.status_code == 200
    assert r.json()["success"] is False
    assert "404" in r.json()["error"]


async def test_webhook_ignores_other_topics(client: AsyncClient):
    r = await client.post(
        "/webhooks/mercadopago", json={"type": "merchant_order", "data": {"id": "12"}}
    )
    assert r.json() == {"success": True, "error": None}

    r = await client.post("/webhooks/mercadopago", content=b"not json")
    assert r.status_code == 200
    assert r.json()["success"] is True


async def test_list_user_donations(client: AsyncClient):
    donor = await create_user()
    campaign = await create_campaign(await create_user())
    await create_donation(campaign, donor, "10")
    await create_donation(campaign, await create_user(), "20")

    r = await client.get(f"/donations/user/{donor.id}")
    assert [Decimal(d["amount"]) for d in r.json()] == [Decimal("10")]


async def test_refund_unknown_payment(client: AsyncClient):
    r = await client.post("/donations/nope/refund")
    assert r.status_code == 404


async def test_refund_requires_approved_donation(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user())
    await create_donation(campaign, None, "10", status="pending", payment_id="p-1")

    r = await client.post("/donations/p-1/refund")
    assert r.status_code == 400
    assert gateway.refunds == []


async def test_refund_amount_cannot_exceed_donation(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user(), value_donated=Decimal("10"))
    await create_donation(campaign, None, "10", payment_id="p-2")

    r = await client.post("/donations/p-2/refund", json={"amount": "11.00"})
    assert r.status_code == 400
    assert gateway.refunds == []


async def test_refund_never_takes_campaign_below_zero(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user(), value_donated=Decimal("30"))
    await create_donation(campaign, None, "50", payment_id="p-3")

    r = await client.post("/donations/p-3/refund")
    assert r.status_code == 200
    assert r.json()["status"] == "refunded"
    assert r.json()["refunded_at"] is not None
    assert gateway.refunds == [("p-3", None)]
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("0")


async def test_partial_refund(client: AsyncClient, gateway):
    campaign = await create_campaign(await create_user(), value_donated=Decimal("100"))
    await create_donation(campaign, None, "40", payment_id="p-4")

    r = await client.post("/donations/p-4/refund", json={"amount": "15.00"})
    assert r.status_code == 200
    assert gateway.refunds == [("p-4", Decimal("15.00"))]
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("85")


async def test_partially_refunded_payment_is_not_credited_again(client: AsyncClient, gateway):
    donor = await create_user()
    campaign = await create_campaign(await create_user())
    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "100"},
    )
    donation_id = r.json()["donation_id"]
    gateway.add_payment(
        "7001",
        "approved",
        "100.00",
        external_reference=str(campaign.id),
        metadata={"user_id": str(donor.id), "donation_id": donation_id},
    )
    notification = {"type": "payment", "data": {"id": "7001"}}
    await client.post("/webhooks/mercadopago", json=notification)

    r = await client.post("/donations/7001/refund", json={"amount": "30.00"})
    assert r.status_code == 200
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("70")

    # Mercado Pago still reports the payment approved after a partial refund
    r = await client.post("/webhooks/mercadopago", json=notification)
    assert r.json()["success"] is True

    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("70")
    assert await _count(CampaignDonor) == 1
    donation = await fetch(Donation, uuid.UUID(donation_id))
    assert donation.status == "refunded"
    assert donation.amount == Decimal("100")
    assert (await fetch(User, donor.id)).total_donated == Decimal("100")
