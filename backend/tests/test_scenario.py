"""A campaign from first donation to withdrawal request."""

from decimal import Decimal

from httpx import AsyncClient

from hopeshare.models.campaign import Campaign
from tests.helpers import create_campaign, create_payout_config, create_user, fetch, set_identity


async def test_campaign_through_withdrawal(client: AsyncClient, gateway):
    admin = await create_user(is_admin=True)
    owner = await create_user()
    donor = await create_user()
    campaign = await create_campaign(owner)

    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "500.00"},
    )
    assert r.status_code == 201
    gateway.add_payment(
        "mp-500",
        "approved",
        "500.00",
        external_reference=str(campaign.id),
        metadata={"user_id": str(donor.id), "donation_id": r.json()["donation_id"]},
    )
    r = await client.post(
        "/webhooks/mercadopago", json={"type": "payment", "data": {"id": "mp-500"}}
    )
    assert r.json()["success"] is True
    assert (await fetch(Campaign, campaign.id)).value_donated == Decimal("500")

    r = await client.patch(
        f"/campanha/admin/{admin.id}/campanha/{campaign.id}/suspend",
        json={"reason": "Checking documents"},
    )
    assert r.json()["status"] == "SUSPENDED"

    # Suspended campaigns take no new donations
    r = await client.post(
        "/donations",
        json={"user_id": str(donor.id), "campaign_id": str(campaign.id), "amount": "5"},
    )
    assert r.status_code == 400

    r = await client.patch(f"/campanha/admin/{admin.id}/campanha/{campaign.id}/reactivate")
    assert r.json()["status"] == "ACTIVE"

    await set_identity(owner)
    await create_payout_config(owner)
    r = await client.post(
        "/campanha/deposito/request",
        json={"user_id": str(owner.id), "campaign_id": str(campaign.id)},
    )
    assert r.status_code == 200
    assert Decimal(r.json()["value_donated"]) == Decimal("500")

    stored = await fetch(Campaign, campaign.id)
    assert stored.status == "FINISHED"
    assert stored.value_donated == Decimal("500")

    r = await client.delete(f"/campanha/{campaign.id}")
    assert r.status_code == 400
    assert await fetch(Campaign, campaign.id) is not None
