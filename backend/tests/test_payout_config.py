"""Payout (receipt) configuration."""

import uuid

from httpx import AsyncClient

from tests.helpers import create_user, set_identity


async def test_required_fields_depend_on_receipt_type(client: AsyncClient):
    user = await create_user()

    r = await client.post("/config-receipt", json={"user_id": str(user.id), "receipt_type": "PIX"})
    assert r.status_code == 400
    assert "pix_key" in r.json()["detail"]

    r = await client.post(
        "/config-receipt",
        json={"user_id": str(user.id), "receipt_type": "BANK", "bank_name": "Nubank"},
    )
    assert r.status_code == 400
    assert "agency" in r.json()["detail"]
    assert (await client.get(f"/config-receipt/{user.id}")).status_code == 404


async def test_save_then_update(client: AsyncClient):
    user = await create_user()

    r = await client.post(
        "/config-receipt",
        json={
            "user_id": str(user.id),
            "receipt_type": "PIX",
            "pix_key": user.email,
            "pix_type": "EMAIL",
        },
    )
    assert r.status_code == 200
    first_id = r.json()["id"]
    assert r.json()["cnpj_verified"] is False

    r = await client.post(
        "/config-receipt",
        json={
            "user_id": str(user.id),
            "receipt_type": "BANK",
            "bank_name": "BCO DO BRASIL S.A.",
            "agency": "0001",
            "account": "12345-6",
        },
    )
    assert r.status_code == 200
    assert r.json()["id"] == first_id
    assert r.json()["receipt_type"] == "BANK"
    assert r.json()["pix_key"] is None


async def test_cnpj_verified_follows_identity_validation(client: AsyncClient):
    user = await create_user()
    await set_identity(user)
    await client.post(
        "/config-receipt",
        json={"user_id": str(user.id), "receipt_type": "PIX", "pix_key": "+5581999999999"},
    )

    r = await client.get(f"/config-receipt/{user.id}")
    assert r.status_code == 200
    assert r.json()["pix_key"] == "+5581999999999"
    assert r.json()["cnpj_verified"] is True


async def test_unknown_user(client: AsyncClient):
    r = await client.post(
        "/config-receipt",
        json={"user_id": str(uuid.uuid4()), "receipt_type": "PIX", "pix_key": "k"},
    )
    assert r.status_code == 404
