"""User registration, sign-in and profile endpoints."""

import uuid
from decimal import Decimal

from httpx import AsyncClient

from hopeshare.core.security import verify_password
from hopeshare.models.campaign import Campaign
from hopeshare.models.user import User
from tests.helpers import PASSWORD, create_campaign, create_deposit, create_user, fetch


def _individual(**overrides) -> dict:
    body = {
        "username": "Maria",
        "email": "Maria@Example.com",
        "password": "hunter22",
        "type_user": "INDIVIDUAL",
        "cpf": "12345678901",
    }
    body.update(overrides)
    return body


async def test_create_individual(client: AsyncClient):
    r = await client.post("/users", json=_individual())
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "maria@example.com"
    assert body["cpf"] == "12345678901"
    assert body["is_admin"] is False
    assert body["total_campaigns_created"] == 0
    assert "password" not in body and "password_hash" not in body


async def test_create_requires_document_for_type(client: AsyncClient):
    r = await client.post("/users", json=_individual(cpf=None))
    assert r.status_code == 400
    assert "CPF" in r.json()["detail"]

    r = await client.post("/users", json=_individual(type_user="COMPANY", cpf=None))
    assert r.status_code == 400
    assert "CNPJ" in r.json()["detail"]

    r = await client.post(
        "/users", json=_individual(type_user="COMPANY", cpf=None, cnpj="12345678000199")
    )
    assert r.status_code == 201
    assert r.json()["cnpj"] == "12345678000199"


async def test_create_rejects_duplicates(client: AsyncClient):
    assert (await client.post("/users", json=_individual())).status_code == 201

    r = await client.post("/users", json=_individual(email="maria@example.com", cpf="999"))
    assert r.status_code == 400
    assert r.json()["detail"] == "E-mail already in use"

    r = await client.post("/users", json=_individual(email="other@example.com"))
    assert r.status_code == 400
    assert r.json()["detail"] == "CPF already in use"


async def test_sign_in(client: AsyncClient):
    user = await create_user()

    r = await client.post(
        "/users/sign-in", json={"email": user.email.upper(), "password": PASSWORD}
    )
    assert r.status_code == 200
    assert r.json()["id"] == str(user.id)

    r = await client.post("/users/sign-in", json={"email": user.email, "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"

    r = await client.post("/users/sign-in", json={"email": "ghost@example.com", "password": "x"})
    assert r.status_code == 401


async def test_get_by_id_and_email(client: AsyncClient):
    user = await create_user()

    assert (await client.get(f"/users/{user.id}")).json()["email"] == user.email
    assert (await client.get(f"/users/by-email/{user.email}")).json()["id"] == str(user.id)
    assert (await client.get(f"/users/{uuid.uuid4()}")).status_code == 404
    assert (await client.get("/users/by-email/nobody@example.com")).status_code == 404


async def test_update_profile(client: AsyncClient):
    user = await create_user()

    r = await client.put(f"/users/{user.id}", json={"username": "Renamed", "password": "newpass1"})
    assert r.status_code == 200
    assert r.json()["username"] == "Renamed"

    stored = await fetch(User, user.id)
    assert verify_password("newpass1", stored.password_hash)
    assert stored.email == user.email


async def test_summary_and_delete(client: AsyncClient):
    user = await create_user(total_campaigns_donated=2, total_campaigns_created=1)

    r = await client.get(f"/users/{user.id}/summary")
    assert r.status_code == 200
    assert r.json()["total_campaigns_donated"] == 2
    assert r.json()["total_campaigns_created"] == 1

    r = await client.delete(f"/users/{user.id}")
    assert r.status_code == 200
    assert (await client.get(f"/users/{user.id}")).status_code == 404
    assert (await client.delete(f"/users/{user.id}")).status_code == 404


async def test_update_ignores_explicit_nulls(client: AsyncClient):
    user = await create_user()

    r = await client.put(f"/users/{user.id}", json={"username": None, "image": "avatar.png"})
    assert r.status_code == 200
    assert r.json()["username"] == user.username
    assert r.json()["image"] == "avatar.png"


async def test_delete_refused_while_owning_funded_campaign(client: AsyncClient):
    owner = await create_user()
    campaign = await create_campaign(owner, value_donated=Decimal("10"))

    r = await client.delete(f"/users/{owner.id}")
    assert r.status_code == 400
    assert r.json()["detail"] == "User owns campaigns with donations and cannot be deleted"
    assert await fetch(User, owner.id) is not None
    assert await fetch(Campaign, campaign.id) is not None


async def test_delete_refused_with_withdrawal_requests(client: AsyncClient):
    owner = await create_user()
    await create_deposit(owner, await create_campaign(owner, status="FINISHED"))

    r = await client.delete(f"/users/{owner.id}")
    assert r.status_code == 400
    assert await fetch(User, owner.id) is not None


async def test_delete_removes_unfunded_campaigns_and_documents(
    client: AsyncClient, fake_storage
):
    owner = await create_user()
    campaign = await create_campaign(owner, image_key=f"campaigns/{uuid.uuid4()}/a.png")

    r = await client.delete(f"/users/{owner.id}")
    assert r.status_code == 200
    assert await fetch(Campaign, campaign.id) is None
    assert fake_storage.deleted == [campaign.image_key]
    assert f"validations/{owner.id}/" in fake_storage.deleted_prefixes
    assert f"reports/{campaign.id}/" in fake_storage.deleted_prefixes
