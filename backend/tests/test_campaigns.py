"""Campaign catalogue, search and comments."""

import base64
import uuid
from decimal import Decimal

from httpx import AsyncClient

from hopeshare.models.campaign import Campaign
from hopeshare.models.user import User
from tests.helpers import create_campaign, create_user, fetch


async def test_create_campaign(client: AsyncClient):
    owner = await create_user()

    r = await client.post(
        "/campanha",
        json={
            "user_id": str(owner.id),
            "title": "Rebuild the school roof",
            "description": "After the storm",
            "category": "education",
            "value_required": "2500.00",
            "address": {"city": "Recife", "state": "PE"},
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "ACTIVE"
    assert Decimal(body["value_donated"]) == Decimal("0")
    assert body["owner"]["username"] == owner.username
    assert body["have_address"] is True
    assert body["address"]["city"] == "Recife"

    assert (await fetch(User, owner.id)).total_campaigns_created == 1


async def test_create_campaign_unknown_owner(client: AsyncClient):
    r = await client.post(
        "/campanha",
        json={
            "user_id": str(uuid.uuid4()),
            "title": "Orphan",
            "category": "health",
            "value_required": "10",
        },
    )
    assert r.status_code == 404


async def test_update_keeps_status_and_totals(client: AsyncClient):
    campaign = await create_campaign(await create_user(), value_donated=Decimal("40"))

    r = await client.put(
        f"/campanha/{campaign.id}",
        json={"title": "New title", "value_required": "5000.00"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "New title"
    assert Decimal(body["value_required"]) == Decimal("5000")
    assert Decimal(body["value_donated"]) == Decimal("40")
    assert body["status"] == "ACTIVE"

    r = await client.put(f"/campanha/{uuid.uuid4()}", json={"title": "x"})
    assert r.status_code == 404


async def test_get_and_list_by_user(client: AsyncClient):
    owner = await create_user()
    campaign = await create_campaign(owner)
    await create_campaign(await create_user())

    r = await client.get(f"/campanha/{campaign.id}")
    assert r.status_code == 200
    assert r.json()["owner"]["id"] == str(owner.id)

    r = await client.get(f"/campanha/user/{owner.id}")
    assert [c["id"] for c in r.json()] == [str(campaign.id)]

    assert (await client.get(f"/campanha/{uuid.uuid4()}")).status_code == 404


async def test_search_paginates(client: AsyncClient):
    owner = await create_user()
    for n in range(3):
        await create_campaign(owner, title=f"Animal shelter {n}", category="animals")
    await create_campaign(owner, title="Surgery", category="health")

    r = await client.post("/campanha/search", json={"search": "SHELTER", "items_per_page": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert len(body["items"]) == 2
    assert body["has_more"] is True

    r = await client.post(
        "/campanha/search", json={"search": "shelter", "items_per_page": 2, "page": 2}
    )
    assert len(r.json()["items"]) == 1
    assert r.json()["has_more"] is False

    r = await client.post("/campanha/search", json={"category": "Health"})
    assert [c["title"] for c in r.json()["items"]] == ["Surgery"]

    r = await client.post("/campanha/search", json={})
    assert r.json()["total"] == 4


async def test_comments(client: AsyncClient):
    owner = await create_user()
    campaign = await create_campaign(owner)

    r = await client.post(
        f"/campanha/{campaign.id}/comments", json={"user_id": str(owner.id), "comment": " First "}
    )
    assert r.status_code == 201
    assert r.json()["content"] == "First"
    assert r.json()["username"] == owner.username

    r = await client.post(f"/campanha/{campaign.id}/comments", json={"user_id": str(owner.id)})
    assert r.status_code == 400

    r = await client.post(
        f"/campanha/{campaign.id}/comments",
        json={"user_id": str(uuid.uuid4()), "comment": "who am I"},
    )
    assert r.status_code == 404

    r = await client.post(
        f"/campanha/{uuid.uuid4()}/comments", json={"user_id": str(owner.id), "comment": "hi"}
    )
    assert r.status_code == 404

    r = await client.get(f"/campanha/{campaign.id}/comments")
    assert [c["content"] for c in r.json()] == ["First"]


async def test_comment_deletion_permissions(client: AsyncClient):
    author = await create_user()
    stranger = await create_user()
    admin = await create_user(is_admin=True)
    campaign = await create_campaign(author)

    async def comment() -> str:
        r = await client.post(
            f"/campanha/{campaign.id}/comments",
            json={"user_id": str(author.id), "comment": "hello"},
        )
        return r.json()["id"]

    first = await comment()
    url = f"/campanha/{campaign.id}/comments/{first}"

    r = await client.delete(url, params={"user_id": str(stranger.id)})
    assert r.status_code == 401

    r = await client.delete(url, params={"user_id": str(author.id)})
    assert r.status_code == 200
    r = await client.delete(url, params={"user_id": str(author.id)})
    assert r.status_code == 404

    second = await comment()
    r = await client.delete(
        f"/campanha/{campaign.id}/comments/{second}", params={"user_id": str(admin.id)}
    )
    assert r.status_code == 200
    assert (await client.get(f"/campanha/{campaign.id}/comments")).json() == []


def _image(raw: bytes, content_type: str = "image/png", name: str = "cover.png") -> dict:
    encoded = base64.b64encode(raw).decode()
    return {"name": name, "content": f"data:{content_type};base64,{encoded}"}


async def test_campaign_image_upload_and_replace(client: AsyncClient, fake_storage):
    owner = await create_user()

    r = await client.post(
        "/campanha",
        json={
            "user_id": str(owner.id),
            "title": "Shelter",
            "category": "animals",
            "value_required": "300",
            "image": _image(b"first"),
        },
    )
    assert r.status_code == 201
    campaign_id = r.json()["id"]
    first = await fetch(Campaign, uuid.UUID(campaign_id))
    assert first.image_key.startswith(f"campaigns/{campaign_id}/")
    assert first.image_key.endswith("-cover.png")
    assert r.json()["image"] == f"https://files.test/{first.image_key}"
    assert fake_storage.objects[first.image_key] == (b"first", "image/png")

    r = await client.put(f"/campanha/{campaign_id}", json={"image": _image(b"second")})
    assert r.status_code == 200
    second = await fetch(Campaign, uuid.UUID(campaign_id))
    assert second.image_key != first.image_key
    assert fake_storage.objects[second.image_key] == (b"second", "image/png")
    assert fake_storage.deleted == [first.image_key]

    r = await client.delete(f"/campanha/{campaign_id}")
    assert r.status_code == 200
    assert fake_storage.deleted == [first.image_key, second.image_key]
    assert fake_storage.objects == {}


async def test_campaign_image_must_be_a_picture(client: AsyncClient, fake_storage):
    campaign = await create_campaign(await create_user())

    r = await client.put(
        f"/campanha/{campaign.id}",
        json={"image": _image(b"%PDF", "application/pdf", "doc.pdf"), "title": "Renamed"},
    )
    assert r.status_code == 400
    assert "application/pdf" in r.json()["detail"]
    assert fake_storage.objects == {}
    assert (await fetch(Campaign, campaign.id)).title == campaign.title
