"""Campaign catalogue: creation, descriptive edits, search and comments."""

import logging
import uuid

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import AccessDeniedError, InvalidInputError, NotFoundError
from hopeshare.models.campaign import Campaign, CampaignComment, CampaignDonor
from hopeshare.models.user import User
from hopeshare.schemas.campaign import (
    CampaignAddress,
    CampaignCreate,
    CampaignUpdate,
    ImageUpload,
)
from hopeshare.services import storage
from hopeshare.services.campaign_lifecycle import get_campaign_or_404
from hopeshare.services.users import get_user_or_404

logger = logging.getLogger(__name__)


def _apply_address(campaign: Campaign, address: CampaignAddress | None) -> None:
    if address is None:
        return
    for name, value in address.model_dump().items():
        setattr(campaign, f"address_{name}", value)
    campaign.have_address = any(v for v in address.model_dump().values())


def _decode_image(image: ImageUpload) -> tuple[str, bytes, str]:
    raw, announced = storage.decode_base64_document(image.content)
    content_type = image.content_type or announced or "application/octet-stream"
    if content_type not in storage.ALLOWED_IMAGE_TYPES:
        raise InvalidInputError(f"Unsupported image type '{content_type}'")
    return image.name, raw, content_type


async def _store_image(campaign: Campaign, decoded: tuple[str, bytes, str]) -> None:
    name, raw, content_type = decoded
    key = storage.build_key(f"campaigns/{campaign.id}", name)
    stored = await storage.upload(key, raw, content_type)
    campaign.image = stored["url"]
    campaign.image_key = stored["key"]


async def create_campaign(db: AsyncSession, data: CampaignCreate) -> Campaign:
    owner = await get_user_or_404(db, data.user_id)
    image = _decode_image(data.image) if data.image else None

    campaign = Campaign(
        owner=owner,
        user_id=owner.id,
        title=data.title.strip(),
        description=data.description,
        category=data.category.strip(),
        request_emergency=data.request_emergency,
        value_required=data.value_required,
    )
    _apply_address(campaign, data.address)
    db.add(campaign)

    await db.execute(
        update(User)
        .where(User.id == owner.id)
        .values(total_campaigns_created=User.total_campaigns_created + 1)
    )
    await db.flush()
    if image:
        await _store_image(campaign, image)
        await db.flush()
    logger.info("Campaign %s created by %s", campaign.id, owner.id)
    return campaign


async def update_campaign(
    db: AsyncSession, campaign_id: uuid.UUID, data: CampaignUpdate
) -> Campaign:
    """Edit descriptive fields. Status and totals are never touched here.

    A new image replaces the stored one, which is removed after the commit.
    """
    campaign = await get_campaign_or_404(db, campaign_id)
    image = _decode_image(data.image) if data.image else None

    fields = data.model_dump(exclude_unset=True, exclude={"address", "image"})
    for name, value in fields.items():
        if value is not None:
            setattr(campaign, name, value)
    if "address" in data.model_fields_set:
        _apply_address(campaign, data.address)

    if image:
        previous_key = campaign.image_key
        await _store_image(campaign, image)
        if previous_key:
            storage.delete_after_commit(db, previous_key)

    await db.flush()
    return campaign


async def list_by_user(db: AsyncSession, user_id: uuid.UUID) -> list[Campaign]:
    result = await db.execute(
        select(Campaign).where(Campaign.user_id == user_id).order_by(Campaign.created_at.desc())
    )
    return list(result.scalars().all())


async def search(
    db: AsyncSession,
    search: str | None,
    category: str | None,
    page: int,
    items_per_page: int,
) -> tuple[list[Campaign], int]:
    """Case-insensitive containment on title or category, newest first."""
    stmt = select(Campaign)
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(func.lower(Campaign.title).like(term), func.lower(Campaign.category).like(term))
        )
    if category:
        stmt = stmt.where(func.lower(Campaign.category) == category.strip().lower())

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = (
        stmt.order_by(Campaign.created_at.desc(), Campaign.id.desc())
        .offset((page - 1) * items_per_page)
        .limit(items_per_page)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all()), total or 0


async def list_donors(db: AsyncSession, campaign_id: uuid.UUID) -> list[CampaignDonor]:
    await get_campaign_or_404(db, campaign_id)
    result = await db.execute(
        select(CampaignDonor)
        .where(CampaignDonor.campaign_id == campaign_id)
        .order_by(CampaignDonor.donated_at)
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


async def add_comment(
    db: AsyncSession,
    campaign_id: uuid.UUID,
    user_id: uuid.UUID | None,
    content: str | None,
) -> CampaignComment:
    if user_id is None or not (content or "").strip():
        raise InvalidInputError("user_id and comment are required")

    user = await get_user_or_404(db, user_id)
    await get_campaign_or_404(db, campaign_id)

    comment = CampaignComment(
        campaign_id=campaign_id,
        user_id=user.id,
        username=user.username,
        user_image=user.image,
        content=content.strip(),
    )
    db.add(comment)
    await db.flush()
    return comment


async def list_comments(db: AsyncSession, campaign_id: uuid.UUID) -> list[CampaignComment]:
    await get_campaign_or_404(db, campaign_id)
    result = await db.execute(
        select(CampaignComment)
        .where(CampaignComment.campaign_id == campaign_id)
        .order_by(CampaignComment.created_at)
    )
    return list(result.scalars().all())


async def delete_comment(
    db: AsyncSession,
    campaign_id: uuid.UUID,
    comment_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    """Only the author or an administrator may remove a comment."""
    comment = await db.scalar(
        select(CampaignComment).where(
            CampaignComment.id == comment_id,
            CampaignComment.campaign_id == campaign_id,
        )
    )
    if comment is None:
        raise NotFoundError("Comment not found")

    if comment.user_id != user_id:
        caller = await db.get(User, user_id)
        if caller is None or not caller.is_admin:
            raise AccessDeniedError()

    await db.delete(comment)
    await db.flush()
