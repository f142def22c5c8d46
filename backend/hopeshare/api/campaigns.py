"""Campaign endpoints: catalogue, comments and admin lifecycle.

PATCH  /campanha/admin/{user_id}/campanhas/{campanha_id}/{status}
PATCH  /campanha/admin/{user_id}/campanha/{campanha_id}/suspend
PATCH  /campanha/admin/{user_id}/campanha/{campanha_id}/reactivate
DELETE /campanha/{campanha_id}
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db, parse_id, require_admin
from hopeshare.core.exceptions import InvalidInputError
from hopeshare.models.campaign import Campaign
from hopeshare.models.user import User
from hopeshare.schemas.campaign import (
    CampaignAddress,
    CampaignCreate,
    CampaignResponse,
    CampaignSearchRequest,
    CampaignUpdate,
    CommentCreate,
    CommentResponse,
    DonorResponse,
    SuspendRequest,
)
from hopeshare.schemas.common import MessageResponse, PaginatedResponse
from hopeshare.services import campaign_lifecycle, campaigns

router = APIRouter()

CAMPAIGN_NOT_FOUND = "Campaign not found"


def _campaign_response(campaign: Campaign) -> CampaignResponse:
    response = CampaignResponse.model_validate(campaign)
    if campaign.have_address:
        response.address = CampaignAddress(
            street=campaign.address_street,
            number=campaign.address_number,
            complement=campaign.address_complement,
            neighborhood=campaign.address_neighborhood,
            city=campaign.address_city,
            state=campaign.address_state,
            zipcode=campaign.address_zipcode,
        )
    return response


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


@router.post("", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    body: CampaignCreate,
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign = await campaigns.create_campaign(db, body)
    return _campaign_response(campaign)


@router.post("/search", response_model=PaginatedResponse[CampaignResponse])
async def search_campaigns(
    body: CampaignSearchRequest,
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[CampaignResponse]:
    items, total = await campaigns.search(
        db, body.search, body.category, body.page, body.items_per_page
    )
    return PaginatedResponse(
        items=[_campaign_response(c) for c in items],
        page=body.page,
        items_per_page=body.items_per_page,
        total=total,
        has_more=body.page * body.items_per_page < total,
    )


@router.get("/user/{user_id}", response_model=list[CampaignResponse])
async def list_user_campaigns(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[CampaignResponse]:
    return [_campaign_response(c) for c in await campaigns.list_by_user(db, user_id)]


@router.get("/{campanha_id}", response_model=CampaignResponse)
async def get_campaign(
    campanha_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign = await campaign_lifecycle.get_campaign_or_404(db, campanha_id)
    return _campaign_response(campaign)


@router.put("/{campanha_id}", response_model=CampaignResponse)
async def update_campaign(
    campanha_id: uuid.UUID,
    body: CampaignUpdate,
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign = await campaigns.update_campaign(db, campanha_id, body)
    return _campaign_response(campaign)


@router.delete("/{campanha_id}", response_model=MessageResponse)
async def delete_campaign(
    campanha_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await campaign_lifecycle.delete_campaign(db, campanha_id)
    return MessageResponse(message="Campaign deleted")


@router.get("/{campanha_id}/donors", response_model=list[DonorResponse])
async def list_donors(
    campanha_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DonorResponse]:
    donors = await campaigns.list_donors(db, campanha_id)
    return [DonorResponse.model_validate(d) for d in donors]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.post("/{campanha_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    campanha_id: uuid.UUID,
    body: CommentCreate,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    comment = await campaigns.add_comment(db, campanha_id, body.user_id, body.comment)
    return CommentResponse.model_validate(comment)


@router.get("/{campanha_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    campanha_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[CommentResponse]:
    comments = await campaigns.list_comments(db, campanha_id)
    return [CommentResponse.model_validate(c) for c in comments]


@router.delete("/{campanha_id}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    campanha_id: uuid.UUID,
    comment_id: uuid.UUID,
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await campaigns.delete_comment(db, campanha_id, comment_id, user_id)
    return MessageResponse(message="Comment deleted")


# ---------------------------------------------------------------------------
# Admin lifecycle
# ---------------------------------------------------------------------------


@router.patch(
    "/admin/{user_id}/campanhas/{campanha_id}/{status}",
    response_model=CampaignResponse,
)
async def set_campaign_status(
    campanha_id: str,
    status: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign_id = parse_id(campanha_id, "campanha_id", CAMPAIGN_NOT_FOUND)
    campaign = await campaign_lifecycle.set_status(db, campaign_id, status)
    return _campaign_response(campaign)


@router.patch("/admin/{user_id}/campanha/{campanha_id}/suspend", response_model=CampaignResponse)
async def suspend_campaign(
    campanha_id: str,
    body: SuspendRequest | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    reason = (body.reason or "").strip() if body else ""
    if not reason:
        raise InvalidInputError("Suspension reason is required")

    campaign_id = parse_id(campanha_id, "campanha_id", CAMPAIGN_NOT_FOUND)
    campaign = await campaign_lifecycle.suspend(db, campaign_id, reason)
    return _campaign_response(campaign)


@router.patch(
    "/admin/{user_id}/campanha/{campanha_id}/reactivate",
    response_model=CampaignResponse,
)
async def reactivate_campaign(
    campanha_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign_id = parse_id(campanha_id, "campanha_id", CAMPAIGN_NOT_FOUND)
    campaign = await campaign_lifecycle.reactivate(db, campaign_id)
    return _campaign_response(campaign)
