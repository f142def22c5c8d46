"""Bank directory endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db
from hopeshare.schemas.bank import BankResponse, BankSearchRequest
from hopeshare.schemas.common import PaginatedResponse
from hopeshare.services import banks

router = APIRouter()


@router.post("/search", response_model=PaginatedResponse[BankResponse])
async def search_banks(
    body: BankSearchRequest,
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[BankResponse]:
    items, total = await banks.search_banks(db, body.search, body.page, body.items_per_page)
    return PaginatedResponse(
        items=[BankResponse.model_validate(b) for b in items],
        page=body.page,
        items_per_page=body.items_per_page,
        total=total,
        has_more=body.page * body.items_per_page < total,
    )


@router.get("/{code}", response_model=BankResponse)
async def get_bank(
    code: str,
    db: AsyncSession = Depends(get_db),
) -> BankResponse:
    return BankResponse.model_validate(await banks.get_bank(db, code))
