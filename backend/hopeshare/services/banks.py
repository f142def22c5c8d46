"""Read-only directory of Brazilian banks."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import NotFoundError
from hopeshare.models.bank import Bank


async def search_banks(
    db: AsyncSession, search: str | None, page: int, items_per_page: int
) -> tuple[list[Bank], int]:
    stmt = select(Bank)
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                Bank.code.like(term),
                func.lower(Bank.name).like(term),
                func.lower(Bank.full_name).like(term),
            )
        )

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.order_by(Bank.code).offset((page - 1) * items_per_page).limit(items_per_page)
    )
    return list(result.scalars().all()), total or 0


async def get_bank(db: AsyncSession, code: str) -> Bank:
    bank = await db.get(Bank, code)
    if bank is None:
        raise NotFoundError("Bank not found")
    return bank
