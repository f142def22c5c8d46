"""User accounts: registration, profile updates, sign-in, donation counters."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import (
    AccessDeniedError,
    BusinessRuleError,
    InvalidInputError,
    NotFoundError,
)
from hopeshare.core.security import hash_password, verify_password
from hopeshare.models.campaign import Campaign
from hopeshare.models.deposit_request import DepositRequest
from hopeshare.models.user import User
from hopeshare.schemas.user import UserCreate, UserUpdate
from hopeshare.services import storage
from hopeshare.services.campaign_lifecycle import remove_campaign

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def _exists(db: AsyncSession, *criteria) -> bool:
    count = await db.scalar(select(func.count()).select_from(User).where(*criteria))
    return bool(count)


async def get_user_or_404(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User:
    user = await db.scalar(select(User).where(User.email == _normalize_email(email)))
    if user is None:
        raise NotFoundError("User not found")
    return user


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    email = _normalize_email(data.email)
    if await _exists(db, User.email == email):
        raise InvalidInputError("E-mail already in use")

    cpf = cnpj = None
    if data.type_user == "COMPANY":
        if not data.cnpj:
            raise InvalidInputError("CNPJ is required for company accounts")
        if await _exists(db, User.cnpj == data.cnpj):
            raise InvalidInputError("CNPJ already in use")
        cnpj = data.cnpj
    else:
        if not data.cpf:
            raise InvalidInputError("CPF is required for individual accounts")
        if await _exists(db, User.cpf == data.cpf):
            raise InvalidInputError("CPF already in use")
        cpf = data.cpf

    user = User(
        username=data.username.strip(),
        email=email,
        password_hash=hash_password(data.password),
        image=data.image,
        type_user=data.type_user,
        cpf=cpf,
        cnpj=cnpj,
        birthdate=data.birthdate,
    )
    db.add(user)
    await db.flush()
    logger.info("User %s registered as %s", user.id, user.type_user)
    return user


async def update_user(db: AsyncSession, user_id: uuid.UUID, data: UserUpdate) -> User:
    user = await get_user_or_404(db, user_id)

    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    password = fields.pop("password", None)
    for name, value in fields.items():
        setattr(user, name, value)
    if password:
        user.password_hash = hash_password(password)

    await db.flush()
    return user


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Remove an account along with the campaigns it owns.

    Refused while any owned campaign holds money or the user has withdrawal
    requests.
    """
    user = await get_user_or_404(db, user_id)

    result = await db.execute(select(Campaign).where(Campaign.user_id == user.id))
    owned = list(result.scalars().all())
    if any(campaign.value_donated > 0 for campaign in owned):
        raise BusinessRuleError("User owns campaigns with donations and cannot be deleted")

    deposits = await db.scalar(
        select(func.count()).select_from(DepositRequest).where(DepositRequest.user_id == user.id)
    )
    if deposits:
        raise BusinessRuleError("User has withdrawal requests and cannot be deleted")

    for campaign in owned:
        await remove_campaign(db, campaign)
    await db.delete(user)
    await db.flush()
    storage.delete_prefix_after_commit(db, f"validations/{user_id}/")
    logger.info("User %s deleted", user_id)


async def sign_in(db: AsyncSession, email: str, password: str) -> User:
    user = await db.scalar(select(User).where(User.email == _normalize_email(email)))
    if user is None or not verify_password(password, user.password_hash):
        raise AccessDeniedError(INVALID_CREDENTIALS)
    return user
