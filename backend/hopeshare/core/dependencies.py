"""FastAPI dependency chain: DB session, admin guard, payment gateway."""

import uuid
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import AccessDeniedError, InvalidInputError, NotFoundError
from hopeshare.db.session import async_session_factory
from hopeshare.models.user import User
from hopeshare.services import storage
from hopeshare.services.payment_gateway import MercadoPagoClient, get_default_gateway


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session. Commits on success, rolls back on error.

    Every multi-step workflow of a request therefore lands atomically.
    Stored objects scheduled for removal are deleted only after the commit.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            storage.discard_pending_deletes(session)
            raise
        await storage.run_pending_deletes(session)


def parse_id(value: uuid.UUID | str | None, name: str, not_found: str) -> uuid.UUID:
    """Parse an id that reached a route unvalidated.

    Admin routes take their ids as plain strings and parse them after the
    guard, so a non-admin never sees a 422.
    """
    if value is None or value == "":
        raise InvalidInputError(f"{name} is required")
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise NotFoundError(not_found) from exc


async def load_admin(db: AsyncSession, user_id: uuid.UUID | str | None) -> User:
    """Return the caller if it is an administrator.

    A missing id, an unknown user and a non-admin user all raise the same
    401 so callers cannot tell which case occurred.
    """
    if user_id is None:
        raise AccessDeniedError()
    if not isinstance(user_id, uuid.UUID):
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError as exc:
            raise AccessDeniedError() from exc

    user = await db.get(User, user_id)
    if user is None or not user.is_admin:
        raise AccessDeniedError()
    return user


async def require_admin(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Guard for routes carrying the caller id as the ``{user_id}`` path segment."""
    return await load_admin(db, user_id)


def get_payment_gateway() -> MercadoPagoClient:
    return get_default_gateway()
