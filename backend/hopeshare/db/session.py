"""Async engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hopeshare.core.config import settings


def _engine_kwargs(url: str) -> dict:
    # In-memory SQLite must share one connection or every session sees an empty DB.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_kwargs(settings.DATABASE_URL),
)

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
