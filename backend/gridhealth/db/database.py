"""Async database wiring for the health engine.

One engine per process; each request gets its own session through the
get_session dependency, and every repository built for that request shares it.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from gridhealth.config import settings


class Base(DeclarativeBase):
    """Declarative base for organizations, licenses, devices and health metrics."""

    pass


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
)

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncSession:
    """Yield a request-scoped session for the health and report endpoints."""
    async with async_session() as session:
        yield session
