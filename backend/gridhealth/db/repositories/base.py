"""Shared base for the read-only health repositories."""

from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Holds the request-scoped session; subclasses only read through it."""

    def __init__(self, session: AsyncSession):
        self.session = session
