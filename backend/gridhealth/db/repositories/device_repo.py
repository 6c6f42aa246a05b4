"""Repository for device lookups."""

from sqlalchemy import select

from gridhealth.db.repositories.base import BaseRepository
from gridhealth.models.device import Device


class DeviceRepository(BaseRepository):
    """Read access to enrolled devices."""

    async def get_device_by_id(self, device_id: str) -> Device | None:
        """Get device by ID."""
        result = await self.session.execute(select(Device).where(Device.device_id == device_id))
        return result.scalar_one_or_none()
