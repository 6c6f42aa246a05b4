"""Repository for organization and license lookups."""

from typing import Any

from sqlalchemy import select

from gridhealth.db.repositories.base import BaseRepository
from gridhealth.models.device import Device
from gridhealth.models.organization import License, LicenseStatus, Organization


class LicenseRepository(BaseRepository):
    """Read access to organizations, their licenses and licensed devices."""

    async def get_organization(self, organization_id: str) -> Organization | None:
        """Get organization by ID."""
        result = await self.session.execute(
            select(Organization).where(Organization.id == organization_id)
        )
        return result.scalar_one_or_none()

    async def get_active_licenses(self, organization_id: str) -> list[dict[str, Any]]:
        """Get the organization's active licenses as plain mappings."""
        result = await self.session.execute(
            select(License)
            .where(License.organization_id == organization_id)
            .where(License.status == LicenseStatus.ACTIVE.value)
            .order_by(License.id)
        )
        return [
            {
                "license_key": lic.license_key,
                "status": LicenseStatus(lic.status).value,
                "tier": lic.tier,
                "device_limit": lic.device_limit,
                "expires_at": lic.expires_at.isoformat() if lic.expires_at else None,
            }
            for lic in result.scalars().all()
        ]

    async def get_active_license_device_ids(self, organization_id: str) -> list[str]:
        """Get IDs of devices bound to any active license of the organization."""
        result = await self.session.execute(
            select(Device.device_id)
            .join(License, License.license_key == Device.license_key)
            .where(License.organization_id == organization_id)
            .where(License.status == LicenseStatus.ACTIVE.value)
            .order_by(Device.device_id)
            .distinct()
        )
        return list(result.scalars().all())
