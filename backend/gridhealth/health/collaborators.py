"""Data-store interfaces the health engine reads through.

The engine never talks to the database directly. Repositories in
gridhealth.db.repositories satisfy these protocols; tests pass fakes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from gridhealth.health.models import RawHealthScan


class DeviceRecord(Protocol):
    """Minimum shape of a device row."""

    device_id: str
    license_key: str | None
    last_seen: datetime | None


class OrganizationRecord(Protocol):
    id: str
    name: str
    subscription_status: str | None
    device_limit: int


@dataclass(frozen=True)
class MetricFilter:
    """Selects metric rows by type, inclusively or exclusively.

    Attributes:
        metric_type: Metric type to match
        exclude: If True, select every type except metric_type
    """

    metric_type: str
    exclude: bool = False

    @classmethod
    def only(cls, metric_type: str) -> "MetricFilter":
        return cls(metric_type=metric_type, exclude=False)

    @classmethod
    def excluding(cls, metric_type: str) -> "MetricFilter":
        return cls(metric_type=metric_type, exclude=True)


class DeviceStore(Protocol):
    async def get_device_by_id(self, device_id: str) -> DeviceRecord | None:
        """Return the device row, or None if it does not exist."""
        ...


class MetricStore(Protocol):
    async def get_latest_scan(self, device_id: str, metric_type: str) -> RawHealthScan | None:
        """Return the newest record of metric_type for the device."""
        ...

    async def get_recent_metrics(
        self,
        device_id: str,
        *,
        type_filter: MetricFilter,
        since: datetime | None = None,
        limit: int = 10,
    ) -> list[RawHealthScan]:
        """Return matching records, newest first."""
        ...


class LicenseStore(Protocol):
    async def get_active_license_device_ids(self, organization_id: str) -> list[str]:
        """Return ids of devices bound to any active license of the organization."""
        ...


class OrganizationStore(Protocol):
    async def get_organization(self, organization_id: str) -> OrganizationRecord | None:
        ...

    async def get_active_licenses(self, organization_id: str) -> list[dict[str, Any]]:
        ...
