"""Report assembly for devices and organizations."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from gridhealth.config import settings
from gridhealth.health.collaborators import (
    DeviceRecord,
    DeviceStore,
    LicenseStore,
    MetricFilter,
    MetricStore,
    OrganizationStore,
)
from gridhealth.health.errors import DeviceNotFoundError, OrganizationNotFoundError
from gridhealth.health.models import DeviceHealthState, MetricType
from gridhealth.health.resolver import DeviceHealthResolver
from gridhealth.health.scorers import health_band
from gridhealth.health.status import as_utc
from gridhealth.health.summarizer import summarize_states
from gridhealth.reports.models import (
    NEVER,
    UNKNOWN,
    DeviceBreakdown,
    DeviceReport,
    HealthDetails,
    OrganizationReport,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class ReportAssembler:
    """Builds device and organization reports from resolved health state.

    Responsibilities:
    1. Resolve device health through DeviceHealthResolver
    2. Attach bounded recent history (non-heartbeat records, heartbeats)
    3. Fill descriptive fields with display placeholders when missing
    """

    def __init__(
        self,
        resolver: DeviceHealthResolver,
        devices: DeviceStore,
        metrics: MetricStore,
        licenses: LicenseStore,
        organizations: OrganizationStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._resolver = resolver
        self._devices = devices
        self._metrics = metrics
        self._licenses = licenses
        self._organizations = organizations
        self._clock = clock

    async def build_device_report(self, device_id: str) -> DeviceReport:
        """Build the report for one device.

        Raises:
            DeviceNotFoundError: If there is no device row
        """
        device = await self._devices.get_device_by_id(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)

        state = await self._resolver.resolve(device_id)
        return await self._device_report(device, state)

    async def build_organization_report(
        self, organization_id: str, max_device_reports: int | None = None
    ) -> OrganizationReport:
        """Build the report for an organization's licensed fleet.

        Args:
            organization_id: Organization to report on
            max_device_reports: Cap on nested device reports (None for all);
                the summary counts always cover the whole fleet

        Raises:
            OrganizationNotFoundError: If there is no organization row
        """
        organization = await self._organizations.get_organization(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)

        licenses = await self._organizations.get_active_licenses(organization_id)
        device_ids = await self._licenses.get_active_license_device_ids(organization_id)

        states: list[DeviceHealthState] = []
        device_reports: list[DeviceReport] = []
        for device_id in dict.fromkeys(device_ids):
            device = await self._devices.get_device_by_id(device_id)
            if device is None:
                logger.warning(f"Device {device_id} vanished while reporting, skipping")
                continue
            state = await self._resolver.resolve(device_id)
            states.append(state)
            if max_device_reports is None or len(device_reports) < max_device_reports:
                device_reports.append(await self._device_report(device, state))

        summary = summarize_states(
            states,
            healthy_threshold=settings.healthy_score_threshold,
            warning_threshold=settings.warning_score_threshold,
        )

        logger.info(
            f"Built organization report organization={organization_id} "
            f"devices={summary.total_devices} nested_reports={len(device_reports)}"
        )

        return OrganizationReport(
            organization_id=organization_id,
            organization_name=organization.name,
            subscription_status=organization.subscription_status or UNKNOWN,
            device_limit=organization.device_limit or 0,
            total_devices=summary.total_devices,
            online_devices=summary.online_devices,
            offline_devices=summary.offline_devices,
            average_health_score=summary.average_health_score,
            device_breakdown=DeviceBreakdown(
                healthy=summary.healthy_devices,
                warning=summary.warning_devices,
                critical=summary.critical_devices,
            ),
            devices=tuple(device_reports),
            licenses=tuple(licenses),
            generated_at=self._clock().isoformat(),
        )

    async def _device_report(self, device: DeviceRecord, state: DeviceHealthState) -> DeviceReport:
        now = self._clock()
        recent_health_data = await self._metrics.get_recent_metrics(
            state.device_id,
            type_filter=MetricFilter.excluding(MetricType.HEARTBEAT.value),
            since=now - timedelta(days=settings.health_history_days),
            limit=settings.health_history_limit,
        )
        recent_heartbeats = await self._metrics.get_recent_metrics(
            state.device_id,
            type_filter=MetricFilter.only(MetricType.HEARTBEAT.value),
            since=now - timedelta(days=settings.heartbeat_history_days),
            limit=settings.heartbeat_history_limit,
        )

        score = state.health_score
        return DeviceReport(
            device_id=state.device_id,
            device_name=_text(device, "device_name", "Unknown Device"),
            hostname=_text(device, "hostname", "Unknown Hostname"),
            os_name=_text(device, "os_name", "Unknown OS"),
            os_version=_text(device, "os_version", "Unknown Version"),
            device_type=_text(device, "device_type", UNKNOWN),
            mac_address=_text(device, "mac_address", UNKNOWN),
            ip_address=_text(device, "ip_address", UNKNOWN),
            activation_date=_timestamp(getattr(device, "activation_date", None), UNKNOWN),
            last_seen=_timestamp(state.last_seen, NEVER),
            status=state.status.value,
            health_score=score.overall,
            health_band=health_band(
                score.overall,
                settings.healthy_score_threshold,
                settings.warning_score_threshold,
            ).value,
            uptime_percentage=state.uptime_percentage,
            score_source=state.score_source.value,
            health_details=HealthDetails(**score.categories()),
            recent_health_data=tuple(dict(r) for r in recent_health_data),
            recent_heartbeats=tuple(dict(r) for r in recent_heartbeats),
        )


def _text(record: Any, attribute: str, placeholder: str) -> str:
    value = getattr(record, attribute, None)
    return str(value) if value else placeholder


def _timestamp(value: datetime | str | None, placeholder: str) -> str:
    normalized = as_utc(value)
    return normalized.isoformat() if normalized else placeholder
