"""Organization-level health roll-up."""

import logging
from collections.abc import Iterable

from gridhealth.config import settings
from gridhealth.health.collaborators import LicenseStore
from gridhealth.health.errors import DeviceNotFoundError
from gridhealth.health.metrics import organization_summary_duration_seconds
from gridhealth.health.models import (
    DeviceHealthState,
    DeviceStatus,
    HealthBand,
    OrganizationHealthSummary,
)
from gridhealth.health.resolver import DeviceHealthResolver
from gridhealth.health.scorers import health_band, round_half_up

logger = logging.getLogger(__name__)


class OrganizationHealthSummarizer:
    """Aggregates device health across an organization's licensed fleet."""

    def __init__(
        self,
        resolver: DeviceHealthResolver,
        licenses: LicenseStore,
        healthy_threshold: int | None = None,
        warning_threshold: int | None = None,
    ) -> None:
        self._resolver = resolver
        self._licenses = licenses
        self._healthy_threshold = (
            healthy_threshold if healthy_threshold is not None else settings.healthy_score_threshold
        )
        self._warning_threshold = (
            warning_threshold if warning_threshold is not None else settings.warning_score_threshold
        )

    async def resolve_fleet(self, organization_id: str) -> list[DeviceHealthState]:
        """Resolve every device bound to an active license of the organization.

        Devices deleted between listing and resolution are skipped.
        """
        device_ids = await self._licenses.get_active_license_device_ids(organization_id)

        states: list[DeviceHealthState] = []
        # dict.fromkeys keeps first-seen order while dropping duplicates
        for device_id in dict.fromkeys(device_ids):
            try:
                states.append(await self._resolver.resolve(device_id))
            except DeviceNotFoundError:
                logger.warning(
                    f"Device {device_id} listed for organization={organization_id} "
                    "but has no record, skipping"
                )
        return states

    async def summarize(self, organization_id: str) -> OrganizationHealthSummary:
        """Summarize the organization's fleet health.

        Args:
            organization_id: Organization to summarize

        Returns:
            OrganizationHealthSummary, all zeros when there are no devices
        """
        with organization_summary_duration_seconds.time():
            states = await self.resolve_fleet(organization_id)
            summary = summarize_states(
                states,
                healthy_threshold=self._healthy_threshold,
                warning_threshold=self._warning_threshold,
            )
        logger.info(
            f"Summarized organization={organization_id} devices={summary.total_devices} "
            f"average={summary.average_health_score}"
        )
        return summary


def summarize_states(
    states: Iterable[DeviceHealthState],
    healthy_threshold: int = 80,
    warning_threshold: int = 60,
) -> OrganizationHealthSummary:
    """Roll device states up into counts and an average score.

    Only ONLINE counts as online; WARNING and OFFLINE both count as offline.
    The average is rounded once, after summing every device's overall score.
    """
    states = list(states)
    if not states:
        return OrganizationHealthSummary()

    bands = {band: 0 for band in HealthBand}
    online = 0
    total_score = 0
    for state in states:
        if state.status == DeviceStatus.ONLINE:
            online += 1
        total_score += state.health_score.overall
        bands[health_band(state.health_score.overall, healthy_threshold, warning_threshold)] += 1

    return OrganizationHealthSummary(
        total_devices=len(states),
        online_devices=online,
        offline_devices=len(states) - online,
        average_health_score=round_half_up(total_score / len(states)),
        healthy_devices=bands[HealthBand.HEALTHY],
        warning_devices=bands[HealthBand.WARNING],
        critical_devices=bands[HealthBand.CRITICAL],
    )
