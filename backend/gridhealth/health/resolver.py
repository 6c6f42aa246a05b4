"""Device health resolution.

Picks the best available telemetry for a device and turns it into a
DeviceHealthState:

1. Latest comprehensive health scan, scored with the scan shortcut rules
2. Latest non-heartbeat record, scored with the full category pipeline
3. Perfect default when the device has reported nothing

Status always comes from the device's last_seen, whichever branch scored it.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from gridhealth.config import ScanOverallPolicy, settings
from gridhealth.health.collaborators import DeviceStore, MetricFilter, MetricStore
from gridhealth.health.errors import DeviceNotFoundError
from gridhealth.health.metrics import device_not_found_total, device_resolutions_total
from gridhealth.health.models import DeviceHealthState, HealthScore, MetricType, ScoreSource
from gridhealth.health.scorers import calculate_health_score, score_health_scan
from gridhealth.health.status import as_utc, classify_status

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class DeviceHealthResolver:
    """Resolves the health state of single devices.

    Read-only: resolving twice with unchanged rows gives identical results.
    Fetches are issued sequentially because repositories may share one
    database session.
    """

    def __init__(
        self,
        devices: DeviceStore,
        metrics: MetricStore,
        scan_policy: ScanOverallPolicy | None = None,
        online_window: timedelta | None = None,
        warning_window: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the resolver.

        Args:
            devices: Device row lookup
            metrics: Metric row lookup
            scan_policy: Stored-overall policy for health scans (default from settings)
            online_window: Online recency window (default from settings)
            warning_window: Warning recency window (default from settings)
            clock: Returns the current time; injectable for tests
        """
        self._devices = devices
        self._metrics = metrics
        self._scan_policy = scan_policy if scan_policy is not None else settings.scan_overall_policy
        if online_window is None:
            online_window = timedelta(minutes=settings.online_window_minutes)
        if warning_window is None:
            warning_window = timedelta(minutes=settings.warning_window_minutes)
        self._online_window = online_window
        self._warning_window = warning_window
        self._clock = clock

    async def resolve(self, device_id: str) -> DeviceHealthState:
        """Resolve one device's health.

        Args:
            device_id: Device to resolve

        Returns:
            DeviceHealthState

        Raises:
            DeviceNotFoundError: If there is no device row
        """
        device = await self._devices.get_device_by_id(device_id)
        if device is None:
            device_not_found_total.inc()
            raise DeviceNotFoundError(device_id)

        latest_scan = await self._metrics.get_latest_scan(device_id, MetricType.HEALTH_SCAN.value)
        heartbeats = await self._metrics.get_recent_metrics(
            device_id, type_filter=MetricFilter.only(MetricType.HEARTBEAT.value), limit=1
        )
        health_checks = await self._metrics.get_recent_metrics(
            device_id, type_filter=MetricFilter.excluding(MetricType.HEARTBEAT.value), limit=1
        )
        last_heartbeat = heartbeats[0] if heartbeats else None
        last_health_check = health_checks[0] if health_checks else None

        if latest_scan:
            score = score_health_scan(latest_scan, self._scan_policy)
            source = ScoreSource.HEALTH_SCAN
        elif last_health_check:
            score = calculate_health_score(last_health_check)
            source = ScoreSource.HEALTH_CHECK
        else:
            score = HealthScore.perfect()
            source = ScoreSource.DEFAULT

        last_seen = as_utc(device.last_seen)
        status, uptime = classify_status(
            last_seen,
            now=self._clock(),
            online_window=self._online_window,
            warning_window=self._warning_window,
        )

        device_resolutions_total.labels(source=source.value).inc()
        logger.debug(
            f"Resolved device={device_id} source={source.value} "
            f"overall={score.overall} status={status.value}"
        )

        return DeviceHealthState(
            device_id=device_id,
            last_heartbeat=last_heartbeat,
            last_health_check=last_health_check,
            latest_health_scan=latest_scan,
            health_score=score,
            status=status,
            uptime_percentage=uptime,
            last_seen=last_seen,
            score_source=source,
        )
