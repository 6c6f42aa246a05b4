"""Critical device health notifications.

This module implements the CriticalHealthChecker class that:
1. Resolves every device in an organization's licensed fleet
2. Selects devices whose overall score is below the critical ceiling
3. Emits one alert per (device, recipient) when the score is at or below the
   recipient's own threshold

Delivery (email, webhook) is done by the injected NotificationSink.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from gridhealth.config import settings
from gridhealth.health.collaborators import DeviceStore
from gridhealth.health.metrics import critical_alerts_total
from gridhealth.health.summarizer import OrganizationHealthSummarizer

logger = logging.getLogger(__name__)

ALERT_TYPE = "critical_health"
ALERT_TITLE = "Critical Device Health Alert"


@dataclass(frozen=True)
class NotificationRecipient:
    """A user opted in to health notifications.

    Attributes:
        user_id: Recipient user
        email: Delivery address, if known
        critical_health_threshold: Alert when score <= this; None uses the default
    """

    user_id: str
    email: str | None = None
    critical_health_threshold: int | None = None


@dataclass(frozen=True)
class CriticalHealthAlert:
    organization_id: str
    user_id: str
    device_id: str
    device_name: str
    health_score: int
    alert_type: str
    title: str
    message: str
    created_at: datetime


class NotificationSink(Protocol):
    """Delivers alerts to recipients."""

    async def deliver(self, alert: CriticalHealthAlert, recipient: NotificationRecipient) -> None:
        ...


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class CriticalHealthChecker:
    """Checks an organization's fleet for critically unhealthy devices."""

    def __init__(
        self,
        summarizer: OrganizationHealthSummarizer,
        devices: DeviceStore,
        sink: NotificationSink,
        score_ceiling: int | None = None,
        default_threshold: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the checker.

        Args:
            summarizer: Used to resolve the organization's fleet
            devices: Device lookup for display names
            sink: Alert delivery
            score_ceiling: Devices scoring below this are critical (default 50)
            default_threshold: Recipient threshold when unset (default 30)
            clock: Returns the current time
        """
        self.summarizer = summarizer
        self.devices = devices
        self.sink = sink
        self.score_ceiling = (
            score_ceiling if score_ceiling is not None else settings.critical_device_score_ceiling
        )
        if default_threshold is None:
            default_threshold = settings.critical_health_threshold
        self.default_threshold = default_threshold
        self.clock = clock

    async def check(
        self, organization_id: str, recipients: Sequence[NotificationRecipient]
    ) -> dict[str, Any]:
        """Check device health and notify recipients.

        A failed delivery is logged and counted; the run continues.

        Args:
            organization_id: Organization to check
            recipients: Users opted in to notifications

        Returns:
            Statistics dictionary with counts and errors
        """
        run_id = str(uuid4())
        logger.info(f"Starting critical health check run_id={run_id} org={organization_id}")

        stats: dict[str, Any] = {
            "run_id": run_id,
            "devices_checked": 0,
            "critical_devices": 0,
            "alerts_delivered": 0,
            "alerts_failed": 0,
            "errors": [],
        }

        states = await self.summarizer.resolve_fleet(organization_id)
        stats["devices_checked"] = len(states)

        for state in states:
            score = state.health_score.overall
            if score >= self.score_ceiling:
                continue
            stats["critical_devices"] += 1

            device = await self.devices.get_device_by_id(state.device_id)
            device_name = getattr(device, "device_name", None) or state.device_id

            for recipient in recipients:
                threshold = recipient.critical_health_threshold
                if threshold is None:
                    threshold = self.default_threshold
                if score > threshold:
                    continue

                alert = CriticalHealthAlert(
                    organization_id=organization_id,
                    user_id=recipient.user_id,
                    device_id=state.device_id,
                    device_name=device_name,
                    health_score=score,
                    alert_type=ALERT_TYPE,
                    title=ALERT_TITLE,
                    message=f"Device {device_name} has critical health score: {score}/100",
                    created_at=self.clock(),
                )
                try:
                    await self.sink.deliver(alert, recipient)
                except Exception as e:
                    error_msg = (
                        f"Delivery to user={recipient.user_id} for device={state.device_id} "
                        f"failed: {e}"
                    )
                    logger.error(f"run_id={run_id} {error_msg}")
                    stats["alerts_failed"] += 1
                    stats["errors"].append(error_msg)
                    critical_alerts_total.labels(outcome="failed").inc()
                    continue

                stats["alerts_delivered"] += 1
                critical_alerts_total.labels(outcome="delivered").inc()

        logger.info(
            f"Completed critical health check run_id={run_id} "
            f"critical={stats['critical_devices']} delivered={stats['alerts_delivered']} "
            f"failed={stats['alerts_failed']}"
        )
        return stats
