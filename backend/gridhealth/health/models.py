"""Device health models.

Typed views over the loosely-typed telemetry a device agent submits, plus the
derived score/status value objects the rest of the platform consumes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# A stored metric row projected into a plain mapping. Any key may be absent.
RawHealthScan = Mapping[str, Any]

CATEGORIES = ("performance", "disk", "memory", "network", "services", "security")


class MetricType(str, Enum):
    """Kinds of metric records a device agent submits."""

    HEARTBEAT = "heartbeat"
    HEALTH_CHECK = "health_check"
    HEALTH_SCAN = "health_scan"


class DeviceStatus(str, Enum):
    """Connectivity status derived from last_seen recency."""

    ONLINE = "online"
    WARNING = "warning"
    OFFLINE = "offline"


class HealthBand(str, Enum):
    """Bucket of an overall health score."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class ScoreSource(str, Enum):
    """Which resolver branch produced a device's health score."""

    HEALTH_SCAN = "health_scan"
    HEALTH_CHECK = "health_check"
    DEFAULT = "default"


@dataclass(frozen=True)
class PerformanceMetrics:
    cpu_usage_percent: float | None = None
    memory_usage_percent: float | None = None
    process_count: int | None = None
    thread_count: int | None = None


@dataclass(frozen=True)
class DiskVolume:
    """A single volume. usage_percent is derived from free space when absent."""

    drive_letter: str | None = None
    usage_percent: float | None = None
    free_space_percent: float | None = None
    health_status: str | None = None


@dataclass(frozen=True)
class MemoryHealth:
    usage_percent: float | None = None


@dataclass(frozen=True)
class NetworkInterface:
    name: str | None = None
    is_up: bool = False


@dataclass(frozen=True)
class NetworkHealth:
    """interfaces is None when the agent did not report an interface list."""

    interfaces: tuple[NetworkInterface, ...] | None = None
    internet_connectivity: bool | None = None


@dataclass(frozen=True)
class ServiceEntry:
    name: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class Vulnerability:
    identifier: str | None = None
    severity: str | None = None


@dataclass(frozen=True)
class SecurityHealth:
    vulnerabilities: tuple[Vulnerability, ...] | None = None
    uac_enabled: bool | None = None


@dataclass(frozen=True)
class ExtractedMetrics:
    """The six category sub-structures pulled out of one raw record.

    Attributes:
        performance..security: Typed category views (empty when missing)
        raw: The untouched per-category inputs, kept for HealthScore.details
    """

    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    disks: tuple[DiskVolume, ...] = ()
    memory: MemoryHealth = field(default_factory=MemoryHealth)
    network: NetworkHealth = field(default_factory=NetworkHealth)
    services: tuple[ServiceEntry, ...] = ()
    security: SecurityHealth = field(default_factory=SecurityHealth)
    raw: dict[str, Any] = field(default_factory=dict)


def empty_details() -> dict[str, Any]:
    """Details map used when no telemetry contributed to a score."""
    return {
        "performance": {},
        "disk": [],
        "memory": {},
        "network": {},
        "services": [],
        "security": {},
    }


@dataclass(frozen=True)
class HealthScore:
    """Overall and per-category health, each an integer in 0..100.

    Always fully populated. details retains the raw per-category inputs that
    produced the scores.
    """

    overall: int = 100
    performance: int = 100
    disk: int = 100
    memory: int = 100
    network: int = 100
    services: int = 100
    security: int = 100
    details: dict[str, Any] = field(default_factory=empty_details)

    @classmethod
    def perfect(cls) -> "HealthScore":
        """All-100 score used when a device has no telemetry."""
        return cls()

    def categories(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in CATEGORIES}

    def to_dict(self) -> dict[str, Any]:
        return {"overall": self.overall, **self.categories(), "details": self.details}


@dataclass(frozen=True)
class DeviceHealthState:
    """Resolved health of one device at one point in time.

    Attributes:
        device_id: Device identifier
        last_heartbeat: Most recent heartbeat record, if any
        last_health_check: Most recent non-heartbeat record, if any
        latest_health_scan: Most recent comprehensive health scan, if any
        health_score: Score from the highest-priority available source
        status: Connectivity status, a function of last_seen only
        uptime_percentage: 100, 80 or 0, paired with status
        last_seen: Device's stored last contact time
        score_source: Which resolver branch produced health_score
    """

    device_id: str
    last_heartbeat: RawHealthScan | None
    last_health_check: RawHealthScan | None
    latest_health_scan: RawHealthScan | None
    health_score: HealthScore
    status: DeviceStatus
    uptime_percentage: int
    last_seen: datetime | None
    score_source: ScoreSource


@dataclass(frozen=True)
class OrganizationHealthSummary:
    """Fleet roll-up for an organization.

    online + offline == total and healthy + warning + critical == total.
    """

    total_devices: int = 0
    online_devices: int = 0
    offline_devices: int = 0
    average_health_score: int = 0
    healthy_devices: int = 0
    warning_devices: int = 0
    critical_devices: int = 0
