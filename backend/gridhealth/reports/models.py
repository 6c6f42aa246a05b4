"""Report models.

Reports are immutable presentation projections of resolved health plus
bounded recent history. Descriptive fields carry display placeholders
("Unknown Device", "Never") instead of None.
"""

from dataclasses import asdict, dataclass
from typing import Any

UNKNOWN = "Unknown"
NEVER = "Never"


@dataclass(frozen=True)
class HealthDetails:
    performance: int
    disk: int
    memory: int
    network: int
    services: int
    security: int


@dataclass(frozen=True)
class DeviceReport:
    """Health report for a single device.

    Attributes:
        device_id..last_seen: Descriptive device fields with placeholders
        status: online/warning/offline
        health_score: Overall score
        health_band: healthy/warning/critical
        uptime_percentage: 100, 80 or 0
        score_source: Which resolver branch produced the score
        health_details: Per-category scores
        recent_health_data: Non-heartbeat records from the history window
        recent_heartbeats: Heartbeat records from the heartbeat window
    """

    device_id: str
    device_name: str
    hostname: str
    os_name: str
    os_version: str
    device_type: str
    mac_address: str
    ip_address: str
    activation_date: str
    last_seen: str
    status: str
    health_score: int
    health_band: str
    uptime_percentage: int
    score_source: str
    health_details: HealthDetails
    recent_health_data: tuple[dict[str, Any], ...]
    recent_heartbeats: tuple[dict[str, Any], ...]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["recent_health_data"] = list(self.recent_health_data)
        data["recent_heartbeats"] = list(self.recent_heartbeats)
        return data


@dataclass(frozen=True)
class DeviceBreakdown:
    healthy: int
    warning: int
    critical: int


@dataclass(frozen=True)
class OrganizationReport:
    """Health report for an organization's licensed fleet."""

    organization_id: str
    organization_name: str
    subscription_status: str
    device_limit: int
    total_devices: int
    online_devices: int
    offline_devices: int
    average_health_score: int
    device_breakdown: DeviceBreakdown
    devices: tuple[DeviceReport, ...]
    licenses: tuple[dict[str, Any], ...]
    generated_at: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["devices"] = [device.to_dict() for device in self.devices]
        data["licenses"] = list(self.licenses)
        return data
