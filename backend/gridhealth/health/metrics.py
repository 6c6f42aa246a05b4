"""Prometheus metrics for device health resolution.

Metrics exported:
- gridhealth_device_health_resolutions_total: Counter of resolutions by score source
- gridhealth_device_health_not_found_total: Counter of lookups for unknown devices
- gridhealth_organization_summary_duration_seconds: Histogram of summary duration
- gridhealth_critical_health_alerts_total: Counter of critical-health alerts by outcome
"""

from prometheus_client import Counter, Histogram

device_resolutions_total = Counter(
    "gridhealth_device_health_resolutions_total",
    "Total number of device health resolutions",
    ["source"],  # health_scan, health_check, default
)

device_not_found_total = Counter(
    "gridhealth_device_health_not_found_total",
    "Total number of health lookups for devices with no record",
)

organization_summary_duration_seconds = Histogram(
    "gridhealth_organization_summary_duration_seconds",
    "Duration of organization health summaries in seconds",
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

critical_alerts_total = Counter(
    "gridhealth_critical_health_alerts_total",
    "Total number of critical device health alerts",
    ["outcome"],  # delivered, failed
)
