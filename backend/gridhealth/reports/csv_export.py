"""CSV projections of health reports.

Column order is fixed per report type and every column is always present.
Unknown values render as empty strings. Fields containing a comma, quote or
line break are quoted with internal quotes doubled.
"""

import csv
import io
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from gridhealth.reports.models import DeviceReport, OrganizationReport

DEVICE_REPORT_COLUMNS = [
    "Device ID",
    "Device Name",
    "Hostname",
    "OS Name",
    "OS Version",
    "MAC Address",
    "IP Address",
    "Activation Date",
    "Last Seen",
    "Status",
    "Health Score",
    "Uptime Percentage",
    "Performance Score",
    "Disk Score",
    "Memory Score",
    "Network Score",
    "Services Score",
    "Security Score",
]

ORGANIZATION_REPORT_COLUMNS = [
    "Organization Name",
    "Subscription Status",
    "Device Limit",
    "Total Devices",
    "Online Devices",
    "Offline Devices",
    "Average Health Score",
    "Healthy Devices",
    "Warning Devices",
    "Critical Devices",
    "Generated At",
]


def to_csv(rows: Iterable[Mapping[str, Any]], columns: Sequence[str]) -> str:
    """Render rows as CSV with a header line.

    Args:
        rows: Mappings keyed by column name; missing keys render empty
        columns: Column names, in output order

    Returns:
        CSV text, lines separated by "\\n", no trailing newline
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_cell(row.get(column)) for column in columns])
    return buffer.getvalue()[: -len("\n")]


def format_cell(value: Any) -> str:
    """Render one value as CSV cell text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def device_report_row(report: DeviceReport) -> dict[str, Any]:
    details = report.health_details
    return {
        "Device ID": report.device_id,
        "Device Name": report.device_name,
        "Hostname": report.hostname,
        "OS Name": report.os_name,
        "OS Version": report.os_version,
        "MAC Address": report.mac_address,
        "IP Address": report.ip_address,
        "Activation Date": report.activation_date,
        "Last Seen": report.last_seen,
        "Status": report.status,
        "Health Score": report.health_score,
        "Uptime Percentage": report.uptime_percentage,
        "Performance Score": details.performance,
        "Disk Score": details.disk,
        "Memory Score": details.memory,
        "Network Score": details.network,
        "Services Score": details.services,
        "Security Score": details.security,
    }


def organization_report_row(report: OrganizationReport) -> dict[str, Any]:
    return {
        "Organization Name": report.organization_name,
        "Subscription Status": report.subscription_status,
        "Device Limit": report.device_limit,
        "Total Devices": report.total_devices,
        "Online Devices": report.online_devices,
        "Offline Devices": report.offline_devices,
        "Average Health Score": report.average_health_score,
        "Healthy Devices": report.device_breakdown.healthy,
        "Warning Devices": report.device_breakdown.warning,
        "Critical Devices": report.device_breakdown.critical,
        "Generated At": report.generated_at,
    }


def device_report_csv(report: DeviceReport) -> str:
    return to_csv([device_report_row(report)], DEVICE_REPORT_COLUMNS)


def organization_report_csv(report: OrganizationReport) -> str:
    return to_csv([organization_report_row(report)], ORGANIZATION_REPORT_COLUMNS)
