"""Device and organization health reports."""

from gridhealth.reports.assembler import ReportAssembler
from gridhealth.reports.csv_export import (
    DEVICE_REPORT_COLUMNS,
    ORGANIZATION_REPORT_COLUMNS,
    device_report_csv,
    organization_report_csv,
    to_csv,
)
from gridhealth.reports.models import (
    DeviceBreakdown,
    DeviceReport,
    HealthDetails,
    OrganizationReport,
)

__all__ = [
    "DEVICE_REPORT_COLUMNS",
    "ORGANIZATION_REPORT_COLUMNS",
    "DeviceBreakdown",
    "DeviceReport",
    "HealthDetails",
    "OrganizationReport",
    "ReportAssembler",
    "device_report_csv",
    "organization_report_csv",
    "to_csv",
]
