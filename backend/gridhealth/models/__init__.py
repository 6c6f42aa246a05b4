from gridhealth.models.device import Device
from gridhealth.models.health_metric import CATEGORY_COLUMNS, HealthMetric, MetricType
from gridhealth.models.organization import License, LicenseStatus, Organization

__all__ = [
    "CATEGORY_COLUMNS",
    "Device",
    "HealthMetric",
    "License",
    "LicenseStatus",
    "MetricType",
    "Organization",
]
