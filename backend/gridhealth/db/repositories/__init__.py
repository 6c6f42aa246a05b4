from gridhealth.db.repositories.device_repo import DeviceRepository
from gridhealth.db.repositories.health_metric_repo import HealthMetricRepository
from gridhealth.db.repositories.license_repo import LicenseRepository

__all__ = ["DeviceRepository", "HealthMetricRepository", "LicenseRepository"]
