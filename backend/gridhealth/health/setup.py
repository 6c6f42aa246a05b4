# backend/gridhealth/health/setup.py
"""Health engine wiring."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from gridhealth.db.repositories import (
    DeviceRepository,
    HealthMetricRepository,
    LicenseRepository,
)
from gridhealth.health.resolver import DeviceHealthResolver
from gridhealth.health.summarizer import OrganizationHealthSummarizer
from gridhealth.reports.assembler import ReportAssembler


@dataclass
class HealthServices:
    """Health engine components sharing one database session."""

    resolver: DeviceHealthResolver
    summarizer: OrganizationHealthSummarizer
    reports: ReportAssembler


def build_health_services(session: AsyncSession) -> HealthServices:
    """Wire repositories for a session into the health engine.

    Args:
        session: Database session for the current request

    Returns:
        HealthServices bound to the session
    """
    devices = DeviceRepository(session)
    metrics = HealthMetricRepository(session)
    licenses = LicenseRepository(session)

    resolver = DeviceHealthResolver(devices, metrics)
    summarizer = OrganizationHealthSummarizer(resolver, licenses)
    reports = ReportAssembler(
        resolver,
        devices=devices,
        metrics=metrics,
        licenses=licenses,
        organizations=licenses,
    )
    return HealthServices(resolver=resolver, summarizer=summarizer, reports=reports)
