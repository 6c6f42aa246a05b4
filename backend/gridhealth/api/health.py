# backend/gridhealth/api/health.py
"""Device and organization health API endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from gridhealth.config import settings
from gridhealth.db.database import get_session
from gridhealth.health.errors import DeviceNotFoundError
from gridhealth.health.models import DeviceHealthState
from gridhealth.health.scorers import health_band
from gridhealth.health.setup import build_health_services

router = APIRouter(prefix="/api", tags=["health"])


class HealthScoreResponse(BaseModel):
    """Overall and per-category scores."""

    overall: int
    performance: int
    disk: int
    memory: int
    network: int
    services: int
    security: int
    details: dict[str, Any]


class DeviceHealthResponse(BaseModel):
    """Response for a single device's health."""

    device_id: str
    status: str
    uptime_percentage: int
    last_seen: datetime | None
    health_band: str
    score_source: str
    health_score: HealthScoreResponse
    last_heartbeat: dict[str, Any] | None
    last_health_check: dict[str, Any] | None
    latest_health_scan: dict[str, Any] | None


class OrganizationHealthSummaryResponse(BaseModel):
    """Response for an organization's fleet roll-up."""

    organization_id: str
    total_devices: int
    online_devices: int
    offline_devices: int
    average_health_score: int
    healthy_devices: int
    warning_devices: int
    critical_devices: int


def _to_response(state: DeviceHealthState) -> DeviceHealthResponse:
    return DeviceHealthResponse(
        device_id=state.device_id,
        status=state.status.value,
        uptime_percentage=state.uptime_percentage,
        last_seen=state.last_seen,
        health_band=health_band(
            state.health_score.overall,
            settings.healthy_score_threshold,
            settings.warning_score_threshold,
        ).value,
        score_source=state.score_source.value,
        health_score=HealthScoreResponse(**state.health_score.to_dict()),
        last_heartbeat=dict(state.last_heartbeat) if state.last_heartbeat else None,
        last_health_check=dict(state.last_health_check) if state.last_health_check else None,
        latest_health_scan=dict(state.latest_health_scan) if state.latest_health_scan else None,
    )


@router.get("/devices/{device_id}/health", response_model=DeviceHealthResponse)
async def get_device_health(
    device_id: str,
    session: AsyncSession = Depends(get_session),
) -> DeviceHealthResponse:
    """Get resolved health for a device."""
    services = build_health_services(session)
    try:
        state = await services.resolver.resolve(device_id)
    except DeviceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(state)


@router.get(
    "/organizations/{organization_id}/health-summary",
    response_model=OrganizationHealthSummaryResponse,
)
async def get_organization_health_summary(
    organization_id: str,
    session: AsyncSession = Depends(get_session),
) -> OrganizationHealthSummaryResponse:
    """Get the health roll-up for an organization's licensed devices.

    An organization with no licensed devices returns all zeros.
    """
    services = build_health_services(session)
    summary = await services.summarizer.summarize(organization_id)

    return OrganizationHealthSummaryResponse(
        organization_id=organization_id,
        total_devices=summary.total_devices,
        online_devices=summary.online_devices,
        offline_devices=summary.offline_devices,
        average_health_score=summary.average_health_score,
        healthy_devices=summary.healthy_devices,
        warning_devices=summary.warning_devices,
        critical_devices=summary.critical_devices,
    )
