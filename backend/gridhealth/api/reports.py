# backend/gridhealth/api/reports.py
"""Device and organization report endpoints (JSON and CSV)."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gridhealth.db.database import get_session
from gridhealth.health.errors import NotFoundError
from gridhealth.health.setup import build_health_services
from gridhealth.reports.csv_export import device_report_csv, organization_report_csv

router = APIRouter(prefix="/api/reports", tags=["reports"])

CSV_MEDIA_TYPE = "text/csv"


def _csv_response(content: str, filename_stem: str) -> Response:
    day = datetime.now(tz=timezone.utc).date().isoformat()
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename_stem}-{day}.csv"'},
    )


@router.get("/device/{device_id}")
async def get_device_report(
    device_id: str,
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """Get the device health report as JSON."""
    services = build_health_services(session)
    try:
        report = await services.reports.build_device_report(device_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return report.to_dict()


@router.get("/device/{device_id}/csv")
async def get_device_report_csv(
    device_id: str,
    session: AsyncSession = Depends(get_session),
) -> Response:
    """Download the device health report as CSV."""
    services = build_health_services(session)
    try:
        report = await services.reports.build_device_report(device_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _csv_response(device_report_csv(report), f"device-{device_id}-health-report")


@router.get("/organization/{organization_id}")
async def get_organization_report(
    organization_id: str,
    max_devices: int | None = Query(None, ge=0, description="Cap on nested device reports"),
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """Get the organization health report as JSON."""
    services = build_health_services(session)
    try:
        report = await services.reports.build_organization_report(
            organization_id, max_device_reports=max_devices
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return report.to_dict()


@router.get("/organization/{organization_id}/csv")
async def get_organization_report_csv(
    organization_id: str,
    session: AsyncSession = Depends(get_session),
) -> Response:
    """Download the organization health summary as CSV."""
    services = build_health_services(session)
    try:
        report = await services.reports.build_organization_report(
            organization_id, max_device_reports=0
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _csv_response(
        organization_report_csv(report), f"organization-{organization_id}-health-report"
    )
