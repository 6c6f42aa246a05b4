# backend/tests/api/test_reports_api.py
"""Tests for report endpoints."""

import csv
import io

import pytest
from gridhealth.reports.csv_export import DEVICE_REPORT_COLUMNS, ORGANIZATION_REPORT_COLUMNS


class TestDeviceReportEndpoints:
    """Tests for /api/reports/device endpoints."""

    @pytest.mark.asyncio
    async def test_device_report_json(self, client, seeded_fleet):
        response = await client.get("/api/reports/device/dev-1")

        assert response.status_code == 200
        data = response.json()
        assert data["device_name"] == "Front Desk"
        assert data["device_type"] == "Unknown"
        assert data["health_score"] == 57
        assert data["health_band"] == "critical"
        assert data["health_details"]["services"] == 80
        # 40-day-old health check falls outside the 30-day window
        assert len(data["recent_health_data"]) == 1
        assert len(data["recent_heartbeats"]) == 1

    @pytest.mark.asyncio
    async def test_device_report_placeholders(self, client, seeded_fleet):
        response = await client.get("/api/reports/device/dev-2")

        data = response.json()
        assert data["device_name"] == "Unknown Device"
        assert data["hostname"] == "Unknown Hostname"
        assert data["os_name"] == "Unknown OS"
        assert data["recent_health_data"][0]["metric_type"] == "health_scan"

    @pytest.mark.asyncio
    async def test_device_report_csv(self, client, seeded_fleet):
        response = await client.get("/api/reports/device/dev-1/csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "device-dev-1-health-report" in response.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == DEVICE_REPORT_COLUMNS
        assert rows[1][0] == "dev-1"

    @pytest.mark.asyncio
    async def test_unknown_device_returns_404(self, client, seeded_fleet):
        assert (await client.get("/api/reports/device/ghost")).status_code == 404
        assert (await client.get("/api/reports/device/ghost/csv")).status_code == 404


class TestOrganizationReportEndpoints:
    """Tests for /api/reports/organization endpoints."""

    @pytest.mark.asyncio
    async def test_organization_report_json(self, client, seeded_fleet):
        response = await client.get("/api/reports/organization/org-1")

        assert response.status_code == 200
        data = response.json()
        assert data["organization_name"] == "Acme Clinics"
        assert data["total_devices"] == 2
        assert data["device_breakdown"] == {"healthy": 1, "warning": 0, "critical": 1}
        assert [d["device_id"] for d in data["devices"]] == ["dev-1", "dev-2"]
        assert [lic["license_key"] for lic in data["licenses"]] == ["LIC-1"]

    @pytest.mark.asyncio
    async def test_organization_report_max_devices(self, client, seeded_fleet):
        response = await client.get("/api/reports/organization/org-1", params={"max_devices": 1})

        data = response.json()
        assert len(data["devices"]) == 1
        assert data["total_devices"] == 2

    @pytest.mark.asyncio
    async def test_organization_report_csv(self, client, seeded_fleet):
        response = await client.get("/api/reports/organization/org-1/csv")

        assert response.status_code == 200
        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert list(rows[0]) == ORGANIZATION_REPORT_COLUMNS
        assert rows[0]["Organization Name"] == "Acme Clinics"
        assert rows[0]["Average Health Score"] == "73"

    @pytest.mark.asyncio
    async def test_unknown_organization_returns_404(self, client, seeded_fleet):
        response = await client.get("/api/reports/organization/org-404")

        assert response.status_code == 404
        assert "org-404" in response.json()["detail"]
