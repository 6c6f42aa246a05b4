"""Tests for CriticalHealthChecker."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from gridhealth.health.models import DeviceHealthState, DeviceStatus, HealthScore, ScoreSource
from gridhealth.notifications.critical_health import (
    CriticalHealthChecker,
    NotificationRecipient,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_state(device_id, overall):
    return DeviceHealthState(
        device_id=device_id,
        last_heartbeat=None,
        last_health_check=None,
        latest_health_scan=None,
        health_score=HealthScore(overall=overall),
        status=DeviceStatus.ONLINE,
        uptime_percentage=100,
        last_seen=NOW,
        score_source=ScoreSource.HEALTH_CHECK,
    )


@pytest.fixture
def mock_devices():
    names = {"dev-1": "Front Desk", "dev-2": None}

    async def get_device(device_id):
        return SimpleNamespace(device_id=device_id, device_name=names.get(device_id))

    devices = AsyncMock()
    devices.get_device_by_id = AsyncMock(side_effect=get_device)
    return devices


@pytest.fixture
def mock_sink():
    sink = AsyncMock()
    sink.deliver = AsyncMock()
    return sink


def make_checker(states, devices, sink):
    summarizer = AsyncMock()
    summarizer.resolve_fleet = AsyncMock(return_value=states)
    return CriticalHealthChecker(
        summarizer=summarizer,
        devices=devices,
        sink=sink,
        score_ceiling=50,
        default_threshold=30,
        clock=lambda: NOW,
    )


class TestCriticalHealthChecker:
    @pytest.mark.asyncio
    async def test_healthy_fleet_sends_nothing(self, mock_devices, mock_sink):
        checker = make_checker([make_state("dev-1", 90)], mock_devices, mock_sink)

        stats = await checker.check("org-1", [NotificationRecipient(user_id="u1")])

        assert stats["devices_checked"] == 1
        assert stats["critical_devices"] == 0
        assert stats["alerts_delivered"] == 0
        mock_sink.deliver.assert_not_called()

    @pytest.mark.asyncio
    async def test_alerts_at_or_below_recipient_threshold(self, mock_devices, mock_sink):
        checker = make_checker([make_state("dev-1", 30)], mock_devices, mock_sink)

        stats = await checker.check("org-1", [NotificationRecipient(user_id="u1")])

        assert stats["critical_devices"] == 1
        assert stats["alerts_delivered"] == 1
        alert, recipient = mock_sink.deliver.await_args.args
        assert recipient.user_id == "u1"
        assert alert.device_name == "Front Desk"
        assert alert.health_score == 30
        assert alert.alert_type == "critical_health"
        assert alert.message == "Device Front Desk has critical health score: 30/100"
        assert alert.created_at == NOW

    @pytest.mark.asyncio
    async def test_critical_but_above_threshold_not_alerted(self, mock_devices, mock_sink):
        checker = make_checker([make_state("dev-1", 45)], mock_devices, mock_sink)

        stats = await checker.check("org-1", [NotificationRecipient(user_id="u1")])

        assert stats["critical_devices"] == 1
        assert stats["alerts_delivered"] == 0
        mock_sink.deliver.assert_not_called()

    @pytest.mark.asyncio
    async def test_per_recipient_threshold(self, mock_devices, mock_sink):
        checker = make_checker([make_state("dev-1", 45)], mock_devices, mock_sink)
        recipients = [
            NotificationRecipient(user_id="strict", critical_health_threshold=45),
            NotificationRecipient(user_id="default"),
            NotificationRecipient(user_id="never", critical_health_threshold=0),
        ]

        stats = await checker.check("org-1", recipients)

        assert stats["alerts_delivered"] == 1
        assert mock_sink.deliver.await_args.args[1].user_id == "strict"

    @pytest.mark.asyncio
    async def test_device_id_used_when_name_missing(self, mock_devices, mock_sink):
        checker = make_checker([make_state("dev-2", 10)], mock_devices, mock_sink)

        await checker.check("org-1", [NotificationRecipient(user_id="u1")])

        alert = mock_sink.deliver.await_args.args[0]
        assert alert.device_name == "dev-2"

    @pytest.mark.asyncio
    async def test_delivery_failure_is_counted_and_run_continues(self, mock_devices, mock_sink):
        mock_sink.deliver = AsyncMock(side_effect=[RuntimeError("smtp down"), None])
        checker = make_checker(
            [make_state("dev-1", 10), make_state("dev-2", 20)], mock_devices, mock_sink
        )

        stats = await checker.check("org-1", [NotificationRecipient(user_id="u1")])

        assert stats["alerts_failed"] == 1
        assert stats["alerts_delivered"] == 1
        assert "smtp down" in stats["errors"][0]
        assert stats["run_id"]

    @pytest.mark.asyncio
    async def test_zero_ceiling_and_threshold_are_respected(self, mock_devices, mock_sink):
        summarizer = AsyncMock()
        summarizer.resolve_fleet = AsyncMock(
            return_value=[make_state("dev-1", 0), make_state("dev-2", 10)]
        )
        strict = CriticalHealthChecker(
            summarizer=summarizer, devices=mock_devices, sink=mock_sink, score_ceiling=0
        )
        quiet = CriticalHealthChecker(
            summarizer=summarizer, devices=mock_devices, sink=mock_sink, default_threshold=0
        )

        strict_stats = await strict.check("org-1", [NotificationRecipient(user_id="u1")])
        quiet_stats = await quiet.check("org-1", [NotificationRecipient(user_id="u1")])

        assert strict_stats["critical_devices"] == 0
        assert quiet_stats["critical_devices"] == 2
        assert quiet_stats["alerts_delivered"] == 1
        assert mock_sink.deliver.await_args.args[0].device_id == "dev-1"
