"""Repository for health metric reads."""

from datetime import datetime
from typing import Any

from sqlalchemy import select

from gridhealth.db.repositories.base import BaseRepository
from gridhealth.health.collaborators import MetricFilter
from gridhealth.models.health_metric import HealthMetric


class HealthMetricRepository(BaseRepository):
    """Read-only access to stored telemetry, newest first.

    Rows are returned as plain mappings (HealthMetric.to_raw) so the scoring
    engine never holds ORM objects.
    """

    async def get_latest_scan(self, device_id: str, metric_type: str) -> dict[str, Any] | None:
        """Get the newest record of a metric type for a device."""
        result = await self.session.execute(
            select(HealthMetric)
            .where(HealthMetric.device_id == device_id)
            .where(HealthMetric.metric_type == metric_type)
            .order_by(HealthMetric.timestamp.desc(), HealthMetric.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return row.to_raw() if row else None

    async def get_recent_metrics(
        self,
        device_id: str,
        *,
        type_filter: MetricFilter,
        since: datetime | None = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Get recent records matching a type filter, newest first."""
        query = select(HealthMetric).where(HealthMetric.device_id == device_id)
        if type_filter.exclude:
            query = query.where(HealthMetric.metric_type != type_filter.metric_type)
        else:
            query = query.where(HealthMetric.metric_type == type_filter.metric_type)
        if since is not None:
            query = query.where(HealthMetric.timestamp >= since)
        query = query.order_by(HealthMetric.timestamp.desc(), HealthMetric.id.desc()).limit(limit)

        result = await self.session.execute(query)
        return [row.to_raw() for row in result.scalars().all()]
