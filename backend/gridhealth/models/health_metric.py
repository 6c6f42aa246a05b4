"""Health metric rows as written by the ingestion path."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gridhealth.db.database import Base
from gridhealth.health.models import MetricType

CATEGORY_COLUMNS = (
    "performance_metrics",
    "disk_health",
    "memory_health",
    "network_health",
    "service_health",
    "security_health",
)


class HealthMetric(Base):
    """One telemetry record for a device at a point in time.

    Category payloads are stored as loosely-typed JSON; any of them may be
    missing. Rows are immutable once written.
    """

    __tablename__ = "health_metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(100), ForeignKey("devices.device_id"), index=True)
    metric_type: Mapped[str] = mapped_column(String(50), index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    # Agent-computed overall score (health scans only)
    value: Mapped[float | None] = mapped_column(Float, nullable=True)

    performance_metrics: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    disk_health: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    memory_health: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    network_health: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    service_health: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    security_health: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def to_raw(self) -> dict[str, Any]:
        """Project the row into the loosely-typed mapping the scorers consume."""
        raw: dict[str, Any] = {
            "id": self.id,
            "device_id": self.device_id,
            "metric_type": self.metric_type,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "value": self.value,
        }
        for column in CATEGORY_COLUMNS:
            raw[column] = getattr(self, column)
        return raw
