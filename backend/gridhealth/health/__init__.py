"""Device health scoring package."""

from gridhealth.health.errors import (
    DeviceNotFoundError,
    HealthEngineError,
    NotFoundError,
    OrganizationNotFoundError,
)
from gridhealth.health.extractor import extract_metrics
from gridhealth.health.models import (
    DeviceHealthState,
    DeviceStatus,
    HealthBand,
    HealthScore,
    OrganizationHealthSummary,
    ScoreSource,
)
from gridhealth.health.resolver import DeviceHealthResolver
from gridhealth.health.scorers import (
    CATEGORY_WEIGHTS,
    calculate_health_score,
    compose_overall,
    health_band,
    score_health_scan,
)
from gridhealth.health.status import classify_status
from gridhealth.health.summarizer import OrganizationHealthSummarizer, summarize_states

# Note: build_health_services is intentionally not exported here to avoid
# circular imports with the repositories. Import from gridhealth.health.setup.

__all__ = [
    "CATEGORY_WEIGHTS",
    "DeviceHealthResolver",
    "DeviceHealthState",
    "DeviceNotFoundError",
    "DeviceStatus",
    "HealthBand",
    "HealthEngineError",
    "HealthScore",
    "NotFoundError",
    "OrganizationHealthSummarizer",
    "OrganizationHealthSummary",
    "OrganizationNotFoundError",
    "ScoreSource",
    "calculate_health_score",
    "classify_status",
    "compose_overall",
    "extract_metrics",
    "health_band",
    "score_health_scan",
    "summarize_states",
]
