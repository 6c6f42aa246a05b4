"""Category scoring and overall score composition.

Every category starts at 100 and loses points through simple, independent
threshold rules. Scores are clamped to 0..100 and rounded half-up, the same
rounding the dashboards use.
"""

import math
from dataclasses import dataclass

from gridhealth.config import ScanOverallPolicy
from gridhealth.health.extractor import as_number, extract_metrics
from gridhealth.health.models import (
    DiskVolume,
    ExtractedMetrics,
    HealthBand,
    HealthScore,
    MemoryHealth,
    NetworkHealth,
    PerformanceMetrics,
    RawHealthScan,
    SecurityHealth,
    ServiceEntry,
)

MAX_SCORE = 100
MIN_SCORE = 0

# Performance and disk/memory dominate because they most directly predict
# device usability. Weights must sum to exactly 1.0.
CATEGORY_WEIGHTS: dict[str, float] = {
    "performance": 0.25,
    "disk": 0.20,
    "memory": 0.20,
    "network": 0.15,
    "services": 0.15,
    "security": 0.05,
}

if not math.isclose(sum(CATEGORY_WEIGHTS.values()), 1.0):
    raise RuntimeError("CATEGORY_WEIGHTS must sum to 1.0")


@dataclass(frozen=True)
class SeverityPenalty:
    """Points deducted per item of a given severity.

    Attributes:
        severity: Lower-cased status/severity label
        points: Deduction per matching item
    """

    severity: str
    points: int


# Ordered by precedence: once a higher tier matches, lower tiers are ignored
SERVICE_PENALTIES = [
    SeverityPenalty(severity="critical", points=20),
    SeverityPenalty(severity="warning", points=10),
]

VULNERABILITY_PENALTIES = [
    SeverityPenalty(severity="critical", points=25),
    SeverityPenalty(severity="high", points=15),
]

PARTIAL_NETWORK_SCORE = 80
SCAN_DEGRADED_SCORE = 80
RUNNING_SERVICE_STATUS = "running"


def clamp(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity; round() would give banker's rounding."""
    return int(math.floor(value + 0.5))


def score_performance(performance: PerformanceMetrics) -> float:
    """Worst of CPU and memory headroom."""
    score = float(MAX_SCORE)
    if performance.cpu_usage_percent is not None:
        score = MAX_SCORE - performance.cpu_usage_percent
    if performance.memory_usage_percent is not None:
        score = min(score, MAX_SCORE - performance.memory_usage_percent)
    return clamp(score)


def score_disk(disks: tuple[DiskVolume, ...]) -> float:
    """100 minus mean usage over all volumes; a volume without usage counts as 0%."""
    if not disks:
        return float(MAX_SCORE)
    used = sum(d.usage_percent for d in disks if d.usage_percent is not None)
    return clamp(MAX_SCORE - used / len(disks))


def score_memory(memory: MemoryHealth) -> float:
    if memory.usage_percent is None:
        return float(MAX_SCORE)
    return clamp(MAX_SCORE - memory.usage_percent)


def score_network(network: NetworkHealth) -> float:
    # An empty interface list carries no information; treat it as absent
    if not network.interfaces:
        return float(MAX_SCORE)
    up = sum(1 for ni in network.interfaces if ni.is_up)
    if up == 0:
        return float(MIN_SCORE)
    if up < len(network.interfaces):
        return float(PARTIAL_NETWORK_SCORE)
    return float(MAX_SCORE)


def score_services(services: tuple[ServiceEntry, ...]) -> float:
    return _tiered_penalty([s.status for s in services], SERVICE_PENALTIES)


def score_security(security: SecurityHealth) -> float:
    severities = [v.severity for v in security.vulnerabilities or ()]
    return _tiered_penalty(severities, VULNERABILITY_PENALTIES)


def _tiered_penalty(labels: list[str | None], penalties: list[SeverityPenalty]) -> float:
    normalized = [label.lower() for label in labels if label]
    for penalty in penalties:
        count = normalized.count(penalty.severity)
        if count > 0:
            return clamp(MAX_SCORE - penalty.points * count)
    return float(MAX_SCORE)


def compose_overall(categories: dict[str, float]) -> int:
    """Weighted sum of category scores, rounded half-up and clamped.

    Args:
        categories: Category name to (unrounded) score; missing names score 100

    Returns:
        Overall score in 0..100
    """
    total = sum(
        weight * categories.get(name, MAX_SCORE) for name, weight in CATEGORY_WEIGHTS.items()
    )
    return int(clamp(round_half_up(total)))


def score_extracted(metrics: ExtractedMetrics) -> HealthScore:
    """Run the category scorers and composer over extracted metrics."""
    categories = {
        "performance": score_performance(metrics.performance),
        "disk": score_disk(metrics.disks),
        "memory": score_memory(metrics.memory),
        "network": score_network(metrics.network),
        "services": score_services(metrics.services),
        "security": score_security(metrics.security),
    }
    return _build_score(compose_overall(categories), categories, metrics)


def calculate_health_score(raw: RawHealthScan | None) -> HealthScore:
    """Full pipeline for a single raw record.

    Returns the all-100 default when raw is None or empty.
    """
    if not raw:
        return HealthScore.perfect()
    return score_extracted(extract_metrics(raw))


def score_health_scan(
    raw: RawHealthScan,
    policy: ScanOverallPolicy = ScanOverallPolicy.TRUST_STORED,
) -> HealthScore:
    """Score a comprehensive health scan with the scan shortcut rules.

    Scans carry agent-side summaries (free space, connectivity, service run
    state, UAC) rather than the per-item detail the category scorers read.
    With TRUST_STORED the agent's precomputed overall ("value") is reported
    as-is when present, so the dashboard matches what was stored at ingestion.

    Args:
        raw: Health scan record
        policy: Whether to trust the stored overall or recompute it

    Returns:
        HealthScore for the scan
    """
    metrics = extract_metrics(raw)
    perf = metrics.performance

    performance = float(MAX_SCORE)
    if perf.cpu_usage_percent is not None:
        loads = [perf.cpu_usage_percent]
        if perf.memory_usage_percent is not None:
            loads.append(perf.memory_usage_percent)
        performance = clamp(MAX_SCORE - sum(loads) / len(loads))

    disk = float(MAX_SCORE)
    if metrics.disks and metrics.disks[0].free_space_percent is not None:
        disk = clamp(metrics.disks[0].free_space_percent)

    network = float(MAX_SCORE)
    if metrics.network.internet_connectivity is False:
        network = float(SCAN_DEGRADED_SCORE)

    services = float(MAX_SCORE)
    if any((s.status or "").lower() != RUNNING_SERVICE_STATUS for s in metrics.services):
        services = float(SCAN_DEGRADED_SCORE)

    security = float(MAX_SCORE)
    if metrics.security.uac_enabled is False:
        security = float(SCAN_DEGRADED_SCORE)

    categories = {
        "performance": performance,
        "disk": disk,
        "memory": score_memory(metrics.memory),
        "network": network,
        "services": services,
        "security": security,
    }

    stored = _stored_overall(raw)
    if policy == ScanOverallPolicy.TRUST_STORED and stored is not None:
        overall = int(clamp(round_half_up(stored)))
    else:
        overall = compose_overall(categories)

    return _build_score(overall, categories, metrics)


def health_band(score: int, healthy_threshold: int = 80, warning_threshold: int = 60) -> HealthBand:
    """Bucket an overall score: >= 80 healthy, 60..79 warning, < 60 critical."""
    if score >= healthy_threshold:
        return HealthBand.HEALTHY
    if score >= warning_threshold:
        return HealthBand.WARNING
    return HealthBand.CRITICAL


def _stored_overall(raw: RawHealthScan) -> float | None:
    value = raw.get("value")
    if isinstance(value, str):
        return None
    return as_number(value)


def _build_score(
    overall: int, categories: dict[str, float], metrics: ExtractedMetrics
) -> HealthScore:
    return HealthScore(
        overall=overall,
        performance=round_half_up(categories["performance"]),
        disk=round_half_up(categories["disk"]),
        memory=round_half_up(categories["memory"]),
        network=round_half_up(categories["network"]),
        services=round_half_up(categories["services"]),
        security=round_half_up(categories["security"]),
        details=metrics.raw,
    )
