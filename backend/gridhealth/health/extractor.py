"""Metric extraction from raw health records.

Agents of different versions send slightly different shapes, so every field is
optional and a few aliases are accepted. Nothing here raises: a missing or
malformed field is reported as absent (None / empty) and scores neutrally.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any

from gridhealth.health.models import (
    DiskVolume,
    ExtractedMetrics,
    MemoryHealth,
    NetworkHealth,
    NetworkInterface,
    PerformanceMetrics,
    RawHealthScan,
    SecurityHealth,
    ServiceEntry,
    Vulnerability,
)


def extract_metrics(raw: RawHealthScan | None) -> ExtractedMetrics:
    """Pull the six category sub-structures out of a raw record.

    Args:
        raw: Stored metric record, or None

    Returns:
        ExtractedMetrics with empty structures for missing categories
    """
    if not isinstance(raw, Mapping):
        raw = {}

    performance = _mapping(raw.get("performance_metrics"))
    disks = _records(raw.get("disk_health"))
    memory = _mapping(raw.get("memory_health"))
    network = _mapping(raw.get("network_health"))
    services = _records(raw.get("service_health"))
    security = _mapping(raw.get("security_health"))

    return ExtractedMetrics(
        performance=_performance(performance),
        disks=tuple(_disk(d) for d in disks),
        memory=MemoryHealth(
            usage_percent=_first_number(memory, "usage_percent", "memory_usage_percent")
        ),
        network=_network(network),
        services=tuple(
            ServiceEntry(
                name=_text(s.get("name") or s.get("service_name")),
                status=_text(_first_present(s, "status", "state")),
            )
            for s in services
        ),
        security=_security(security),
        raw={
            "performance": performance,
            "disk": disks,
            "memory": memory,
            "network": network,
            "services": services,
            "security": security,
        },
    )


def _performance(data: Mapping[str, Any]) -> PerformanceMetrics:
    process_count = as_number(data.get("process_count"))
    thread_count = as_number(data.get("thread_count"))
    return PerformanceMetrics(
        cpu_usage_percent=_first_number(data, "cpu_usage_percent", "cpu_usage"),
        memory_usage_percent=_first_number(data, "memory_usage_percent", "memory_usage"),
        process_count=int(process_count) if process_count is not None else None,
        thread_count=int(thread_count) if thread_count is not None else None,
    )


def _disk(data: Mapping[str, Any]) -> DiskVolume:
    free = as_number(data.get("free_space_percent"))
    usage = as_number(data.get("usage_percent"))
    if usage is None and free is not None:
        usage = 100 - free
    return DiskVolume(
        drive_letter=_text(data.get("drive_letter") or data.get("mountpoint")),
        usage_percent=usage,
        free_space_percent=free,
        health_status=_text(data.get("health_status")),
    )


def _network(data: Mapping[str, Any]) -> NetworkHealth:
    interfaces = None
    reported = data.get("network_interfaces")
    if isinstance(reported, Sequence) and not isinstance(reported, (str, bytes)):
        interfaces = tuple(
            NetworkInterface(name=_text(ni.get("name")), is_up=bool(ni.get("is_up")))
            for ni in reported
            if isinstance(ni, Mapping)
        )
    return NetworkHealth(
        interfaces=interfaces,
        internet_connectivity=_flag(data.get("internet_connectivity")),
    )


def _security(data: Mapping[str, Any]) -> SecurityHealth:
    vulnerabilities = None
    reported = data.get("vulnerabilities")
    if isinstance(reported, Sequence) and not isinstance(reported, (str, bytes)):
        vulnerabilities = tuple(
            Vulnerability(
                identifier=_text(v.get("id") or v.get("cve")),
                severity=_text(v.get("severity")),
            )
            for v in reported
            if isinstance(v, Mapping)
        )
    return SecurityHealth(
        vulnerabilities=vulnerabilities,
        uac_enabled=_flag(data.get("uac_enabled")),
    )


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _records(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        return []
    return [dict(item) for item in value if isinstance(item, Mapping)]


def as_number(value: Any) -> float | None:
    """Read a finite number from a JSON value, or None if it is not one."""
    # bool is an int subclass but never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _first_number(data: Mapping[str, Any], *keys: str) -> float | None:
    for key in keys:
        number = as_number(data.get(key))
        if number is not None:
            return number
    return None


def _flag(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _text(value: Any) -> str | None:
    return None if value is None else str(value)
