"""Health notification checks."""

from gridhealth.notifications.critical_health import (
    CriticalHealthAlert,
    CriticalHealthChecker,
    NotificationRecipient,
    NotificationSink,
)

__all__ = [
    "CriticalHealthAlert",
    "CriticalHealthChecker",
    "NotificationRecipient",
    "NotificationSink",
]
