"""Health engine error types."""


class HealthEngineError(Exception):
    """Base exception for health engine errors."""
    pass


class NotFoundError(HealthEngineError):
    """A device or organization record does not exist."""
    pass


class DeviceNotFoundError(NotFoundError):
    """No device row for the requested id."""

    def __init__(self, device_id: str):
        super().__init__(f"Device '{device_id}' not found")
        self.device_id = device_id


class OrganizationNotFoundError(NotFoundError):
    """No organization row for the requested id."""

    def __init__(self, organization_id: str):
        super().__init__(f"Organization '{organization_id}' not found")
        self.organization_id = organization_id
