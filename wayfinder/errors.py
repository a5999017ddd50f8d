"""Error kinds raised by the navigation core and its sensor collaborators.

Hierarchy:
    NavigationError
    ├── InvalidTransitionError   operation not allowed in the current mode
    └── SensorError              camera / sensor activation failures
        ├── PermissionDeniedError    user declined camera or motion access
        ├── SensorUnavailableError   required sensor or API missing
        └── StreamAcquisitionError   generic camera/stream failure

Sensor errors are never fatal: the state machine records their `message` as
the session's last error and keeps running in a degraded mode.
"""

from typing import Optional


class NavigationError(Exception):
    """Base class for all wayfinder errors."""


class InvalidTransitionError(NavigationError):
    """Raised when an operation is not valid in the current navigation mode."""

    def __init__(self, operation: str, mode: object, reason: Optional[str] = None):
        self.operation = operation
        self.mode = mode
        detail = f"{operation}() is not valid in mode {mode}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class SensorError(NavigationError):
    """Base class for non-fatal sensor and camera failures.

    Attributes:
        kind: Short machine-readable error kind.
        message: User-facing message surfaced at the rendering boundary.
    """

    kind = "sensor_error"
    default_message = "Could not start AR. Please check permissions."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PermissionDeniedError(SensorError):
    """The user declined camera or motion-sensor access."""

    kind = "permission_denied"
    default_message = "Permission denied. Please allow camera and motion sensor access."


class SensorUnavailableError(SensorError):
    """A required sensor or platform API is missing on the device."""

    kind = "sensor_unavailable"
    default_message = "Required motion sensors are not available on this device."


class StreamAcquisitionError(SensorError):
    """Generic failure to acquire the camera passthrough stream."""

    kind = "stream_acquisition_failed"
