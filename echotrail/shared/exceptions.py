"""Shared exceptions for the story adaptation core.

Every error raised by EchoTrail derives from EchoTrailError and carries a
``details`` dict that the CLI and logs render via ``to_dict()``.

Degraded inputs (missing weather, failing providers, unknown content ids)
never surface as exceptions to callers of the analyzer or the engine; only
invariant violations propagate.
"""

from typing import Any


class EchoTrailError(Exception):
    """Root of the EchoTrail error hierarchy.

    Catch this at process boundaries (the CLI) to report any failure.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging and display."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# ===================
# Resource Errors
# ===================

class ResourceNotFoundError(EchoTrailError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            {"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class ContentNotFoundError(ResourceNotFoundError):
    """Raised when a story is not in the library."""

    def __init__(self, content_id: str) -> None:
        super().__init__("Story", content_id)


# ===================
# Validation Errors
# ===================

class ValidationError(EchoTrailError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            f"Validation error for '{field}': {message}",
            {"field": field}
        )


# ===================
# Integration Errors
# ===================

class ExternalServiceError(EchoTrailError):
    """Raised when an external collaborator call fails."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(
            f"External service error ({service}): {message}",
            {"service": service}
        )


class WeatherProviderError(ExternalServiceError):
    """Raised when a weather reading cannot be obtained."""

    def __init__(self, message: str) -> None:
        super().__init__("Weather", message)


class LocationProviderError(ExternalServiceError):
    """Raised when the location provider cannot supply a sample."""

    def __init__(self, message: str) -> None:
        super().__init__("Location", message)


class PoiProviderError(ExternalServiceError):
    """Raised when nearby points of interest cannot be looked up."""

    def __init__(self, message: str) -> None:
        super().__init__("PointsOfInterest", message)


# ===================
# Programming Errors
# ===================

class InvariantViolationError(EchoTrailError):
    """Raised when an internal invariant does not hold.

    This indicates a defect, not a degraded input, and is never caught
    inside the core.
    """

    def __init__(self, invariant: str, message: str) -> None:
        super().__init__(
            f"Invariant violated ({invariant}): {message}",
            {"invariant": invariant}
        )
