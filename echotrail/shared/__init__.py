"""Shared utilities and common code."""

from echotrail.shared.config import Settings, get_settings
from echotrail.shared.exceptions import (
    ContentNotFoundError,
    EchoTrailError,
    ExternalServiceError,
    InvariantViolationError,
    LocationProviderError,
    PoiProviderError,
    ResourceNotFoundError,
    ValidationError,
    WeatherProviderError,
)
from echotrail.shared.log_config import setup_logging
from echotrail.shared.models import BaseSchema

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "setup_logging",
    # Models
    "BaseSchema",
    # Exceptions
    "EchoTrailError",
    "ResourceNotFoundError",
    "ContentNotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "WeatherProviderError",
    "LocationProviderError",
    "PoiProviderError",
    "InvariantViolationError",
]
