"""Configuration model exports.

    from mnexium.config.models import APIConfig, DemoConfig
"""

from mnexium.config.models.api import DEFAULT_BASE_URL, APIConfig
from mnexium.config.models.demo import DemoConfig
from mnexium.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from mnexium.config.models.providers import ProvidersConfig

__all__ = [
    "DEFAULT_BASE_URL",
    "APIConfig",
    "DemoConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "ProvidersConfig",
    "TracingConfig",
]
