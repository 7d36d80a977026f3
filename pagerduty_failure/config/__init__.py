"""Configuration management for the PagerDuty failure notifier."""

from .environment import load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    ClientConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    PagerdutyConfig,
    PagerdutySettings,
    configure,
    default_config,
    get_config,
    reset,
)

__all__ = [
    # Process-wide configuration
    "default_config",
    "configure",
    "reset",
    "get_config",
    # Loaders
    "load_config",
    "load_environment_config",
    # Models
    "PagerdutyConfig",
    "PagerdutySettings",
    "AppConfig",
    "ClientConfig",
    "LoggingConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
