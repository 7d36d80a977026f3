"""Configuration models for the PagerDuty failure notifier.

PagerdutyConfig is the mutable settings holder the notifier reads on every
report. The pydantic models describe the YAML configuration file and the
frozen per-report snapshot.
"""

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field, field_validator

SETTING_NAMES = ("subdomain", "service_key", "username", "password")


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class PagerdutySettings(BaseModel):
    """PagerDuty account settings.

    Every field is optional and unvalidated beyond its type: missing values
    only surface when an incident is actually triggered. Also used as the
    frozen snapshot a single report reads from.
    """

    subdomain: Optional[str] = Field(None, description="Account subdomain of the PagerDuty endpoint")
    service_key: Optional[str] = Field(
        None, description="Default Generic API service key incidents are routed to"
    )
    username: Optional[str] = Field(None, description="User for authenticating to PagerDuty")
    password: Optional[str] = Field(None, description="Password for authenticating to PagerDuty")

    model_config = {"frozen": True}


class ClientConfig(BaseModel):
    """Outbound HTTP settings for the default paging client."""

    timeout: int = Field(30, ge=1, le=300, description="Request timeout in seconds")
    user_agent: str = Field(
        "PagerdutyFailure/1.0", min_length=1, description="User-Agent string for HTTP requests"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root object of the YAML configuration file."""

    pagerduty: PagerdutySettings = Field(
        default_factory=PagerdutySettings, description="PagerDuty account settings"
    )
    client: ClientConfig = Field(default_factory=ClientConfig, description="HTTP client settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )


class PagerdutyConfig:
    """Mutable PagerDuty settings with an explicit configure/reset lifecycle.

    Attributes:
        subdomain: The subdomain for the PagerDuty endpoint url
        service_key: The default GUID of the PagerDuty "Generic API" service to
            be notified, as listed on the service detail page. Job classes may
            override it with their own ``pagerduty_service_key``.
        username: The user for authenticating to PagerDuty
        password: The password for authenticating to PagerDuty

    No validation happens here; any combination of set and unset fields is
    accepted.
    """

    def __init__(
        self,
        subdomain: Optional[str] = None,
        service_key: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.subdomain = subdomain
        self.service_key = service_key
        self.username = username
        self.password = password

    def configure(self, mutator: Callable[["PagerdutyConfig"], None]) -> "PagerdutyConfig":
        """Apply ``mutator`` to this configuration.

        Example:
            >>> def settings(config):
            ...     config.subdomain = "my_subdomain"
            ...     config.service_key = "123abc456def"
            ...     config.username = "my_user"
            ...     config.password = "my_pass"
            >>> default_config.configure(settings)

        Returns:
            This configuration, for chaining
        """
        mutator(self)
        return self

    def reset(self) -> None:
        """Reset every setting to unset."""
        for name in SETTING_NAMES:
            setattr(self, name, None)

    def update(self, settings: PagerdutySettings) -> "PagerdutyConfig":
        """Copy every value from ``settings``, including unset ones."""
        for name in SETTING_NAMES:
            setattr(self, name, getattr(settings, name))
        return self

    def snapshot(self) -> PagerdutySettings:
        """Return a frozen copy of the current settings.

        Values are copied as-is, without validation; a bad setting is left
        for the paging client to reject.
        """
        return PagerdutySettings.model_construct(
            **{name: getattr(self, name) for name in SETTING_NAMES}
        )

    def __repr__(self) -> str:
        # Password is never rendered
        return (
            f"PagerdutyConfig(subdomain={self.subdomain!r}, "
            f"service_key={self.service_key!r}, username={self.username!r}, "
            f"password={'***' if self.password else None!r})"
        )


default_config = PagerdutyConfig()


def get_config() -> PagerdutyConfig:
    """Return the process-wide configuration instance."""
    return default_config


def configure(mutator: Callable[[PagerdutyConfig], None]) -> PagerdutyConfig:
    """Configure the process-wide instance. See PagerdutyConfig.configure()."""
    return default_config.configure(mutator)


def reset() -> None:
    """Reset the process-wide instance to its unset state."""
    default_config.reset()
