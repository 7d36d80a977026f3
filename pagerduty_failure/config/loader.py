"""YAML configuration loader for the PagerDuty failure notifier."""

from pathlib import Path
from typing import Optional, Tuple

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import AppConfig, PagerdutyConfig


def load_config(
    config_path: Path,
    config: Optional[PagerdutyConfig] = None,
) -> Tuple[PagerdutyConfig, AppConfig]:
    """
    Load PagerDuty, client and logging settings from a YAML file.

    Example file::

        pagerduty:
          subdomain: my_subdomain
          service_key: 123abc456def
          username: my_user
          password: my_pass
        client:
          timeout: 10
        logging:
          level: INFO
          format: json

    Every section is optional. An empty file yields all defaults.

    Args:
        config_path: Path to the configuration file
        config: PagerdutyConfig to populate (a new instance if None)

    Returns:
        Tuple of (PagerdutyConfig, AppConfig)

    Raises:
        ConfigurationError: If the file is missing, unparsable or mistyped
    """
    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            suggestions=[f"Ensure {config_path} exists and is readable"],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_path} is readable", "Check file permissions"],
        )

    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level",
            suggestions=["Use 'pagerduty:', 'client:' and 'logging:' sections"],
        )

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            if error["type"] in ("string_type", "int_type", "int_parsing"):
                errors.append(
                    f"Invalid type for '{field_path}': {error['msg']}, got {error.get('input')!r}"
                )
            else:
                errors.append(f"{field_path}: {error['msg']}")

        raise ConfigurationError(
            "Configuration validation failed",
            errors=errors,
            suggestions=[
                "PagerDuty settings must be strings",
                "Verify field types match the expected schema",
            ],
        )

    target = config if config is not None else PagerdutyConfig()
    target.update(app_config.pagerduty)
    return target, app_config
