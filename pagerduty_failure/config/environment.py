"""Environment variable loading for PagerDuty settings."""

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .models import PagerdutyConfig

ENVIRONMENT_VARIABLES = {
    "subdomain": "PAGERDUTY_SUBDOMAIN",
    "service_key": "PAGERDUTY_SERVICE_KEY",
    "username": "PAGERDUTY_USERNAME",
    "password": "PAGERDUTY_PASSWORD",
}


def load_environment_config(
    load_dotenv_file: bool = True,
    config: Optional[PagerdutyConfig] = None,
    dotenv_path: Optional[Path] = None,
) -> PagerdutyConfig:
    """
    Load PagerDuty settings from environment variables.

    Environment variables (all optional):
    - PAGERDUTY_SUBDOMAIN: Account subdomain of the PagerDuty endpoint
    - PAGERDUTY_SERVICE_KEY: Default Generic API service key
    - PAGERDUTY_USERNAME: User for authenticating to PagerDuty
    - PAGERDUTY_PASSWORD: Password for authenticating to PagerDuty

    Unset or empty variables leave the matching setting unset. Nothing is
    validated; an incomplete configuration only fails when an incident is
    triggered.

    Args:
        load_dotenv_file: Load a .env file into the environment first; variables
            already set in the environment take precedence
        config: Configuration to populate (a new instance if None)
        dotenv_path: .env file to load (searched for from the working directory if None)

    Returns:
        The populated PagerdutyConfig
    """
    if load_dotenv_file:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    target = config if config is not None else PagerdutyConfig()

    def apply(settings: PagerdutyConfig) -> None:
        for attribute, variable in ENVIRONMENT_VARIABLES.items():
            setattr(settings, attribute, os.getenv(variable) or None)

    return target.configure(apply)
