"""Wire a YAML configuration file into a ready-to-use FailureNotifier."""

import os
from pathlib import Path
from typing import Optional

from pagerduty_failure.client import build_client_factory
from pagerduty_failure.config import PagerdutyConfig, default_config, load_config
from pagerduty_failure.logging import get_logger
from pagerduty_failure.logging.config import configure_logging_from_config
from pagerduty_failure.notifier import FailureNotifier

logger = get_logger(__name__, component="bootstrap")


def setup_from_file(
    config_path: Path,
    config: Optional[PagerdutyConfig] = None,
    log_level: Optional[str] = None,
    environment: Optional[str] = None,
) -> FailureNotifier:
    """
    Load a configuration file, configure logging and build a notifier.

    The ``pagerduty`` section populates ``config``, the ``logging`` section
    configures the root logger and the ``client`` section sets the timeout
    and User-Agent of every client the notifier creates.

    Log level priority: ``log_level`` argument, then LOG_LEVEL environment
    variable, then the file.

    Args:
        config_path: Path to the YAML configuration file
        config: Settings to populate (process-wide default if None)
        log_level: Log level overriding the file
        environment: Environment label for log records (ENVIRONMENT variable if None)

    Returns:
        FailureNotifier reading ``config``

    Raises:
        ConfigurationError: If the file is missing, unparsable or mistyped
    """
    target = config if config is not None else default_config
    target, app_config = load_config(config_path, config=target)

    logging_config = app_config.logging
    level = log_level or os.environ.get("LOG_LEVEL")
    if level:
        logging_config = logging_config.model_copy(update={"level": level.upper()})
    configure_logging_from_config(logging_config, environment=environment)

    logger.info(
        "PagerDuty failure notifier configured",
        extra={
            "event": "bootstrap.configured",
            "config_path": str(config_path),
            "timeout": app_config.client.timeout,
        },
    )

    return FailureNotifier(
        target,
        client_factory=build_client_factory(**app_config.client.model_dump()),
    )
